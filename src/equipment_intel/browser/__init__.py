from equipment_intel.browser.gate import GateDismissal, GateStrategy, build_gate_strategies
from equipment_intel.browser.modal import TRANSITIONS, DetailModalStateMachine
from equipment_intel.browser.results import ResultCard, ResultEnumerator
from equipment_intel.browser.scraper import EquipmentScraper, ScrapeResult
from equipment_intel.browser.session import BrowserSession, SessionController
from equipment_intel.browser.tabs import TabContentExtractor

__all__ = [
    "TRANSITIONS",
    "BrowserSession",
    "DetailModalStateMachine",
    "EquipmentScraper",
    "GateDismissal",
    "GateStrategy",
    "ResultCard",
    "ResultEnumerator",
    "ScrapeResult",
    "SessionController",
    "TabContentExtractor",
    "build_gate_strategies",
]
