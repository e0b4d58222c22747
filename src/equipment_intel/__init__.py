"""Equipment Intel: structured equipment intelligence from the ODIN equipment guide and news."""

from equipment_intel.browser import (
    DetailModalStateMachine,
    EquipmentScraper,
    GateDismissal,
    ResultEnumerator,
    SessionController,
    TabContentExtractor,
)
from equipment_intel.cache import CachedIntel, InMemoryRecordCache, NoOpRecordCache, RecordCache, cache_key
from equipment_intel.config import IntelConfig, SelectorProfile, load_config
from equipment_intel.config.factory import create_from_config
from equipment_intel.data import (
    CardOutcome,
    CardPreview,
    DerivationStatus,
    DetailExtraction,
    EquipmentRecord,
    GateState,
    ModalState,
    NewsArticle,
    QueryResult,
    QueryStatus,
    TabContent,
)
from equipment_intel.errors import (
    CardExtractionEmpty,
    CardOpenTimeout,
    GateTimeout,
    IntelError,
    ModalStuck,
    NavigationFailure,
    NewsFetchFailure,
    ResultsNotFound,
    SessionLaunchFailure,
)
from equipment_intel.news import GNewsFeed, GoogleNewsRSSFeed, NewsAggregator, NewsFeed, summarize_news
from equipment_intel.normalize import RecordNormalizer
from equipment_intel.pipeline import IntelligencePipeline, Pipeline
from equipment_intel.report import IntelligenceReport, generate_report
from equipment_intel.run_logger import RunLogger

__all__ = [
    # Models
    "CardOutcome",
    "CardPreview",
    "DerivationStatus",
    "DetailExtraction",
    "EquipmentRecord",
    "GateState",
    "ModalState",
    "NewsArticle",
    "QueryResult",
    "QueryStatus",
    "TabContent",
    # Errors
    "CardExtractionEmpty",
    "CardOpenTimeout",
    "GateTimeout",
    "IntelError",
    "ModalStuck",
    "NavigationFailure",
    "NewsFetchFailure",
    "ResultsNotFound",
    "SessionLaunchFailure",
    # Protocols
    "NewsFeed",
    "Pipeline",
    "RecordCache",
    # Browser
    "DetailModalStateMachine",
    "EquipmentScraper",
    "GateDismissal",
    "ResultEnumerator",
    "SessionController",
    "TabContentExtractor",
    # Normalization
    "RecordNormalizer",
    # News
    "GNewsFeed",
    "GoogleNewsRSSFeed",
    "NewsAggregator",
    "summarize_news",
    # Report
    "IntelligenceReport",
    "generate_report",
    # Cache
    "CachedIntel",
    "InMemoryRecordCache",
    "NoOpRecordCache",
    "cache_key",
    # Pipelines
    "IntelligencePipeline",
    # Logging
    "RunLogger",
    # Config
    "IntelConfig",
    "SelectorProfile",
    "create_from_config",
    "load_config",
]
