"""Browser half of a query: session, gate, cards, overlays."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field

from playwright.async_api import Error as PlaywrightError

from equipment_intel.browser.gate import GateDismissal
from equipment_intel.browser.modal import DetailModalStateMachine
from equipment_intel.browser.results import ResultEnumerator
from equipment_intel.browser.session import SessionController
from equipment_intel.config.models import ScraperConfig
from equipment_intel.data import CardOutcome, GateState
from equipment_intel.errors import NavigationFailure, SessionLaunchFailure
from equipment_intel.run_logger import RunLogger
from equipment_intel.url import build_search_url

logger = logging.getLogger(__name__)


@dataclass
class ScrapeResult:
    """Per-card outcomes for one query, in card order."""

    search_url: str
    gate_state: GateState = GateState.UNKNOWN
    outcomes: list[CardOutcome] = field(default_factory=list)


class EquipmentScraper:
    """Run the browser extraction for one query.

    Cards are processed strictly sequentially on a single page. A failure
    on one card never stops the next one; only launch failures and missing
    results abort the whole run.

    Args:
        session_controller: Launches the browser.
        config: Selector profile, timings, and card cap.
        run_logger: Optional RunLogger for stage records.
    """

    def __init__(
        self,
        session_controller: SessionController,
        config: ScraperConfig | None = None,
        *,
        run_logger: RunLogger | None = None,
    ) -> None:
        self._sessions = session_controller
        self._config = config or ScraperConfig()
        self._run_logger = run_logger

    async def scrape(self, query: str) -> ScrapeResult:
        """Extract every card found for ``query``.

        Raises:
            SessionLaunchFailure: If the browser cannot start.
            ResultsNotFound: If the search page yields no cards.
        """
        profile = self._config.selectors
        timing = self._config.timing
        browser = self._sessions.config
        search_url = build_search_url(profile.search_url_template, query)
        result = ScrapeResult(search_url=search_url)

        session = await self._sessions.open()
        try:
            try:
                page = await session.new_page(browser.viewport, browser.identity)
            except PlaywrightError as e:
                raise SessionLaunchFailure(f"Could not open a page: {e}") from e

            t0 = time.monotonic()
            logger.info("Navigating to %s (selectors %s)", search_url, profile.version)
            try:
                await page.goto(search_url, wait_until="networkidle", timeout=timing.navigation_timeout_ms)
                await page.wait_for_timeout(timing.post_navigation_settle_ms)
            except PlaywrightError as e:
                raise NavigationFailure(f"Search page failed to load: {e}") from e
            self._log("search_page", {"url": search_url}, {"final_url": page.url}, t0)

            t0 = time.monotonic()
            gate = GateDismissal(
                profile.gate,
                probe_timeout_ms=timing.gate_timeout_ms,
                settle_ms=timing.gate_settle_ms,
            )
            result.gate_state = await gate.run(page)
            self._log("gate", None, {"state": result.gate_state, "strategy": gate.dismissed_by}, t0)

            t0 = time.monotonic()
            enumerator = ResultEnumerator(
                profile, timeout_ms=timing.results_timeout_ms, max_cards=self._config.max_cards
            )
            cards = await enumerator.enumerate(page)
            self._log("enumerate", None, [c.preview for c in cards], t0)

            machine = DetailModalStateMachine(profile, timing)
            for card in cards:
                t0 = time.monotonic()
                logger.info("Processing card %d/%d: %s", card.index + 1, len(cards), card.preview.title)
                outcome = await machine.process_card(page, card)
                result.outcomes.append(outcome)
                self._log("card", card.preview, outcome, t0)
        finally:
            await session.close()

        return result

    def _log(self, stage: str, input_data: object, output_data: object, t0: float) -> None:
        if self._run_logger:
            self._run_logger.log_stage(
                stage=stage,
                component=type(self).__name__,
                input_data=input_data,
                output_data=output_data,
                duration_seconds=time.monotonic() - t0,
            )
