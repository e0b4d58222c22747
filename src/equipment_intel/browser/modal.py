"""Detail overlay state machine: open a card, extract it, close it verifiably.

Every transition is validated against ``TRANSITIONS`` and every close attempt
is followed by a fresh DOM probe, so "the click worked" is never assumed.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Locator, Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from equipment_intel.browser.results import ResultCard
from equipment_intel.browser.tabs import TabContentExtractor
from equipment_intel.config.models import SelectorProfile, TimingConfig
from equipment_intel.data import CardFailure, CardOutcome, DetailExtraction, ModalState
from equipment_intel.errors import CardExtractionEmpty, CardOpenTimeout, IntelError, ModalStuck

logger = logging.getLogger(__name__)

TRANSITIONS: dict[ModalState, frozenset[ModalState]] = {
    ModalState.CLOSED: frozenset({ModalState.OPENING}),
    ModalState.OPENING: frozenset({ModalState.OPEN, ModalState.CLOSING}),
    ModalState.OPEN: frozenset({ModalState.EXTRACTING, ModalState.CLOSING}),
    ModalState.EXTRACTING: frozenset({ModalState.CLOSING}),
    ModalState.CLOSING: frozenset({ModalState.CLOSED_VERIFIED, ModalState.STUCK}),
    ModalState.CLOSED_VERIFIED: frozenset(),
    ModalState.STUCK: frozenset(),
}

_REMOVE_NODES_JS = """
(selectors) => {
    let removed = 0;
    for (const selector of selectors) {
        document.querySelectorAll(selector).forEach((node) => { node.remove(); removed++; });
    }
    document.body.classList.remove('modal-open');
    document.body.style.overflow = '';
    return removed;
}
"""


class _CardRun:
    """Mutable bookkeeping for one card's pass through the state machine."""

    def __init__(self, index: int) -> None:
        self.index = index
        self.state = ModalState.CLOSED
        self.transitions: list[ModalState] = [ModalState.CLOSED]
        self.failures: list[CardFailure] = []

    def advance(self, target: ModalState) -> None:
        if target not in TRANSITIONS[self.state]:
            raise RuntimeError(f"Illegal overlay transition {self.state} -> {target}")
        self.state = target
        self.transitions.append(target)

    def fail(self, error: IntelError) -> None:
        logger.warning("Card %d: %s: %s", self.index + 1, type(error).__name__, error)
        self.failures.append(CardFailure(kind=type(error).__name__, message=str(error)))


class DetailModalStateMachine:
    """Process result cards one at a time through their detail overlay.

    Args:
        profile: Active selector profile.
        timing: Bounded waits and settle intervals.
        tab_extractor: Extractor run while the overlay is open.
    """

    def __init__(
        self,
        profile: SelectorProfile,
        timing: TimingConfig,
        tab_extractor: TabContentExtractor | None = None,
    ) -> None:
        self._profile = profile
        self._timing = timing
        self._tabs = tab_extractor or TabContentExtractor(profile, settle_ms=timing.tab_settle_ms)
        self._close_strategies: list[tuple[str, Callable[[Page], Awaitable[bool]]]] = [
            ("close_control", self._click_close_control),
            ("escape_key", self._press_escape),
            ("backdrop_click", self._click_backdrop),
            ("forced_removal", self._remove_overlay),
        ]

    async def process_card(self, page: Page, card: ResultCard) -> CardOutcome:
        """Drive one card to CLOSED_VERIFIED or STUCK. Never raises for page errors."""
        run = _CardRun(card.index)

        if await self.overlay_present(page):
            logger.warning("Card %d: overlay from a previous card still present", card.index + 1)
            if not await self.close(page):
                run.fail(ModalStuck("Leftover overlay could not be closed; extraction may be unreliable"))

        extraction: DetailExtraction | None = None
        run.advance(ModalState.OPENING)
        try:
            if await self._open(page, card, run):
                run.advance(ModalState.OPEN)
                await page.wait_for_timeout(self._timing.overlay_settle_ms)
                run.advance(ModalState.EXTRACTING)
                extraction = await self._extract(page, run)
        except PlaywrightError as e:
            if run.state is ModalState.OPENING:
                run.fail(CardOpenTimeout(f"Card activation aborted: {e}"))
            else:
                run.fail(CardExtractionEmpty(f"Extraction aborted: {e}"))

        run.advance(ModalState.CLOSING)
        if await self.close(page):
            run.advance(ModalState.CLOSED_VERIFIED)
        else:
            run.advance(ModalState.STUCK)
            run.fail(ModalStuck("Overlay still present after every close strategy"))

        return CardOutcome(
            index=card.index,
            preview=card.preview,
            final_state=run.state,
            extraction=extraction,
            transitions=tuple(run.transitions),
            failures=tuple(run.failures),
        )

    async def overlay_present(self, page: Page) -> bool:
        try:
            return await page.locator(self._profile.overlay_root).first.is_visible()
        except PlaywrightError:
            logger.debug("Overlay probe failed; assuming present", exc_info=True)
            return True

    async def close(self, page: Page) -> bool:
        """Run the close strategies in order until the overlay is verifiably gone."""
        if not await self.overlay_present(page):
            return True
        for name, attempt in self._close_strategies:
            try:
                applied = await attempt(page)
            except PlaywrightError as e:
                logger.debug("Close strategy %s raised: %s", name, e)
                applied = False
            if not await self.overlay_present(page):
                logger.info("Overlay closed via %s", name)
                return True
            if applied:
                logger.debug("Close strategy %s applied but overlay remains", name)
        return False

    # ---- opening / extraction ------------------------------------------------

    async def _open(self, page: Page, card: ResultCard, run: _CardRun) -> bool:
        timeout = self._timing.overlay_timeout_ms
        try:
            target = await self._activation_target(card.locator)
            await target.click(timeout=timeout)
        except PlaywrightError as e:
            run.fail(CardOpenTimeout(f"Could not activate card: {e}"))
            return False

        try:
            await page.wait_for_selector(self._profile.overlay_root, state="visible", timeout=timeout)
        except PlaywrightTimeoutError:
            run.fail(CardOpenTimeout(f"Overlay did not appear within {timeout} ms"))
            return False
        except PlaywrightError as e:
            run.fail(CardOpenTimeout(f"Overlay wait aborted: {e}"))
            return False
        return True

    async def _activation_target(self, card: Locator) -> Locator:
        for selector in self._profile.card_activation:
            nested = card.locator(selector)
            if await nested.count() > 0:
                return nested.first
        return card

    async def _extract(self, page: Page, run: _CardRun) -> DetailExtraction | None:
        try:
            extraction = await self._tabs.extract(page)
        except PlaywrightError as e:
            run.fail(CardExtractionEmpty(f"Extraction aborted: {e}"))
            return None
        if extraction.is_empty:
            run.fail(CardExtractionEmpty("Overlay yielded no title, notes, or tab content"))
        return extraction

    # ---- close strategies ----------------------------------------------------

    async def _settle(self, page: Page) -> None:
        await page.wait_for_timeout(self._timing.close_settle_ms)

    async def _click_close_control(self, page: Page) -> bool:
        for selector in self._profile.overlay_close:
            control = page.locator(selector)
            if await control.count() > 0:
                await control.first.click(timeout=self._timing.overlay_timeout_ms)
                await self._settle(page)
                return True
        return False

    async def _press_escape(self, page: Page) -> bool:
        for _ in range(2):
            await page.keyboard.press("Escape")
            await self._settle(page)
        return True

    async def _click_backdrop(self, page: Page) -> bool:
        for selector in self._profile.overlay_backdrop:
            backdrop = page.locator(selector)
            if await backdrop.count() > 0:
                # Top-left corner lies outside the centered panel.
                await backdrop.first.click(
                    position={"x": 5, "y": 5}, force=True, timeout=self._timing.overlay_timeout_ms
                )
                await self._settle(page)
                return True
        return False

    async def _remove_overlay(self, page: Page) -> bool:
        selectors = [self._profile.overlay_root, *self._profile.overlay_backdrop]
        removed = await page.evaluate(_REMOVE_NODES_JS, selectors)
        await self._settle(page)
        return bool(removed)
