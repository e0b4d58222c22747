"""One-shot dismissal of the target site's mandatory disclaimer gate."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Locator, Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from equipment_intel.config.models import GateSelectors
from equipment_intel.data import GateState
from equipment_intel.errors import GateTimeout

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GateStrategy:
    """A named way to locate the gate's affirmative control."""

    name: str
    selector: str
    text: str | None = None

    def locate(self, page: Page) -> Locator:
        locator = page.locator(self.selector)
        if self.text is not None:
            locator = locator.filter(has_text=re.compile(rf"^\s*{re.escape(self.text)}\s*$"))
        return locator


def build_gate_strategies(selectors: GateSelectors) -> list[GateStrategy]:
    """Dismissal strategies in priority order: button, ID, class, then label text."""
    strategies = [
        GateStrategy("confirm_button", selectors.confirm_button),
        GateStrategy("id_pattern", selectors.id_pattern),
        GateStrategy("class_pattern", selectors.class_pattern),
    ]
    for label in selectors.affirmative_labels:
        strategies.append(GateStrategy(f"text:{label}", f"{selectors.root} button", text=label))
    return strategies


class GateDismissal:
    """State machine UNKNOWN -> {ABSENT | GATE_PRESENT -> DISMISSED}.

    Runs at most once; later calls return the recorded state without
    touching the page.

    Args:
        selectors: Gate selectors from the active selector profile.
        probe_timeout_ms: Bounded wait for the gate to appear.
        settle_ms: Pause after a successful click before re-checking.
    """

    def __init__(
        self,
        selectors: GateSelectors,
        *,
        probe_timeout_ms: int = 5000,
        settle_ms: int = 1500,
    ) -> None:
        self._selectors = selectors
        self._strategies = build_gate_strategies(selectors)
        self._probe_timeout_ms = probe_timeout_ms
        self._settle_ms = settle_ms
        self._state = GateState.UNKNOWN
        self._dismissed_by: str | None = None

    @property
    def state(self) -> GateState:
        return self._state

    @property
    def dismissed_by(self) -> str | None:
        """Name of the strategy that dismissed the gate, if any."""
        return self._dismissed_by

    async def run(self, page: Page) -> GateState:
        if self._state is not GateState.UNKNOWN:
            return self._state

        try:
            await page.wait_for_selector(
                self._selectors.root, state="visible", timeout=self._probe_timeout_ms
            )
        except PlaywrightTimeoutError:
            timeout = GateTimeout(f"No gate within {self._probe_timeout_ms} ms")
            logger.info("%s; treating as already dismissed", timeout)
            self._state = GateState.ABSENT
            return self._state
        except PlaywrightError as e:
            logger.warning("Gate probe failed: %s; treating as absent", e)
            self._state = GateState.ABSENT
            return self._state

        self._state = GateState.GATE_PRESENT
        logger.info("Disclaimer gate present, attempting dismissal")

        for strategy in self._strategies:
            if await self._try(page, strategy):
                self._state = GateState.DISMISSED
                self._dismissed_by = strategy.name
                logger.info("Gate dismissed via %s", strategy.name)
                return self._state

        logger.warning("All gate dismissal strategies exhausted; gate still present")
        return self._state

    async def _try(self, page: Page, strategy: GateStrategy) -> bool:
        target = strategy.locate(page)
        try:
            if await target.count() == 0:
                return False
            await target.first.click(timeout=self._probe_timeout_ms)
            await page.wait_for_timeout(self._settle_ms)
            return not await page.locator(self._selectors.root).first.is_visible()
        except PlaywrightError as e:
            logger.debug("Gate strategy %s failed: %s", strategy.name, e)
            return False
