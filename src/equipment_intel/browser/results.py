"""Locate result cards on the search page and capture their previews."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Locator, Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from equipment_intel.config.models import SelectorProfile
from equipment_intel.data import CardPreview
from equipment_intel.errors import ResultsNotFound
from equipment_intel.extract.parsing import parse_card_preview

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResultCard:
    """A result slot: its live locator and the preview captured from it."""

    index: int
    locator: Locator
    preview: CardPreview


class ResultEnumerator:
    """Find up to ``max_cards`` result cards.

    Args:
        profile: Active selector profile.
        timeout_ms: Bounded wait for the results container.
        max_cards: Cap on cards processed per query.
    """

    def __init__(self, profile: SelectorProfile, *, timeout_ms: int = 10000, max_cards: int = 10) -> None:
        self._profile = profile
        self._timeout_ms = timeout_ms
        self._max_cards = max_cards

    async def enumerate(self, page: Page) -> list[ResultCard]:
        """Return result cards in display order.

        Raises:
            ResultsNotFound: If no results container appears in time or no
                card selector matches.
        """
        container = ", ".join(self._profile.results_container)
        try:
            await page.wait_for_selector(container, state="attached", timeout=self._timeout_ms)
        except PlaywrightTimeoutError as e:
            raise ResultsNotFound(f"No search results within {self._timeout_ms} ms") from e
        except PlaywrightError as e:
            raise ResultsNotFound(f"Results wait aborted: {e}") from e

        try:
            cards, selector = await self._locate_cards(page)
            total = await cards.count() if cards is not None else 0
        except PlaywrightError as e:
            raise ResultsNotFound(f"Could not count result cards: {e}") from e
        if cards is None or total == 0:
            raise ResultsNotFound("Results container present but no cards matched")

        logger.info("Found %d result cards via %r", total, selector)
        results: list[ResultCard] = []
        for i in range(min(total, self._max_cards)):
            card = cards.nth(i)
            try:
                html = await card.inner_html()
            except PlaywrightError as e:
                logger.warning("Could not read card %d preview: %s", i + 1, e)
                html = ""
            preview = parse_card_preview(html, self._profile, base_url=page.url)
            results.append(ResultCard(index=i, locator=card, preview=preview))
        return results

    async def _locate_cards(self, page: Page) -> tuple[Locator | None, str | None]:
        for selector in self._profile.cards:
            locator = page.locator(selector)
            if await locator.count() > 0:
                return (locator, selector)
        return (None, None)
