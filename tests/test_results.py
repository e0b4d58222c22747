"""Tests for result card enumeration."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest
from fakes import FakePage
from odin_site import Card, build_site
from playwright.async_api import Error as PlaywrightError

from equipment_intel.browser.results import ResultEnumerator
from equipment_intel.config import SelectorProfile
from equipment_intel.errors import ResultsNotFound


@pytest.fixture
def enumerator() -> ResultEnumerator:
    return ResultEnumerator(SelectorProfile(), timeout_ms=100, max_cards=10)


class TestResultEnumerator:
    async def test_cards_in_display_order(self, enumerator: ResultEnumerator) -> None:
        page = build_site(
            [
                Card(title="T-90", category="Tank", preview="Russian MBT", image="/img/t90.jpg"),
                Card(title="T-90S", category="Tank"),
            ]
        )
        cards = await enumerator.enumerate(page)

        assert [c.index for c in cards] == [0, 1]
        assert cards[0].preview.title == "T-90"
        assert cards[0].preview.category == "Tank"
        assert cards[0].preview.preview_text == "Russian MBT"
        assert cards[0].preview.preview_image_url == "https://odin.example/img/t90.jpg"
        assert cards[1].preview.title == "T-90S"
        assert cards[1].preview.preview_image_url == ""

    async def test_max_cards_caps_results(self) -> None:
        page = build_site([Card(title=f"Card {i}") for i in range(5)])
        cards = await ResultEnumerator(SelectorProfile(), timeout_ms=100, max_cards=2).enumerate(page)
        assert [c.preview.title for c in cards] == ["Card 0", "Card 1"]

    async def test_fallback_card_selector(self, enumerator: ResultEnumerator) -> None:
        page = FakePage(
            "<html><body><div class='search-results'>"
            "<div class='asset-card'><h3>BrahMos</h3></div>"
            "</div></body></html>"
        )
        cards = await enumerator.enumerate(page)
        assert len(cards) == 1
        assert cards[0].preview.title == "BrahMos"

    async def test_no_container_raises(self, enumerator: ResultEnumerator) -> None:
        page = FakePage("<html><body><p>Service unavailable</p></body></html>")
        with pytest.raises(ResultsNotFound, match="No search results"):
            await enumerator.enumerate(page)

    async def test_container_without_cards_raises(self, enumerator: ResultEnumerator) -> None:
        page = FakePage("<html><body><div class='weg-search-results'><p>No matches</p></div></body></html>")
        with pytest.raises(ResultsNotFound, match="no cards matched"):
            await enumerator.enumerate(page)

    async def test_results_not_found_is_fatal(self, enumerator: ResultEnumerator) -> None:
        page = FakePage()
        with pytest.raises(ResultsNotFound) as exc_info:
            await enumerator.enumerate(page)
        assert exc_info.value.fatal

    async def test_page_error_while_waiting_becomes_results_not_found(self, enumerator: ResultEnumerator) -> None:
        page = build_site([Card(title="T-90")])
        page.wait_for_selector = AsyncMock(side_effect=PlaywrightError("Target crashed"))
        with pytest.raises(ResultsNotFound, match="Target crashed"):
            await enumerator.enumerate(page)
