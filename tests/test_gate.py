"""Tests for the disclaimer gate dismissal protocol."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest
from fakes import FakePage
from odin_site import Card, build_site
from playwright.async_api import Error as PlaywrightError

from equipment_intel.browser.gate import GateDismissal, build_gate_strategies
from equipment_intel.config import GateSelectors
from equipment_intel.data import GateState


@pytest.fixture
def gate() -> GateDismissal:
    return GateDismissal(GateSelectors(), probe_timeout_ms=100, settle_ms=10)


def page_with_gate(gate_html: str) -> FakePage:
    page = FakePage(f"<html><body>{gate_html}<div class='weg-search-results'></div></body></html>")
    page.on_click(".disclaimer-modal button", lambda p, _: p.remove(".disclaimer-modal"))
    return page


class TestStrategies:
    def test_strategy_order(self) -> None:
        names = [s.name for s in build_gate_strategies(GateSelectors())]
        assert names == [
            "confirm_button",
            "id_pattern",
            "class_pattern",
            "text:CONFIRM",
            "text:I AGREE",
            "text:ACCEPT",
        ]


class TestGateDismissal:
    async def test_no_gate_is_absent(self, gate: GateDismissal) -> None:
        page = build_site([Card(title="T-90")])
        assert await gate.run(page) is GateState.ABSENT
        assert gate.dismissed_by is None
        assert page.clicks == []

    async def test_confirm_button_dismisses(self, gate: GateDismissal) -> None:
        page = build_site([Card(title="T-90")], gate=True)
        assert await gate.run(page) is GateState.DISMISSED
        assert gate.dismissed_by == "confirm_button"
        assert page.soup.select(".disclaimer-modal") == []
        assert 10 in page.waits

    async def test_falls_through_to_id_pattern(self, gate: GateDismissal) -> None:
        page = page_with_gate('<div class="disclaimer-modal"><button id="accept-disclaimer">OK</button></div>')
        assert await gate.run(page) is GateState.DISMISSED
        assert gate.dismissed_by == "id_pattern"

    async def test_falls_through_to_class_pattern(self, gate: GateDismissal) -> None:
        page = page_with_gate(
            '<div class="disclaimer-modal"><button class="btn disclaimer-button">OK</button></div>'
        )
        assert await gate.run(page) is GateState.DISMISSED
        assert gate.dismissed_by == "class_pattern"

    async def test_falls_through_to_label_text(self, gate: GateDismissal) -> None:
        page = page_with_gate(
            '<div class="disclaimer-modal"><button>Cancel</button><button> I AGREE </button></div>'
        )
        assert await gate.run(page) is GateState.DISMISSED
        assert gate.dismissed_by == "text:I AGREE"
        assert len(page.clicks) == 1

    async def test_click_that_leaves_gate_tries_next_strategy(self, gate: GateDismissal) -> None:
        page = FakePage(
            "<html><body><div class='disclaimer-modal'>"
            "<div class='button-area'><button class='noop'>Details</button></div>"
            "<button class='btn disclaimer-button'>Continue</button>"
            "</div></body></html>"
        )
        page.on_click(".disclaimer-button", lambda p, _: p.remove(".disclaimer-modal"))
        assert await gate.run(page) is GateState.DISMISSED
        assert gate.dismissed_by == "class_pattern"

    async def test_all_strategies_exhausted_stays_present(self, gate: GateDismissal) -> None:
        page = FakePage("<html><body><div class='disclaimer-modal'><p>Read me</p></div></body></html>")
        assert await gate.run(page) is GateState.GATE_PRESENT
        assert gate.dismissed_by is None

    async def test_runs_at_most_once(self, gate: GateDismissal) -> None:
        page = build_site([Card(title="T-90")], gate=True)
        await gate.run(page)
        clicks = len(page.clicks)

        page.append_to_body('<div class="disclaimer-modal"><div class="button-area"><button>CONFIRM</button></div></div>')
        assert await gate.run(page) is GateState.DISMISSED
        assert len(page.clicks) == clicks

    async def test_hidden_gate_counts_as_absent(self, gate: GateDismissal) -> None:
        page = page_with_gate('<div class="disclaimer-modal" hidden><button>CONFIRM</button></div>')
        assert await gate.run(page) is GateState.ABSENT

    async def test_page_error_after_click_fails_the_strategy(self, gate: GateDismissal) -> None:
        page = build_site([Card(title="T-90")], gate=True)
        page.wait_for_timeout = AsyncMock(side_effect=PlaywrightError("Target closed"))

        assert await gate.run(page) is GateState.GATE_PRESENT
        assert gate.dismissed_by is None
        assert len(page.clicks) == 1

    async def test_page_error_while_probing_treated_as_absent(self, gate: GateDismissal) -> None:
        page = page_with_gate('<div class="disclaimer-modal"><button>CONFIRM</button></div>')
        page.wait_for_selector = AsyncMock(side_effect=PlaywrightError("Target closed"))

        assert await gate.run(page) is GateState.ABSENT
        assert page.clicks == []
