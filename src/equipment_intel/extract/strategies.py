"""Named field-extraction strategies over parsed DOM fragments.

A strategy is a pure function ``(Tag) -> str | None``. A field is read by
trying its strategies in order and taking the first non-empty value, which
replaces ad-hoc "try this selector, then that one" chains.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass

from bs4 import BeautifulSoup, Tag


@dataclass(frozen=True)
class FieldStrategy:
    """One named way of reading a field from a DOM fragment."""

    name: str
    extract: Callable[[Tag], str | None]

    def __call__(self, dom: Tag) -> str | None:
        return self.extract(dom)


def text_of(selector: str) -> FieldStrategy:
    """Read the whitespace-normalized text of the first element matching ``selector``."""

    def _extract(dom: Tag) -> str | None:
        element = dom.select_one(selector)
        if element is None:
            return None
        return " ".join(element.get_text(" ").split()) or None

    return FieldStrategy(name=f"text:{selector}", extract=_extract)


def attr_of(selector: str, attribute: str) -> FieldStrategy:
    """Read an attribute of the first element matching ``selector``."""

    def _extract(dom: Tag) -> str | None:
        element = dom.select_one(selector)
        if element is None:
            return None
        value = element.get(attribute)
        if isinstance(value, list):
            value = " ".join(value)
        return value.strip() if value else None

    return FieldStrategy(name=f"attr:{selector}@{attribute}", extract=_extract)


def text_strategies(selectors: Sequence[str]) -> list[FieldStrategy]:
    return [text_of(s) for s in selectors]


def image_strategies(selectors: Sequence[str]) -> list[FieldStrategy]:
    """Image source strategies; lazy-loading attributes follow ``src`` for each selector."""
    strategies: list[FieldStrategy] = []
    for selector in selectors:
        strategies.append(attr_of(selector, "src"))
        strategies.append(attr_of(selector, "data-src"))
    return strategies


def first_match(strategies: Sequence[FieldStrategy], dom: Tag) -> str:
    """Return the first non-empty value produced by ``strategies``, or ``""``."""
    for strategy in strategies:
        value = strategy(dom)
        if value:
            return value
    return ""


def parse_fragment(html: str) -> BeautifulSoup:
    """Parse an HTML fragment captured from the page."""
    return BeautifulSoup(html or "", "html.parser")
