"""Pure parsers turning captured HTML fragments into typed extraction values.

The browser components only capture ``inner_html`` of cards, overlays, and
tab content regions; everything structural happens here so it can be tested
against fixed HTML fixtures.
"""

from __future__ import annotations

from bs4 import Comment

from equipment_intel.config.models import SelectorProfile
from equipment_intel.data import CardPreview, TabContent
from equipment_intel.extract.strategies import (
    first_match,
    image_strategies,
    parse_fragment,
    text_strategies,
)
from equipment_intel.url import resolve_url

_NON_CONTENT_TAGS = frozenset({"script", "style", "noscript", "template"})


def parse_card_preview(html: str, profile: SelectorProfile, *, base_url: str = "") -> CardPreview:
    """Read the preview fields of one result card.

    Missing fields are left empty rather than failing the card.
    """
    dom = parse_fragment(html)
    image = first_match(image_strategies(profile.card_image), dom)
    return CardPreview(
        title=first_match(text_strategies(profile.card_title), dom),
        category=first_match(text_strategies(profile.card_category), dom),
        preview_text=first_match(text_strategies(profile.card_preview), dom),
        preview_image_url=resolve_url(base_url, image) if image else "",
    )


def parse_overlay_header(
    html: str, profile: SelectorProfile, *, base_url: str = ""
) -> tuple[str, str, str]:
    """Read ``(title, hero_image_url, notes)`` from a detail overlay."""
    dom = parse_fragment(html)
    title = first_match(text_strategies(profile.overlay_title), dom)
    hero = first_match(image_strategies(profile.overlay_hero_image), dom)
    notes = first_match(text_strategies(profile.overlay_notes), dom)
    return (title, resolve_url(base_url, hero) if hero else "", notes)


def parse_tab_content(label: str, html: str, profile: SelectorProfile) -> TabContent:
    """Extract a tab's content region with three independent strategies.

    A tab can yield key/value rows, tables, and free text at the same time.
    """
    dom = parse_fragment(html)
    return TabContent(
        tab_label=label,
        free_text=_leaf_text(dom),
        raw_text=dom.get_text().strip(),
        key_value_rows=_key_value_rows(dom, profile),
        tables=_tables(dom),
    )


def _key_value_rows(dom, profile: SelectorProfile) -> tuple[tuple[str, str], ...]:
    if not profile.kv_row:
        return ()
    label_strategies = text_strategies(profile.kv_label)
    value_strategies = text_strategies(profile.kv_value)

    rows: list[tuple[str, str]] = []
    for row in dom.select(", ".join(profile.kv_row)):
        label = first_match(label_strategies, row)
        value = first_match(value_strategies, row)
        if label and value:
            rows.append((label, value))
    return tuple(rows)


def _tables(dom) -> tuple[tuple[tuple[str, ...], ...], ...]:
    tables: list[tuple[tuple[str, ...], ...]] = []
    for table in dom.find_all("table"):
        rows: list[tuple[str, ...]] = []
        for tr in table.find_all("tr"):
            if tr.find_parent("table") is not table:
                continue
            cells = tuple(c.get_text(" ", strip=True) for c in tr.find_all(["td", "th"], recursive=False))
            if cells:
                rows.append(cells)
        if rows:
            tables.append(tuple(rows))
    return tuple(tables)


def _leaf_text(dom) -> str:
    parts: list[str] = []
    for node in dom.find_all(string=True):
        if isinstance(node, Comment):
            continue
        if node.parent is not None and node.parent.name in _NON_CONTENT_TAGS:
            continue
        text = " ".join(node.split())
        if text:
            parts.append(text)
    return "\n".join(parts)
