"""Drive the tabs of an open detail overlay and extract each one."""

from __future__ import annotations

import logging

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Locator, Page

from equipment_intel.config.models import SelectorProfile
from equipment_intel.data import DetailExtraction, TabContent
from equipment_intel.extract.parsing import parse_overlay_header, parse_tab_content

logger = logging.getLogger(__name__)


class TabContentExtractor:
    """Extract header fields and every tab of the currently open overlay.

    Tabs are processed strictly in document order, one at a time: activate,
    settle, capture the content region, parse. Tab controls and the content
    region are only looked up inside the open overlay.

    Args:
        profile: Active selector profile.
        settle_ms: Wait after activating a tab for its content to swap in.
    """

    def __init__(self, profile: SelectorProfile, *, settle_ms: int = 2000) -> None:
        self._profile = profile
        self._settle_ms = settle_ms

    async def extract(self, page: Page) -> DetailExtraction:
        overlay = page.locator(self._profile.overlay_root).first
        try:
            overlay_html = await overlay.inner_html()
        except PlaywrightError as e:
            logger.warning("Could not read overlay header: %s", e)
            overlay_html = ""
        title, hero, notes = parse_overlay_header(overlay_html, self._profile, base_url=page.url)

        tabs: dict[str, TabContent] = {}
        buttons = await self._tab_buttons(overlay)
        count = await buttons.count() if buttons is not None else 0
        logger.info("Overlay %r has %d tabs", title, count)

        for i in range(count):
            button = buttons.nth(i)
            label = _unique_label(await self._label(button, i), tabs)
            content = await self._extract_tab(page, overlay, button, label)
            if content.is_empty:
                logger.info("  tab %r yielded no content", label)
            tabs[label] = content

        return DetailExtraction(title=title, hero_image_url=hero, notes=notes, tabs=tabs)

    async def _tab_buttons(self, overlay: Locator) -> Locator | None:
        for selector in self._profile.tab_buttons:
            locator = overlay.locator(selector)
            if await locator.count() > 0:
                return locator
        return None

    async def _label(self, button: Locator, index: int) -> str:
        try:
            text = (await button.inner_text()).strip()
            if text:
                return text
            aria = await button.get_attribute("aria-label")
            if aria and aria.strip():
                return aria.strip()
        except PlaywrightError as e:
            logger.debug("Could not read label of tab %d: %s", index + 1, e)
        return f"tab-{index + 1}"

    async def _extract_tab(self, page: Page, overlay: Locator, button: Locator, label: str) -> TabContent:
        try:
            await button.click()
            await page.wait_for_timeout(self._settle_ms)
            html = await self._content_html(overlay)
        except PlaywrightError as e:
            logger.warning("Error processing tab %r: %s", label, e)
            return TabContent(tab_label=label)
        return parse_tab_content(label, html, self._profile)

    async def _content_html(self, overlay: Locator) -> str:
        for selector in self._profile.tab_content:
            region = overlay.locator(selector)
            if await region.count() > 0:
                return await region.first.inner_html()
        return ""


def _unique_label(label: str, existing: dict[str, TabContent]) -> str:
    if label not in existing:
        return label
    n = 2
    while f"{label} ({n})" in existing:
        n += 1
    return f"{label} ({n})"
