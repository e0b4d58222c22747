"""Playwright session lifecycle for one query."""

from __future__ import annotations

import asyncio
import logging

from playwright.async_api import Browser, BrowserContext, Page, Playwright, async_playwright

from equipment_intel.config.models import BrowserConfig, BrowserIdentity, Viewport
from equipment_intel.errors import SessionLaunchFailure

logger = logging.getLogger(__name__)


class BrowserSession:
    """One launched browser with at most one active page.

    Pages the target site opens as a side effect (pop-ups, ``target=_blank``
    links) are closed as soon as they appear so the active page reference
    never goes stale.

    Args:
        playwright: Running Playwright driver.
        browser: Launched browser.
        default_timeout_ms: Default timeout applied to new pages.
    """

    def __init__(self, playwright: Playwright, browser: Browser, *, default_timeout_ms: int = 30000) -> None:
        self._playwright = playwright
        self._browser = browser
        self._default_timeout_ms = default_timeout_ms
        self._context: BrowserContext | None = None
        self._active: Page | None = None
        self._closing: set[asyncio.Task] = set()
        self._closed = False

    @property
    def active_page(self) -> Page | None:
        return self._active

    async def new_page(self, viewport: Viewport, identity: BrowserIdentity) -> Page:
        """Open the session's page with a fixed viewport and identity headers."""
        if self._context is None:
            self._context = await self._browser.new_context(
                viewport={"width": viewport.width, "height": viewport.height},
                user_agent=identity.user_agent,
                locale=identity.locale,
                extra_http_headers=dict(identity.extra_headers),
            )
            self._context.on("page", self._on_secondary_page)
            # Hide the most common automation tell before any site script runs.
            await self._context.add_init_script(
                "Object.defineProperty(navigator, 'webdriver', {get: () => undefined});"
            )

        page = await self._context.new_page()
        page.set_default_timeout(float(self._default_timeout_ms))
        page.set_default_navigation_timeout(float(self._default_timeout_ms))
        self._active = page
        return page

    def _on_secondary_page(self, page: Page) -> None:
        if self._active is None or page is self._active:
            return
        logger.info("Closing secondary page opened by the target site: %s", page.url)
        task = asyncio.get_running_loop().create_task(page.close())
        self._closing.add(task)
        task.add_done_callback(self._closing.discard)

    async def close(self) -> None:
        """Release the context, browser, and driver. Safe to call twice."""
        if self._closed:
            return
        self._closed = True
        if self._closing:
            await asyncio.gather(*self._closing, return_exceptions=True)

        if self._context is not None:
            try:
                await self._context.close()
            except Exception:
                logger.debug("Error closing browser context", exc_info=True)
        try:
            await self._browser.close()
        except Exception:
            logger.debug("Error closing browser", exc_info=True)
        try:
            await self._playwright.stop()
        except Exception:
            logger.debug("Error stopping Playwright", exc_info=True)
        self._active = None


class SessionController:
    """Launch browser sessions.

    Args:
        config: Browser launch configuration.
    """

    def __init__(self, config: BrowserConfig | None = None) -> None:
        self._config = config or BrowserConfig()

    @property
    def config(self) -> BrowserConfig:
        return self._config

    async def open(self) -> BrowserSession:
        """Launch Chromium and return a session.

        Raises:
            SessionLaunchFailure: If the driver or browser cannot start. No
                partially started resources are left behind.
        """
        playwright: Playwright | None = None
        try:
            playwright = await async_playwright().start()
            browser = await playwright.chromium.launch(
                headless=self._config.headless,
                args=list(self._config.launch_args),
            )
        except Exception as e:
            if playwright is not None:
                try:
                    await playwright.stop()
                except Exception:
                    logger.debug("Error stopping Playwright after failed launch", exc_info=True)
            raise SessionLaunchFailure(f"Browser launch failed: {type(e).__name__}: {e}") from e

        logger.info("Browser session started headless=%s", self._config.headless)
        return BrowserSession(
            playwright,
            browser,
            default_timeout_ms=self._config.default_timeout_ms,
        )
