"""Playwright browser session shared by every link in a scan run."""

from __future__ import annotations

import logging
from typing import Optional

from playwright.async_api import Browser, BrowserContext, Page, Playwright, async_playwright

from infrastructure.constants import (
    BROWSER_LAUNCH_ARGS,
    BROWSER_LOCALE,
    BROWSER_USER_AGENT,
    HIDE_WEBDRIVER_SCRIPT,
)

logger = logging.getLogger(__name__)


class ScanBrowser:
    """Launch Chromium with one context configured for the scan timezone."""

    def __init__(self, timezone: str, *, headless: bool = True) -> None:
        self.timezone = timezone
        self.headless = headless
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._context: Optional[BrowserContext] = None

    async def __aenter__(self) -> "ScanBrowser":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def start(self) -> None:
        logger.info("Starting Playwright...")
        self._playwright = await async_playwright().start()

        logger.info("Launching Chromium browser (headless=%s)", self.headless)
        self._browser = await self._playwright.chromium.launch(
            headless=self.headless,
            args=BROWSER_LAUNCH_ARGS,
        )
        self._context = await self._browser.new_context(
            timezone_id=self.timezone,
            locale=BROWSER_LOCALE,
            user_agent=BROWSER_USER_AGENT,
        )
        await self._context.add_init_script(HIDE_WEBDRIVER_SCRIPT)

    async def new_page(self) -> Page:
        if not self._context:
            raise RuntimeError("Browser session has not been started")
        return await self._context.new_page()

    async def close(self) -> None:
        if self._context:
            await self._context.close()
            self._context = None
        if self._browser:
            await self._browser.close()
            self._browser = None
        if self._playwright:
            await self._playwright.stop()
            self._playwright = None
        logger.info("Browser session closed")
