"""
Headless-browser rendering for picture mode.

Chromium is started on the first render and reused until close().
"""

from __future__ import annotations

import asyncio
import logging

from playwright.async_api import Browser, Playwright, async_playwright

from .template import MESSAGE_ELEMENT_ID

logger = logging.getLogger(__name__)

VIEWPORT = {"width": 800, "height": 600}


class PlaywrightRenderer:
    def __init__(self) -> None:
        self._playwright: Playwright | None = None
        self._browser: Browser | None = None
        self._lock = asyncio.Lock()

    async def _ensure_browser(self) -> Browser:
        async with self._lock:
            if self._browser is None:
                self._playwright = await async_playwright().start()
                self._browser = await self._playwright.chromium.launch()
                logger.info("Picture mode: headless Chromium started")
            return self._browser

    async def render(self, html: str) -> bytes:
        browser = await self._ensure_browser()
        page = await browser.new_page(viewport=VIEWPORT)
        try:
            await page.set_content(html, wait_until="networkidle")
            return await page.locator(f"#{MESSAGE_ELEMENT_ID}").screenshot(type="png")
        finally:
            await page.close()

    async def close(self) -> None:
        async with self._lock:
            if self._browser is not None:
                await self._browser.close()
                self._browser = None
            if self._playwright is not None:
                await self._playwright.stop()
                self._playwright = None
