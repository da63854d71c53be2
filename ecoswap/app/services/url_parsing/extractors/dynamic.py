"""Headless-browser rendering for pages that build their recipe client-side."""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from playwright.async_api import Browser, Page, Playwright, async_playwright
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from ecoswap.app.services.url_parsing.extractors.heuristic import HeuristicDomExtractor
from ecoswap.app.services.url_parsing.extractors.schema_org import StructuredDataExtractor
from ecoswap.app.services.url_parsing.models import (
    ExtractionMethod,
    RawExtractionResult,
    RenderedPage,
)

logger = logging.getLogger(__name__)

BROWSER_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-accelerated-2d-canvas",
    "--no-first-run",
    "--no-zygote",
    "--disable-gpu",
]
VIEWPORT = {"width": 1920, "height": 1080}


class BrowserSession:
    """Process-wide Chromium instance, launched on first use and reused across requests."""

    def __init__(self, user_agent: str, headless: bool = True):
        self.user_agent = user_agent
        self.headless = headless
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._lock = asyncio.Lock()

    @property
    def is_started(self) -> bool:
        return self._browser is not None

    async def _ensure_browser(self) -> Browser:
        async with self._lock:
            if self._browser is None or not self._browser.is_connected():
                if self._playwright is None:
                    self._playwright = await async_playwright().start()
                logger.info("Launching headless Chromium")
                self._browser = await self._playwright.chromium.launch(
                    headless=self.headless, args=BROWSER_ARGS
                )
            return self._browser

    @asynccontextmanager
    async def page(self) -> AsyncIterator[Page]:
        """Yield a fresh page in its own context; both are closed on exit."""
        browser = await self._ensure_browser()
        context = await browser.new_context(user_agent=self.user_agent, viewport=VIEWPORT)
        try:
            page = await context.new_page()
            try:
                yield page
            finally:
                await page.close()
        finally:
            await context.close()

    async def close(self) -> None:
        async with self._lock:
            if self._browser is not None:
                await self._browser.close()
                self._browser = None
            if self._playwright is not None:
                await self._playwright.stop()
                self._playwright = None


class DynamicRenderExtractor:
    """Renders a URL in the shared browser and re-runs the static extractors on the result."""

    def __init__(
        self,
        session: BrowserSession,
        structured: StructuredDataExtractor,
        heuristic: HeuristicDomExtractor,
        timeout_ms: int,
        settle_ms: int = 2000,
    ):
        self.session = session
        self.structured = structured
        self.heuristic = heuristic
        self.timeout_ms = timeout_ms
        self.settle_ms = settle_ms

    def extract_from_markup(self, html: str, url: str) -> RawExtractionResult:
        result = self.structured.parse(html)
        if result is None or not result.is_sufficient():
            result = self.heuristic.parse(html, url)
        return result.model_copy(update={"extraction_method": ExtractionMethod.DYNAMIC})

    async def parse(self, url: str) -> Optional[RenderedPage]:
        """Render ``url``; a navigation timeout yields the partial markup instead of an error."""
        logger.info("Loading page in headless browser (timeout: %dms): %s", self.timeout_ms, url)
        try:
            async with self.session.page() as page:
                try:
                    await page.goto(url, wait_until="networkidle", timeout=self.timeout_ms)
                except PlaywrightTimeoutError:
                    logger.warning("Browser navigation timed out for %s; keeping partial markup", url)
                    partial_html = ""
                    try:
                        partial_html = await page.content()
                    except PlaywrightError as exc:
                        logger.warning("Could not read partial content for %s: %s", url, exc)
                    return RenderedPage(
                        html=partial_html,
                        timed_out=True,
                        result=RawExtractionResult(
                            extraction_method=ExtractionMethod.DYNAMIC_TIMEOUT,
                            source_url=url,
                            error="Browser render timed out, escalating to generative fallback",
                        ),
                    )

                await page.wait_for_timeout(self.settle_ms)
                html = await page.content()
        except PlaywrightError as exc:
            logger.warning("Browser render failed for %s: %s", url, exc)
            return None

        return RenderedPage(html=html, result=self.extract_from_markup(html, url))
