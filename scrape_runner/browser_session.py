"""
Browser Session Manager

One browser per request. Every attempt gets its own isolated context so
proxies, cookies and fingerprints never leak between candidates.
"""

import logging
from typing import Optional, Tuple

from playwright.async_api import async_playwright, Browser, BrowserContext, Page
from camoufox.async_api import AsyncNewBrowser

from . import config
from .errors import ContextError, LaunchError
from .proxies import DIRECT, EgressCandidate

logger = logging.getLogger(__name__)

CHROMIUM_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-blink-features=AutomationControlled",
]

EXTRA_HEADERS = {
    "Accept-Language": "en-US,en;q=0.9",
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,image/webp,*/*;q=0.8",
}

# Runs before any page script
STEALTH_SCRIPT = """
(() => {
  try {
    Object.defineProperty(navigator, 'webdriver', { get: () => false });
    window.chrome = { runtime: {} };
    Object.defineProperty(navigator, 'languages', { get: () => ['en-US', 'en'] });
    Object.defineProperty(navigator, 'plugins', { get: () => [1, 2, 3, 4, 5] });
  } catch (e) {}
})();
"""


class BrowserSession:
    """
    Owns the Playwright driver and a single browser instance.

    Usage:
        async with BrowserSession() as session:
            context, page = await session.new_attempt_context(candidate)
            ...
            await session.close_context(context)
    """

    def __init__(self, engine: Optional[str] = None, headless: Optional[bool] = None):
        self.engine = (engine or config.BROWSER_TYPE).lower()
        self.headless = headless if headless is not None else config.HEADLESS
        self._playwright = None
        self._browser: Optional[Browser] = None

    @property
    def spoofs_fingerprint(self) -> bool:
        # Camoufox ships a consistent Firefox fingerprint; a Chrome UA on top would contradict it
        return self.engine != "camoufox"

    @property
    def is_open(self) -> bool:
        return self._browser is not None

    async def launch(self) -> "BrowserSession":
        if self.is_open:
            return self
        logger.info(f"🚀 Launching {self.engine} (headless={self.headless})")
        try:
            self._playwright = await async_playwright().start()
            if self.engine == "camoufox":
                self._browser = await AsyncNewBrowser(
                    self._playwright, headless=self.headless, humanize=True
                )
            elif self.engine == "chromium":
                self._browser = await self._playwright.chromium.launch(
                    headless=self.headless, args=CHROMIUM_ARGS
                )
            else:
                raise LaunchError(f"Unknown browser: {self.engine}")
        except LaunchError:
            await self.close()
            raise
        except Exception as e:
            await self.close()
            raise LaunchError(f"Browser launch failed: {e}") from e
        return self

    async def new_attempt_context(
        self, candidate: EgressCandidate = DIRECT
    ) -> Tuple[BrowserContext, Page]:
        proxy = candidate.proxy_settings()
        if not self.is_open:
            raise ContextError("Browser is not running")

        options = {
            "viewport": dict(config.VIEWPORT),
            "locale": config.LOCALE,
            "extra_http_headers": dict(EXTRA_HEADERS),
        }
        if self.spoofs_fingerprint:
            options["user_agent"] = config.USER_AGENT
        if proxy:
            options["proxy"] = proxy

        context = None
        try:
            context = await self._browser.new_context(**options)
            if self.spoofs_fingerprint:
                await context.add_init_script(STEALTH_SCRIPT)
            page = await context.new_page()
        except Exception as e:
            await self.close_context(context)
            raise ContextError(f"Context setup failed for {candidate.label}: {e}") from e
        return context, page

    async def close_context(self, context: Optional[BrowserContext]) -> None:
        if context is None:
            return
        try:
            await context.close()
        except Exception as e:
            logger.warning(f"⚠️ Context close failed: {e}")

    async def close(self) -> None:
        browser, self._browser = self._browser, None
        playwright, self._playwright = self._playwright, None
        if browser is not None:
            try:
                await browser.close()
            except Exception as e:
                logger.warning(f"⚠️ Browser close failed: {e}")
        if playwright is not None:
            try:
                await playwright.stop()
            except Exception as e:
                logger.warning(f"⚠️ Playwright stop failed: {e}")

    async def __aenter__(self) -> "BrowserSession":
        return await self.launch()

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
