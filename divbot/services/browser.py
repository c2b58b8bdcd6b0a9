"""Browser-based page rendering for sources without a usable HTTP API

Tracker pages reject plain HTTP clients, so they are loaded in a real
Chromium through Playwright and read back as the rendered body text.

Every call opens a fresh, disposable browser session and closes it on all
exit paths so no browser process outlives the request. Pass
``cdp_url`` to drive an already running Chrome (e.g.
``http://localhost:9222``) instead of launching a local one.
"""

from __future__ import annotations

from typing import Protocol

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import async_playwright

from divbot.constants import TrackerConstants, UbiConstants
from divbot.utils.exceptions import BrowserFetchError
from divbot.utils.logger import setup_logger

logger = setup_logger(__name__)


class RenderedTextFetcher(Protocol):
    """Capability used by page-scraping stats sources."""

    async def fetch_rendered_text(self, url: str) -> str:
        ...


class PlaywrightTextFetcher:
    """Renders pages in a disposable Playwright Chromium session

    Attributes:
        cdp_url: Remote Chrome DevTools endpoint, empty to launch locally
        headless: Whether a locally launched browser runs without UI
        timeout: Navigation timeout in milliseconds
    """

    def __init__(self, cdp_url: str = "", headless: bool = True, timeout: int = 30000):
        self.cdp_url = cdp_url
        self.headless = headless
        self.timeout = timeout

    async def fetch_rendered_text(self, url: str) -> str:
        """Navigate to ``url`` and return the full text content of the page body

        Raises:
            BrowserFetchError: If the browser cannot start, navigate or read the page
        """
        logger.info(f"Fetching rendered page: {url}")
        try:
            async with async_playwright() as playwright:
                if self.cdp_url:
                    browser = await playwright.chromium.connect_over_cdp(self.cdp_url)
                else:
                    browser = await playwright.chromium.launch(
                        headless=self.headless, args=TrackerConstants.BROWSER_ARGS
                    )
                try:
                    context = await browser.new_context(
                        user_agent=UbiConstants.USER_AGENT,
                        viewport=TrackerConstants.VIEWPORT,
                        ignore_https_errors=True,
                        bypass_csp=True,
                    )
                    page = await context.new_page()
                    page.set_default_timeout(self.timeout)
                    await page.goto(url, wait_until="load")
                    return await page.inner_text("body")
                finally:
                    await browser.close()
                    logger.debug(f"Browser session closed for {url}")
        except PlaywrightError as e:
            raise BrowserFetchError(url, str(e)) from e
