# trf1_rpv/services/browser_session.py
import asyncio
import logging
from typing import Optional, Dict, List
from playwright.async_api import Playwright, Browser, BrowserContext, Page
from playwright_stealth import Stealth

from trf1_rpv.core.config import AppSettings
from trf1_rpv.utils import playwright_utils

logger = logging.getLogger(__name__)


class BrowserInitializationError(Exception):
    """The browser process or its page could not be brought up."""


class BrowserSessionManager:
    """
    Owns the single browser process (and the one page on it) shared by every
    lookup. Launched lazily on first use and reused until close().
    """

    def __init__(self, playwright_instance: Optional[Playwright], settings: AppSettings):
        self.playwright = playwright_instance
        self.settings = settings
        self.browser: Optional[Browser] = None
        self.context: Optional[BrowserContext] = None
        self.page: Optional[Page] = None
        self.initializing: bool = False
        self._init_lock = asyncio.Lock()

    def _get_launch_args(self) -> List[str]:
        args = [
            '--no-sandbox',
            '--disable-setuid-sandbox',
            '--disable-dev-shm-usage',
            '--disable-gpu',
            '--disable-blink-features=AutomationControlled',
        ]
        if self.settings.BROWSER_SINGLE_PROCESS:
            args.append('--single-process')
        return args

    def _get_context_options(self) -> Dict:
        return {
            "user_agent": self.settings.USER_AGENT,
            "viewport": {"width": self.settings.VIEWPORT_WIDTH, "height": self.settings.VIEWPORT_HEIGHT},
            "java_script_enabled": True,
        }

    async def _launch_browser(self) -> Browser:
        if self.playwright is None:
            raise RuntimeError("Playwright is not running")
        launch_kwargs = {"headless": self.settings.BROWSER_HEADLESS, "args": self._get_launch_args()}
        if self.settings.BROWSER_EXECUTABLE_PATH:
            launch_kwargs["executable_path"] = self.settings.BROWSER_EXECUTABLE_PATH
        return await self.playwright.chromium.launch(**launch_kwargs)

    def _on_disconnected(self, browser: Browser):
        if self.browser is browser:
            logger.warning("Browser disconnected unexpectedly. Session will be relaunched on next use.")
            self.browser = None
            self.context = None
            self.page = None

    async def initialize(self):
        if self.is_ready():
            return

        async with self._init_lock:
            # Another caller may have finished launching while we waited
            if self.is_ready():
                return

            self.initializing = True
            browser = None
            try:
                logger.info("Launching headless browser...")
                browser = await self._launch_browser()
                self.browser = browser
                browser.on("disconnected", self._on_disconnected)
                self.context = await browser.new_context(**self._get_context_options())
                page = await self.context.new_page()

                if self.settings.STEALTH_ENABLED:
                    await Stealth().apply_stealth_async(page)
                if self.settings.BLOCK_RESOURCES:
                    await playwright_utils.block_resource_types(page, self.settings.BLOCKED_RESOURCE_TYPES)

                # A disconnect while launching already cleared the handles
                if self.browser is not browser:
                    raise RuntimeError("Browser disconnected during initialization")
                self.page = page
                logger.info("Browser initialized successfully.")
            except Exception as e:
                logger.error(f"Error initializing browser: {e}", exc_info=True)
                await self._discard_partial_session(browser)
                raise BrowserInitializationError(str(e)) from e
            finally:
                self.initializing = False

    async def _discard_partial_session(self, browser: Optional[Browser]):
        self.browser = None
        self.context = None
        self.page = None
        if browser:
            try:
                await browser.close()
            except Exception as e:
                logger.warning(f"Error closing partially initialized browser: {e}")

    def is_ready(self) -> bool:
        return self.browser is not None and self.page is not None

    async def close(self):
        # Waits for an in-flight launch so a half-built session is never left behind
        async with self._init_lock:
            if not self.browser:
                return

            # Handles are detached first so the disconnect listener sees a deliberate close
            browser, context = self.browser, self.context
            self.browser = None
            self.context = None
            self.page = None

            if context:
                try:
                    await context.close()
                except Exception as e:
                    logger.warning(f"Error closing browser context: {e}")
            await browser.close()
            logger.info("Browser closed.")
