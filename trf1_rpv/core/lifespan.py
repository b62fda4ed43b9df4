# trf1_rpv/core/lifespan.py
import logging
from contextlib import asynccontextmanager
from playwright.async_api import async_playwright
from trf1_rpv.core.config import get_app_settings
from trf1_rpv.services.browser_session import BrowserSessionManager, BrowserInitializationError
from trf1_rpv.services.query_executor import QueryExecutor

logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan_manager(app):
    app_settings = get_app_settings()
    logger.info("--- FastAPI App Starting Up (Lifespan Manager) ---")

    logger.info("--- Initializing Playwright (Lifespan) ---")
    try:
        app.state.playwright_instance = await async_playwright().start()
        logger.info("--- Playwright Initialized (Lifespan) ---")
    except Exception as e:
        logger.critical(f"CRITICAL STARTUP FAILURE: Could not initialize Playwright: {e}")
        app.state.playwright_instance = None
        yield
        logger.info("--- FastAPI App Shut Down (Lifespan - playwright init failed) ---")
        return

    browser_session = BrowserSessionManager(app.state.playwright_instance, app_settings)
    app.state.browser_session = browser_session
    app.state.query_executor = QueryExecutor(browser_session, app_settings)

    if app_settings.BROWSER_EAGER_INIT:
        logger.info("--- Launching browser at startup (Lifespan) ---")
        try:
            await browser_session.initialize()
        except BrowserInitializationError as e:
            # Not fatal: the first lookup retries the launch
            logger.error(f"Eager browser launch failed: {e}")

    yield # Application is running

    logger.info("--- FastAPI App Shutting Down (Lifespan Manager) ---")
    try:
        await browser_session.close()
    except Exception as e:
        logger.error(f"Error closing browser session: {e}")

    logger.info("Stopping Playwright (Lifespan)...")
    try:
        await app.state.playwright_instance.stop()
        app.state.playwright_instance = None
        logger.info("Playwright stopped (Lifespan).")
    except Exception as e:
        logger.error(f"Error stopping Playwright: {e}")

    logger.info("--- FastAPI App Shutdown Complete (Lifespan Manager) ---")
