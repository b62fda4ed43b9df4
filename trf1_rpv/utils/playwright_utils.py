# trf1_rpv/utils/playwright_utils.py
import logging
import os
from typing import Iterable, Optional
from playwright.async_api import Page, Route, TimeoutError as PlaywrightTimeoutError
from trf1_rpv.utils.common import sanitize_filename
logger = logging.getLogger(__name__)

async def block_resource_types(page: Page, resource_types: Iterable[str]):
    """
    Aborts subresource requests of the given types (images, stylesheets...)
    so only the document and its scripts are fetched.
    """
    blocked = frozenset(resource_types)

    async def _handle_route(route: Route):
        if route.request.resource_type in blocked:
            await route.abort()
        else:
            await route.continue_()

    await page.route("**/*", _handle_route)
    logger.info(f"Blocking resource types on page: {sorted(blocked)}")

async def wait_for_content_marker(page: Page, selector: str, timeout_ms: int) -> bool:
    """Waits for the marker element, returning False instead of raising when it never shows up."""
    try:
        await page.wait_for_selector(selector, timeout=timeout_ms, state="attached")
        logger.debug(f"Content marker '{selector}' found.")
        return True
    except PlaywrightTimeoutError:
        logger.warning(f"Content marker '{selector}' not found within {timeout_ms}ms. Proceeding with current content.")
        return False

async def safe_screenshot(page: Page, directory: Optional[str], filename_prefix: str, details: str = "") -> Optional[str]:
    if not directory:
        return None
    sane_details = sanitize_filename(details, max_length=50)
    screenshot_filename = f"debug_{filename_prefix}_{sane_details}.png"
    screenshot_path = os.path.join(os.path.abspath(directory), screenshot_filename)

    try:
        os.makedirs(os.path.dirname(screenshot_path), exist_ok=True)
        await page.screenshot(path=screenshot_path)
        logger.info(f"Debug screenshot saved: {screenshot_path}")
        return screenshot_path
    except Exception as e:
        logger.error(f"Failed to save screenshot {screenshot_path}: {e}")
        return None
