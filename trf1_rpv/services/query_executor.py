# trf1_rpv/services/query_executor.py
import asyncio
import logging
from playwright.async_api import Error as PlaywrightError

from trf1_rpv.core.config import AppSettings
from trf1_rpv.models_api.consulta import QueryResult
from trf1_rpv.services.browser_session import BrowserSessionManager
from trf1_rpv.utils import common, playwright_utils

logger = logging.getLogger(__name__)

RPV_FOUND_MESSAGE = "RPV encontrada: {keyword}"
RPV_NOT_FOUND_MESSAGE = "Página carregada, mas RPV não foi encontrada"


class QueryExecutor:
    def __init__(self, session: BrowserSessionManager, settings: AppSettings):
        self.session = session
        self.settings = settings
        # One navigation at a time on the shared page
        self._query_lock = asyncio.Lock()

    async def consultar_processo(self, secao: str, proc: str, uf: str) -> QueryResult:
        url = common.build_process_url(self.settings.TRF1_PROCESS_URL_TEMPLATE, secao, proc, uf)
        case_identifier = f"{secao}/{proc}/{uf}"

        async with self._query_lock:
            try:
                if not self.session.is_ready():
                    await self.session.initialize()
                page = self.session.page
                if page is None:
                    raise RuntimeError("Falha ao inicializar a página")
            except Exception as e:
                logger.error(f"[{case_identifier}] Browser session unavailable: {e}")
                return QueryResult.failure(e)

            try:
                logger.info(f"[{case_identifier}] Navigating to {url}")
                await page.goto(url, wait_until="domcontentloaded", timeout=self.settings.NAVIGATION_TIMEOUT_SECONDS * 1000)

                # CAPTCHA challenges are not handled; the scan runs on whatever the page holds
                if self.settings.CONTENT_MARKER_SELECTOR:
                    await playwright_utils.wait_for_content_marker(
                        page, self.settings.CONTENT_MARKER_SELECTOR, self.settings.CONTENT_WAIT_TIMEOUT_SECONDS * 1000
                    )

                html = await page.content()
            except PlaywrightError as e:
                logger.error(f"[{case_identifier}] Navigation failed: {e}")
                await playwright_utils.safe_screenshot(page, self.settings.DEBUG_SCREENSHOT_DIR, "navigation_error", case_identifier)
                return QueryResult.failure(e)
            except Exception as e:
                logger.error(f"[{case_identifier}] Unexpected error reading page content: {e}", exc_info=True)
                await playwright_utils.safe_screenshot(page, self.settings.DEBUG_SCREENSHOT_DIR, "extraction_error", case_identifier)
                return QueryResult.failure(e)

        logger.debug(f"[{case_identifier}] Page content retrieved ({len(html)} chars).")
        matched = common.find_rpv_keyword(html, self.settings.RPV_KEYWORDS)
        if matched:
            logger.info(f"[{case_identifier}] RPV keyword found: '{matched}'")
            return QueryResult(success=True, message=RPV_FOUND_MESSAGE.format(keyword=matched), has_rpv=True, matched_keyword=matched)

        logger.info(f"[{case_identifier}] No RPV keyword found.")
        return QueryResult(success=True, message=RPV_NOT_FOUND_MESSAGE, has_rpv=False, matched_keyword="")
