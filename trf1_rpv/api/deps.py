# trf1_rpv/api/deps.py
from fastapi import HTTPException, status, Request
from trf1_rpv.services.browser_session import BrowserSessionManager
from trf1_rpv.services.query_executor import QueryExecutor
import logging

logger = logging.getLogger(__name__)

def get_browser_session(request: Request) -> BrowserSessionManager:
    session = getattr(request.app.state, 'browser_session', None)
    if session is None:
        logger.error("Browser session requested but Playwright is not running.")
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Playwright not initialized. Service unavailable.")
    return session

def get_query_executor(request: Request) -> QueryExecutor:
    executor = getattr(request.app.state, 'query_executor', None)
    if executor is None:
        logger.error("Query executor requested but Playwright is not running.")
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Playwright not initialized. Service unavailable.")
    return executor
