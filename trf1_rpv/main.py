# trf1_rpv/main.py
import os
import logging
from dotenv import load_dotenv
from fastapi import FastAPI
from contextlib import asynccontextmanager

load_dotenv()

from trf1_rpv.core.config import get_app_settings, load_settings
from trf1_rpv.core.lifespan import lifespan_manager
from trf1_rpv.api.routers import consulta as consulta_router, service_control as service_control_router, health as health_router

initial_settings = load_settings()

log_level_str = os.getenv("LOG_LEVEL", initial_settings.LOG_LEVEL).upper()
logging.basicConfig(
    level=getattr(logging, log_level_str, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)

ENDPOINTS_BANNER = (
    "  GET  /health - Health check",
    "  GET  /api/status - Status do serviço",
    "  POST /api/inicializar - Inicializar o serviço",
    "  POST /api/consultar - Consultar processo (JSON)",
    "  GET  /api/consultar?secao=TRF1&proc=...&uf=BA - Consultar processo (Query)",
    "  POST /api/fechar - Fechar o serviço",
)


@asynccontextmanager
async def app_lifespan(app_fastapi: FastAPI):
    logger.info("FastAPI application startup...")
    current_app_settings = get_app_settings()

    app_fastapi.state.playwright_instance = None # Initialized in lifespan_manager
    app_fastapi.state.browser_session = None
    app_fastapi.state.query_executor = None

    async with lifespan_manager(app_fastapi):
        logger.info(f"Server listening on http://{current_app_settings.HOST}:{current_app_settings.PORT}")
        logger.info("Available endpoints:")
        for line in ENDPOINTS_BANNER:
            logger.info(line)
        yield
        logger.info("FastAPI application shutdown...")
        # Browser and Playwright cleanup handled in lifespan_manager
    logger.info("FastAPI application shutdown complete.")


def create_app() -> FastAPI:
    app_instance = FastAPI(
        title="TRF1 RPV Lookup API",
        lifespan=app_lifespan,
    )

    app_instance.include_router(health_router.router, tags=["Health"])
    app_instance.include_router(service_control_router.router, prefix="/api", tags=["Service Control"])
    app_instance.include_router(consulta_router.router, prefix="/api", tags=["Consulta"])

    return app_instance


app = create_app()


def run():
    import uvicorn
    effective_settings = get_app_settings()
    host = effective_settings.HOST
    port = effective_settings.PORT
    reload_dev = os.getenv("RELOAD_DEV", "false").lower() == "true"

    logger.info(f"Starting Uvicorn server on {host}:{port} (Reload: {reload_dev}, LogLevel: {log_level_str})")

    # uvicorn turns SIGINT/SIGTERM into a lifespan shutdown, which closes the browser
    uvicorn.run(
        "trf1_rpv.main:app",
        host=host,
        port=port,
        reload=reload_dev,
        log_level=log_level_str.lower()
    )


if __name__ == "__main__":
    run()
