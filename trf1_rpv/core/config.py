# trf1_rpv/core/config.py
import os
import json
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List
import logging

logger = logging.getLogger(__name__)

CONFIG_FILE_PATH = os.getenv("CONFIG_FILE_PATH", "config.json")

DEFAULT_USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
DEFAULT_PROCESS_URL_TEMPLATE = "https://processual.trf1.jus.br/consultaProcessual/processoExecucao/listar.php?secao={secao}&proc={proc}&uf={uf}"

# Priority order matters: the first keyword found is the one reported.
DEFAULT_RPV_KEYWORDS = [
    "Requisição de Pequeno Valor",
    "RPV",
    "migração",
    "migrado",
    "precatório",
    "requisitorio",
]


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class AppSettings(BaseModel):
    model_config = ConfigDict(extra='ignore')

    PORT: int = Field(int(os.getenv("PORT", "3000")), gt=0, lt=65536)
    HOST: str = os.getenv("HOST", "0.0.0.0")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # Constrained deployments (slim containers) ship their own Chromium build
    BROWSER_EXECUTABLE_PATH: Optional[str] = os.getenv("BROWSER_EXECUTABLE_PATH") or os.getenv("PUPPETEER_EXECUTABLE_PATH") or None
    BROWSER_HEADLESS: bool = _env_flag("BROWSER_HEADLESS", "true")
    BROWSER_SINGLE_PROCESS: bool = _env_flag("BROWSER_SINGLE_PROCESS", "false")
    BROWSER_EAGER_INIT: bool = _env_flag("BROWSER_EAGER_INIT", "false")
    BLOCK_RESOURCES: bool = _env_flag("BLOCK_RESOURCES", "false")
    BLOCKED_RESOURCE_TYPES: List[str] = ["image", "stylesheet", "font", "media"]
    STEALTH_ENABLED: bool = _env_flag("STEALTH_ENABLED", "true")

    USER_AGENT: str = DEFAULT_USER_AGENT
    VIEWPORT_WIDTH: int = Field(1920, gt=0)
    VIEWPORT_HEIGHT: int = Field(1080, gt=0)

    NAVIGATION_TIMEOUT_SECONDS: int = Field(int(os.getenv("NAVIGATION_TIMEOUT_SECONDS", "60")), gt=0)
    CONTENT_WAIT_TIMEOUT_SECONDS: int = Field(int(os.getenv("CONTENT_WAIT_TIMEOUT_SECONDS", "30")), gt=0)
    CONTENT_MARKER_SELECTOR: str = os.getenv("CONTENT_MARKER_SELECTOR", "")
    DEBUG_SCREENSHOT_DIR: Optional[str] = os.getenv("DEBUG_SCREENSHOT_DIR") or None

    TRF1_PROCESS_URL_TEMPLATE: str = DEFAULT_PROCESS_URL_TEMPLATE
    RPV_KEYWORDS: List[str] = Field(default_factory=lambda: list(DEFAULT_RPV_KEYWORDS))

_cached_settings: Optional[AppSettings] = None
CLIENT_CONFIG_KEYS = {"RPV_KEYWORDS", "CONTENT_MARKER_SELECTOR", "BLOCK_RESOURCES", "STEALTH_ENABLED"}

def load_settings() -> AppSettings:
    global _cached_settings
    if _cached_settings is None:
        try:
            current_values = AppSettings()

            if os.path.exists(CONFIG_FILE_PATH):
                try:
                    with open(CONFIG_FILE_PATH, 'r', encoding='utf-8') as f:
                        json_config = json.load(f)
                    overrides = {
                        key: json_config[key]
                        for key in CLIENT_CONFIG_KEYS
                        if key in json_config and json_config[key] is not None
                    }
                    if overrides:
                        current_values = current_values.model_copy(update=overrides)
                        logger.info(f"Applied overrides from {CONFIG_FILE_PATH}: {sorted(overrides)}")
                except Exception as e:
                    logger.error(f"Error reading or applying {CONFIG_FILE_PATH}: {e}. Using .env/defaults.")
            else:
                logger.debug(f"{CONFIG_FILE_PATH} not found. Using .env/defaults.")

            if not current_values.RPV_KEYWORDS:
                logger.warning("RPV_KEYWORDS is empty. Every lookup will report no RPV.")

            _cached_settings = current_values
            logger.info("Application settings processed.")
            logger.debug(f"Effective settings: "
                         f"Port='{_cached_settings.PORT}', "
                         f"Headless='{_cached_settings.BROWSER_HEADLESS}', "
                         f"ExecutablePath='{_cached_settings.BROWSER_EXECUTABLE_PATH}', "
                         f"BlockResources='{_cached_settings.BLOCK_RESOURCES}', "
                         f"NavTimeout='{_cached_settings.NAVIGATION_TIMEOUT_SECONDS}s', "
                         f"Keywords={_cached_settings.RPV_KEYWORDS}")

        except Exception as e:
            logger.critical(f"CRITICAL ERROR initializing AppSettings: {e}.", exc_info=True)
            raise

    return _cached_settings

def get_app_settings() -> AppSettings:
    if _cached_settings is None:
        load_settings()
    return _cached_settings

def clear_cached_settings():
    global _cached_settings
    _cached_settings = None
    logger.info("Cached settings cleared.")
