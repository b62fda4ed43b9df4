import json
import pytest
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

from trf1_rpv.core import config as config_module
from trf1_rpv.core.config import AppSettings
from trf1_rpv.core.lifespan import lifespan_manager
from trf1_rpv.services.browser_session import BrowserSessionManager
from trf1_rpv.services.query_executor import QueryExecutor


@pytest.fixture
def fresh_settings(monkeypatch, tmp_path):
    monkeypatch.setattr(config_module, "CONFIG_FILE_PATH", str(tmp_path / "config.json"))
    config_module.clear_cached_settings()
    yield tmp_path / "config.json"
    config_module.clear_cached_settings()


def test_settings_defaults_without_config_file(fresh_settings):
    settings = config_module.get_app_settings()
    assert settings.RPV_KEYWORDS == config_module.DEFAULT_RPV_KEYWORDS
    assert settings.TRF1_PROCESS_URL_TEMPLATE == config_module.DEFAULT_PROCESS_URL_TEMPLATE
    assert config_module.get_app_settings() is settings


def test_settings_config_file_overrides_client_keys_only(fresh_settings):
    fresh_settings.write_text(json.dumps({
        "RPV_KEYWORDS": ["precatório"],
        "CONTENT_MARKER_SELECTOR": "#resultado",
        "PORT": 9999,
    }), encoding="utf-8")

    settings = config_module.load_settings()

    assert settings.RPV_KEYWORDS == ["precatório"]
    assert settings.CONTENT_MARKER_SELECTOR == "#resultado"
    assert settings.PORT != 9999


def test_settings_invalid_config_file_falls_back_to_defaults(fresh_settings):
    fresh_settings.write_text("{not json", encoding="utf-8")
    settings = config_module.load_settings()
    assert settings.RPV_KEYWORDS == config_module.DEFAULT_RPV_KEYWORDS


@pytest.mark.asyncio
async def test_lifespan_builds_session_and_cleans_up(fresh_settings):
    app = SimpleNamespace(state=SimpleNamespace())
    mock_playwright = MagicMock()
    mock_playwright.stop = AsyncMock()

    with patch("trf1_rpv.core.lifespan.async_playwright") as mock_async_playwright:
        mock_async_playwright.return_value.start = AsyncMock(return_value=mock_playwright)
        with patch.object(BrowserSessionManager, "close", new_callable=AsyncMock) as mock_close:
            async with lifespan_manager(app):
                assert app.state.playwright_instance is mock_playwright
                assert isinstance(app.state.browser_session, BrowserSessionManager)
                assert isinstance(app.state.query_executor, QueryExecutor)
                assert app.state.browser_session.is_ready() is False

            mock_close.assert_awaited_once()
    mock_playwright.stop.assert_awaited_once()
    assert app.state.playwright_instance is None


@pytest.mark.asyncio
async def test_lifespan_survives_playwright_start_failure(fresh_settings):
    app = SimpleNamespace(state=SimpleNamespace())

    with patch("trf1_rpv.core.lifespan.async_playwright") as mock_async_playwright:
        mock_async_playwright.return_value.start = AsyncMock(side_effect=Exception("driver missing"))
        async with lifespan_manager(app):
            assert app.state.playwright_instance is None
            assert getattr(app.state, "browser_session", None) is None


def test_settings_ignore_unknown_keys_without_class_config():
    assert AppSettings.model_config["extra"] == "ignore"
    assert "Config" not in AppSettings.__dict__
    settings = AppSettings(NOT_A_SETTING="x")
    assert not hasattr(settings, "NOT_A_SETTING")
