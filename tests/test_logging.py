"""Tests for logging setup."""

import logging

import pytest
from rich.logging import RichHandler

from foundry_agents.core import logging as app_logging
from foundry_agents.core.config import AppSettings


@pytest.fixture
def settings_factory(monkeypatch, tmp_path):
    def apply(**overrides):
        settings = AppSettings(config_dir=tmp_path, **overrides)
        monkeypatch.setattr(app_logging, "get_settings", lambda: settings)
        return settings

    return apply


def _rich_handler(logger):
    return next(handler for handler in logger.handlers if isinstance(handler, RichHandler))


class TestSetupLogging:
    """Level and console detail follow the verbose switches."""

    def test_default_level_is_compact(self, settings_factory):
        settings_factory(log_level="WARNING")
        logger = app_logging.setup_logging()

        assert logger.level == logging.WARNING
        render = _rich_handler(logger)._log_render
        assert not render.show_time
        assert not render.show_path

    def test_verbose_setting_matches_flag(self, settings_factory):
        settings_factory(verbose=True)
        from_setting = app_logging.setup_logging()
        setting_render = _rich_handler(from_setting)._log_render

        assert from_setting.level == logging.DEBUG
        assert setting_render.show_time
        assert setting_render.show_path

        settings_factory()
        from_flag = app_logging.setup_logging(verbose=True)
        assert from_flag.level == logging.DEBUG
        assert _rich_handler(from_flag)._log_render.show_path

    def test_log_file(self, settings_factory, tmp_path):
        settings_factory()
        log_path = tmp_path / "client.log"
        logger = app_logging.setup_logging(level="INFO", log_file=log_path)

        app_logging.get_logger("tests").info("written to file")
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)

        assert "written to file" in log_path.read_text(encoding="utf-8")
