"""Tests for logger utility."""

import logging

from concierge.config import Settings
from concierge.utils import logger as logger_module
from concierge.utils.logger import (
    setup_logger,
    get_app_logger,
    init_app_logger,
    APP_LOGGER_NAME,
    DATE_FORMAT,
    LOG_FORMAT
)


class TestSetupLogger:
    """SUT: setup_logger"""

    def test_returns_logger(self):
        """Should return a Logger instance."""
        logger = setup_logger("test_concierge_returns")
        assert isinstance(logger, logging.Logger)

    def test_with_level(self):
        """Setting DEBUG level should take effect."""
        logger = setup_logger("test_concierge_level", log_level="DEBUG")
        assert logger.level == logging.DEBUG

    def test_unknown_level_falls_back_to_info(self):
        """An unknown level name should fall back to INFO."""
        logger = setup_logger("test_concierge_bad_level", log_level="LOUD")
        assert logger.level == logging.INFO

    def test_no_duplicate_handlers(self):
        """Calling multiple times should not add duplicate handlers."""
        name = "test_concierge_dup"
        logger1 = setup_logger(name)
        handler_count = len(logger1.handlers)
        logger2 = setup_logger(name)
        assert len(logger2.handlers) == handler_count
        assert logger1 is logger2

    def test_file_handler_creates_directory(self, tmp_path):
        """A log file in a missing directory should be created."""
        log_file = tmp_path / "nested" / "app.log"
        logger = setup_logger("test_concierge_file", log_file=str(log_file))
        logger.info("hello")
        assert log_file.parent.exists()
        assert any(isinstance(h, logging.FileHandler) for h in logger.handlers)

    def test_handlers_share_format(self):
        """Console output uses the application log format."""
        logger = setup_logger("test_concierge_format")
        formatter = logger.handlers[0].formatter
        assert formatter._fmt == LOG_FORMAT
        assert formatter.datefmt == DATE_FORMAT


class TestAppLogger:
    """SUT: init_app_logger / get_app_logger"""

    def test_default(self):
        """Should return a logger even when not explicitly initialized."""
        logger = get_app_logger()
        assert isinstance(logger, logging.Logger)
        assert logger.name == APP_LOGGER_NAME

    def test_init_sets_global(self, monkeypatch):
        """init_app_logger() should make get_app_logger() return the same instance."""
        monkeypatch.setattr(logger_module, "app_logger", None)
        logger = init_app_logger(Settings(log_level="WARNING", log_file=""))
        assert get_app_logger() is logger
