"""Logging for the concierge: one shared application logger, console plus optional file."""

import logging
import os
from typing import Optional


APP_LOGGER_NAME = "ai_concierge"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logger(
    name: str,
    log_level: str = "INFO",
    log_file: Optional[str] = None
) -> logging.Logger:
    """
    Configure a named logger.

    Handlers are attached once; later calls only adjust the level. Unknown
    level names fall back to INFO.

    Args:
        name: Logger name
        log_level: Level name such as DEBUG or WARNING
        log_file: Optional log file; its directory is created when missing

    Returns:
        The configured logger
    """
    logger = logging.getLogger(name)

    level = getattr(logging, log_level.upper(), logging.INFO)
    logger.setLevel(level)

    if logger.handlers:
        return logger

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)

        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


# Set by init_app_logger at startup
app_logger: Optional[logging.Logger] = None


def init_app_logger(settings) -> logging.Logger:
    """Configure the shared concierge logger from settings; an empty log_file means console only."""
    global app_logger

    app_logger = setup_logger(
        name=APP_LOGGER_NAME,
        log_level=settings.log_level,
        log_file=settings.log_file or None
    )
    return app_logger


def get_app_logger() -> logging.Logger:
    """Shared concierge logger; console-only at INFO until init_app_logger has run."""
    if app_logger is None:
        return setup_logger(APP_LOGGER_NAME)
    return app_logger
