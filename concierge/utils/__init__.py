"""Utilities package."""

from .logger import get_app_logger, setup_logger, init_app_logger
from .text import sanitize_input, contains_sensitive_data, extract_entities

__all__ = [
    "get_app_logger",
    "setup_logger",
    "init_app_logger",
    "sanitize_input",
    "contains_sensitive_data",
    "extract_entities",
]
