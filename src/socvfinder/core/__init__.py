# src/socvfinder/core/__init__.py
"""Core infrastructure: Configuration, Logging."""

from socvfinder.core.config import (
    DEFAULT_REPORT_URL,
    MAX_PAGES,
    ApiSettings,
    FinderSettings,
    StoreSettings,
    load_settings,
)
from socvfinder.core.logging import (
    configure_logging,
    get_logger,
)

__all__ = [
    "DEFAULT_REPORT_URL",
    "MAX_PAGES",
    "ApiSettings",
    "FinderSettings",
    "StoreSettings",
    "configure_logging",
    "get_logger",
    "load_settings",
]
