"""Configuration management for table-uploader.

Usage:
    >>> from table_uploader.config import get_settings
    >>> settings = get_settings()
    >>> settings.batch_size
    10000
"""

from table_uploader.config.settings import (
    DEFAULT_BATCH_SIZE,
    Settings,
    get_settings,
    parse_flag,
)

__all__ = [
    "DEFAULT_BATCH_SIZE",
    "Settings",
    "get_settings",
    "parse_flag",
]
