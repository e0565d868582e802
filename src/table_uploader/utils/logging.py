"""Structured logging built on structlog.

Every module logs dotted event names with keyword context:

    >>> from table_uploader.utils.logging import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.info("insert_table.started", table="scratch.person", rows=3)

Fields bound with ``upload_context`` are merged into every event emitted
while the upload runs, so batch and bulk-load events carry the same
``execution_id`` and ``table`` as the surrounding insert_table call.

Environment:
- LOG_LEVEL: DEBUG, INFO, WARNING, ERROR, CRITICAL. Default: INFO
- LOG_TO_FILE: also write to a daily rotated file (1, true, yes)
- LOG_FILE_DIR: directory for log files. Default: logs/
"""

import logging
import os
import re
from contextlib import contextmanager
from datetime import datetime
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import Any, Dict, Iterator, List, MutableMapping, Optional

import structlog
from structlog.types import EventDict, Processor

from table_uploader.config import get_settings

# Bulk-load credentials travel through log context; never render them.
SENSITIVE_PATTERNS = [
    re.compile(r".*password.*", re.IGNORECASE),
    re.compile(r".*secret.*", re.IGNORECASE),
    re.compile(r".*token.*", re.IGNORECASE),
    re.compile(r".*access_key.*", re.IGNORECASE),
    re.compile(r"^credentials$", re.IGNORECASE),
]

REDACTED_VALUE = "[REDACTED]"

LOG_FILE_BACKUPS = 30

# Handlers added by configure_logging, replaced on reconfiguration
_installed_handlers: List[logging.Handler] = []


def _is_sensitive(key: str) -> bool:
    return any(pattern.match(key) for pattern in SENSITIVE_PATTERNS)


def sanitize_for_logging(data: Dict[str, Any]) -> Dict[str, Any]:
    """Redact sensitive values from a dictionary before logging.

    Example:
        >>> sanitize_for_logging({"aws_secret_access_key": "abc", "bucket": "b"})
        {'aws_secret_access_key': '[REDACTED]', 'bucket': 'b'}
    """
    sanitized: Dict[str, Any] = {}
    for key, value in data.items():
        if _is_sensitive(key):
            sanitized[key] = REDACTED_VALUE
        elif isinstance(value, dict):
            sanitized[key] = sanitize_for_logging(value)
        else:
            sanitized[key] = value
    return sanitized


def sanitization_processor(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> MutableMapping[str, Any]:
    """Structlog processor applying sanitize_for_logging to every event."""
    return sanitize_for_logging(dict(event_dict))


def _resolve_level(level: Optional[str]) -> int:
    if level is None:
        try:
            level = get_settings().LOG_LEVEL
        except Exception:
            # A malformed .env must not take logging down with it
            level = os.getenv("LOG_LEVEL", "INFO")
    return getattr(logging, level.upper(), logging.INFO)


def _file_handler() -> Optional[logging.Handler]:
    if os.getenv("LOG_TO_FILE", "").lower() not in ("1", "true", "yes"):
        return None
    log_dir = Path(os.getenv("LOG_FILE_DIR", "logs"))
    log_dir.mkdir(parents=True, exist_ok=True)
    filename = log_dir / f"table-uploader-{datetime.now():%Y%m%d}.log"
    return TimedRotatingFileHandler(
        filename=str(filename),
        when="midnight",
        backupCount=LOG_FILE_BACKUPS,
        encoding="utf-8",
    )


def configure_logging(level: Optional[str] = None) -> None:
    """(Re)configure the stdlib handlers and the structlog processor chain."""
    resolved = _resolve_level(level)
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    file_handler = _file_handler()
    if file_handler is not None:
        handlers.append(file_handler)
    root = logging.getLogger()
    for handler in _installed_handlers:
        root.removeHandler(handler)
    _installed_handlers[:] = handlers
    for handler in handlers:
        handler.setLevel(resolved)
        handler.setFormatter(logging.Formatter("%(message)s"))
        root.addHandler(handler)
    root.setLevel(resolved)

    processors: List[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        sanitization_processor,
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer(),
    ]
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


configure_logging()


def get_logger(name: str) -> Any:
    """Get a structlog BoundLogger for ``name`` (typically ``__name__``)."""
    return structlog.get_logger(name)


@contextmanager
def upload_context(**fields: Any) -> Iterator[None]:
    """Attach ``fields`` to every event logged inside the block.

    Example:
        >>> with upload_context(table="scratch.person", execution_id="ab12"):
        ...     get_logger("x").info("insert.batch.executed", rows=10000)
    """
    with structlog.contextvars.bound_contextvars(**fields):
        yield
