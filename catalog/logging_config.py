"""
Central logging configuration for the catalog browse engine.

Provides:
- Structured logging (JSON in production, human-readable in development)
- Request correlation via contextvars (request_id set by the host application)
- Environment-aware log levels

Usage:
    from catalog.logging_config import get_logger
    logger = get_logger(__name__)
    logger.info("Browsing cameras", extra={"catalog": "cameras"})
"""

import json
import logging
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Dict, Mapping, Optional, Union

if TYPE_CHECKING:
    from catalog.config import Settings

# Context var for request ID - set by the host, available throughout a browse call
request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)

_RESERVED_ATTRS = frozenset((
    "name", "msg", "args", "created", "filename", "funcName",
    "levelname", "levelno", "lineno", "module", "msecs",
    "pathname", "process", "processName", "relativeCreated",
    "stack_info", "exc_info", "exc_text", "thread", "threadName",
    "message", "taskName", "request_id",
))


def get_request_id() -> Optional[str]:
    """Get the current request ID from context, if set."""
    return request_id_var.get()


class RequestIdFilter(logging.Filter):
    """Filter that adds request_id to log records from context."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = get_request_id() or "-"  # type: ignore[attr-defined]
        return True


class JsonFormatter(logging.Formatter):
    """Format log records as JSON for production log aggregators."""

    def format(self, record: logging.LogRecord) -> str:
        log_obj: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        req_id = getattr(record, "request_id", None)
        if req_id and req_id != "-":
            log_obj["request_id"] = req_id

        if record.exc_info:
            log_obj["exception"] = self.formatException(record.exc_info)

        # Anything passed via extra= in the log call
        for key, value in record.__dict__.items():
            if key in _RESERVED_ATTRS or value is None:
                continue
            try:
                json.dumps(value)
                log_obj[key] = value
            except (TypeError, ValueError):
                log_obj[key] = str(value)

        return json.dumps(log_obj)


def _create_dev_formatter() -> logging.Formatter:
    return logging.Formatter(
        "%(asctime)s %(levelname)-5s [%(name)s] req=%(request_id)s %(message)s",
        datefmt="%H:%M:%S",
    )


# Per-module levels for the catalog's own loggers. Browse and sort calls log
# one DEBUG record per request; they stay quiet unless asked for.
CATALOG_LOGGER_LEVELS: Dict[str, int] = {
    "catalog.engines.browse": logging.INFO,
    "catalog.plugins.catalogs": logging.INFO,
    "catalog.kernel.permissions": logging.INFO,
}


def _parse_level(level: Union[str, int], default: int = logging.INFO) -> int:
    if isinstance(level, int):
        return level
    return getattr(logging, str(level).upper(), default)


def configure_logging(
    *,
    log_level: str = "INFO",
    environment: str = "development",
    debug: bool = False,
    browse_log_level: Optional[str] = None,
    logger_levels: Optional[Mapping[str, Union[str, int]]] = None,
) -> None:
    """
    Configure application-wide logging.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        environment: 'development' or 'production'
        debug: If True, use DEBUG level everywhere, catalog loggers included
        browse_log_level: Level for catalog.engines.browse (e.g. DEBUG to trace each browse)
        logger_levels: Extra per-logger levels, applied last
    """
    level = logging.DEBUG if debug else _parse_level(log_level)

    root = logging.getLogger()
    root.setLevel(level)

    # Remove existing handlers to avoid duplicates on reconfigure
    for h in root.handlers[:]:
        root.removeHandler(h)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(logging.DEBUG if debug or browse_log_level else level)
    handler.addFilter(RequestIdFilter())

    if environment == "production":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(_create_dev_formatter())

    root.addHandler(handler)

    levels: Dict[str, int] = {}
    for name, default in CATALOG_LOGGER_LEVELS.items():
        levels[name] = logging.DEBUG if debug else max(default, level)
    if browse_log_level:
        levels["catalog.engines.browse"] = _parse_level(browse_log_level)
    for name, value in (logger_levels or {}).items():
        levels[name] = _parse_level(value)

    for name, value in levels.items():
        logging.getLogger(name).setLevel(value)


def configure_logging_from_settings(settings: "Settings") -> None:
    """configure_logging driven by Settings (LOG_LEVEL, ENVIRONMENT, DEBUG, BROWSE_LOG_LEVEL)."""
    configure_logging(
        log_level=settings.log_level,
        environment=settings.environment,
        debug=settings.debug,
        browse_log_level=settings.browse_log_level,
    )


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for the given module name.

    Logs will automatically include request_id when available.
    Use extra={} for additional structured fields:
        logger.debug("Filtered", extra={"catalog": "users", "total": 12})
    """
    return logging.getLogger(name)
