"""Structured logging for wp-model.

structlog on top of stdlib logging. Models, queries and the WordPress
collaborators log dotted event names with keyword context:

    logger = get_logger(__name__)
    logger.info("model.saved", object_type="page", id=123)

setup_logging() is optional: until it runs, structlog's defaults print to
stdout. Applications embedding the package call it once at startup.
"""

import logging
import sys
from typing import Any

import structlog
from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError
from structlog.typing import EventDict, Processor

from wpmodel.config.settings import Settings, get_settings


# ============================================================================
# REDACTION
# ============================================================================

REDACTED = "[REDACTED]"

# Columns of wp_posts / wp_users that must never reach the logs
SENSITIVE_KEYS = frozenset({
    "password",
    "post_password",
    "user_pass",
    "user_activation_key",
    "secret",
    "token",
})

# Values are connection strings: password is masked, host/db stay visible
URL_KEYS = frozenset({"database_url", "url", "dsn"})


def _mask_url(value: Any) -> Any:
    """mysql+pymysql://wp:secret@db/wordpress → mysql+pymysql://wp:***@db/wordpress"""
    if not isinstance(value, str):
        return value
    try:
        return make_url(value).render_as_string(hide_password=True)
    except ArgumentError:
        return REDACTED


def _redact(data: dict[Any, Any]) -> dict[Any, Any]:
    result = {}
    for key, value in data.items():
        name = key.lower() if isinstance(key, str) else key
        if name in SENSITIVE_KEYS:
            result[key] = REDACTED
        elif name in URL_KEYS:
            result[key] = _mask_url(value)
        elif isinstance(value, dict):
            # model.to_array() payloads are logged as nested dicts
            result[key] = _redact(value)
        else:
            result[key] = value
    return result


def filter_sensitive_data(
    logger: logging.Logger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Redact post passwords and user credentials, mask database URLs."""
    return _redact(event_dict)


def add_service_context(
    logger: logging.Logger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Add app name, environment and table prefix to log events."""
    settings = get_settings()
    event_dict.setdefault("service", settings.app_name)
    event_dict.setdefault("environment", settings.environment)
    event_dict.setdefault("table_prefix", settings.table_prefix)
    return event_dict


# ============================================================================
# SETUP
# ============================================================================


def build_processors(settings: Settings) -> tuple[list[Processor], Processor]:
    """Shared processor chain and the final renderer for ``settings.log_format``."""
    shared: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True, key="timestamp"),
        add_service_context,
        filter_sensitive_data,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if settings.log_format == "json":
        shared.append(structlog.processors.format_exc_info)
        renderer: Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())

    return shared, renderer


def setup_logging(settings: Settings | None = None) -> None:
    """Configure structlog and the root stdlib logger.

    Stdlib records (SQLAlchemy, the event dispatcher) go through the same
    chain via ProcessorFormatter, so every line has one format.
    """
    settings = settings or get_settings()
    shared, renderer = build_processors(settings)

    structlog.configure(
        processors=shared + [renderer],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=shared)
    )

    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(getattr(logging, settings.log_level))

    # SQL statements only with db_echo
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.db_echo else logging.WARNING
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger (name is usually ``__name__``)."""
    return structlog.get_logger(name)


# ============================================================================
# REQUEST CONTEXT
# ============================================================================


def bind_request_context(request_id: str, **extra: Any) -> None:
    """Bind a request ID (plus extra keys such as blog_id) to all log calls.

    Previous context is dropped first.
    """
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(request_id=request_id, **extra)


def clear_request_context() -> None:
    """Clear request context (call at end of request)."""
    structlog.contextvars.clear_contextvars()
