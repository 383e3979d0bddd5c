"""
Structured logging configuration using structlog.

Log events are snake_case names with keyword context, rendered as JSON in
production and as colored console lines in development.

Usage:
    from apps.core.logging import get_logger

    logger = get_logger(__name__)
    logger.info("partner_checkin_recorded", partner="Gympass", student_id=42)

Field naming follows Datadog standard attributes:
    - trace_id: Request correlation ID
    - organization.id: Tenant identifier
    - http.method: HTTP request method
    - http.url_details.path: Request path
    - duration: Request duration in nanoseconds

Phone numbers under ``phone``, ``phone_number`` or ``to`` are masked to
their last four digits before rendering.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor

# Event keys that carry a student's phone number
PHONE_FIELDS = ("phone", "phone_number", "to")

# Libraries that log full request URLs (Twilio account SID, Stripe ids) at INFO
QUIET_LOGGERS = ("httpx", "httpcore", "stripe")


def mask_phone(phone_number: str | None) -> str:
    """Return only the last four digits of a phone number for log output."""
    if not phone_number:
        return ""
    return f"***{phone_number[-4:]}"


def _add_datadog_trace_fields(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Rename correlation_id to trace_id and force it to a string."""
    if "correlation_id" in event_dict:
        event_dict["trace_id"] = str(event_dict.pop("correlation_id"))
    return event_dict


def _convert_duration_to_nanoseconds(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Convert duration_ms to duration (nanoseconds)."""
    if "duration_ms" in event_dict:
        event_dict["duration"] = int(event_dict.pop("duration_ms") * 1_000_000)
    return event_dict


def _mask_phone_fields(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Mask phone numbers left unmasked by the caller."""
    for key in PHONE_FIELDS:
        value = event_dict.get(key)
        if isinstance(value, str) and value and not value.startswith("***"):
            event_dict[key] = mask_phone(value)
    return event_dict


def shared_processors() -> list[Processor]:
    """Processors applied to structlog and stdlib records alike."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        _add_datadog_trace_fields,
        _convert_duration_to_nanoseconds,
        _mask_phone_fields,
    ]


def configure_logging(json_format: bool = True, log_level: str = "INFO") -> None:
    """
    Configure structlog for the application.

    Uses stdlib integration so Django and third-party loggers (stripe, httpx)
    go through the same renderer.

    Args:
        json_format: If True, output JSON (production). If False, pretty console output.
        log_level: Minimum log level to output.
    """
    pre_chain = shared_processors()

    if json_format:
        renderer: Processor = structlog.processors.JSONRenderer(ensure_ascii=False)
        pre_chain.append(structlog.processors.format_exc_info)
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger, typically with ``__name__``."""
    return structlog.get_logger(name)


def bind_contextvars(**kwargs: Any) -> None:
    """
    Bind key-value pairs to the current request context.

    Usage:
        bind_contextvars(**{"organization.id": str(org.id)})
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_contextvars() -> None:
    """Clear all bound context variables at the end of a request."""
    structlog.contextvars.clear_contextvars()
