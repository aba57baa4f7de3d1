"""structlog setup for the checkout service."""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor

from .settings import settings
from .utils import get_request_id

SERVICE_NAME = "zero26-checkout"
SERVICE_VERSION = "0.1.0"

# Event keys that must never reach a log sink.
REDACTED_KEYS = frozenset({"signature", "key_secret", "secret", "authorization"})
REDACTED = "[redacted]"

NOISY_LOGGERS = ("httpx", "httpcore", "uvicorn.access")


def add_request_id(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    request_id = get_request_id()
    if request_id:
        event_dict["request_id"] = request_id
    return event_dict


def add_service_context(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    event_dict.setdefault("service", SERVICE_NAME)
    event_dict.setdefault("environment", settings.SENTRY_ENVIRONMENT)
    event_dict.setdefault("version", SERVICE_VERSION)
    event_dict.setdefault("payments_mode", settings.PAYMENTS_MODE)
    return event_dict


def redact_secrets(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Mask payment signatures and gateway credentials passed as log context."""
    for key in REDACTED_KEYS.intersection(event_dict):
        event_dict[key] = REDACTED
    return event_dict


def build_processors(json_logs: bool) -> list[Processor]:
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        add_request_id,
        add_service_context,
        redact_secrets,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.StackInfoRenderer(),
    ]
    if json_logs:
        processors += [
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors += [
            structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S"),
            structlog.dev.ConsoleRenderer(),
        ]
    return processors


def configure_structlog(json_logs: bool = False) -> None:
    """Route structlog through stdlib logging; JSON lines unless ``json_logs`` is off in DEBUG."""
    structlog.configure(
        processors=build_processors(json_logs or not settings.DEBUG),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=logging.INFO)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


__all__ = ["configure_structlog", "get_logger", "redact_secrets"]
