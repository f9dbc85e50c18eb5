"""Custom structlog processors for hook logging"""

import os

from structlog.contextvars import get_contextvars
from structlog.types import EventDict, WrappedLogger


def add_service_context(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Add service-level context to logs"""
    event_dict["service"] = "gitgate"
    event_dict["pid"] = os.getpid()
    return event_dict


def add_invocation_context(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Add hook invocation context from contextvars"""
    context = get_contextvars()

    for key in ("hook", "repository", "plugin"):
        if key in context and key not in event_dict:
            event_dict[key] = context[key]

    return event_dict


def set_log_severity(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Set proper severity field for log aggregation systems"""
    level_map = {
        "debug": "DEBUG",
        "info": "INFO",
        "warning": "WARNING",
        "error": "ERROR",
        "critical": "CRITICAL",
    }

    if "level" in event_dict:
        event_dict["severity"] = level_map.get(event_dict["level"], "INFO")

    return event_dict
