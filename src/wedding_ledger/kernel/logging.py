"""
Structured logging for Wedding Ledger.

Console output while planning locally, JSON when ENVIRONMENT=production.
Every record carries a correlation id so one import or report can be
followed across modules. Guest contact details are scrubbed from context
before it is logged.
"""

import contextvars
import logging
import os
import secrets
import sys
import time
from collections.abc import Mapping
from typing import Any

import structlog

correlation_id_var: contextvars.ContextVar[str] = contextvars.ContextVar(
    "correlation_id", default=""
)

REDACTED = "***REDACTED***"

# Exact keys, plus anything ending in one of the suffixes
# (alternate_phone, contact_email, ...)
REDACTED_FIELDS = frozenset(
    {"guest_name", "first_name", "last_name", "member_name", "password", "token", "api_key"}
)
REDACTED_SUFFIXES = ("email", "phone", "whatsapp_number")


def get_correlation_id() -> str:
    """Current correlation id; one is minted on first use in a context."""
    cid = correlation_id_var.get()
    if not cid:
        cid = secrets.token_urlsafe(16)
        correlation_id_var.set(cid)
    return cid


def set_correlation_id(correlation_id: str) -> None:
    correlation_id_var.set(correlation_id)


def _add_correlation_id(
    logger: logging.Logger, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    event_dict["correlation_id"] = get_correlation_id()
    return event_dict


def configure_logging(*, json_output: bool = False, log_level: str = "INFO") -> None:
    """
    Configure structlog on top of the stdlib logging module.

    Args:
        json_output: JSON lines (production) instead of coloured console output
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL
    """
    # stderr keeps stdout clean for `wledger ... --json`
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, log_level.upper()),
    )
    logging.getLogger("werkzeug").setLevel(logging.WARNING)

    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        _add_correlation_id,
    ]
    if json_output:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors += [structlog.dev.ConsoleRenderer(colors=True)]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def is_production() -> bool:
    return os.getenv("ENVIRONMENT", "development").lower() == "production"


def _is_sensitive(key: str) -> bool:
    key = key.lower()
    return key in REDACTED_FIELDS or key.endswith(REDACTED_SUFFIXES)


def redact_context(context: Mapping[str, Any]) -> dict[str, Any]:
    """
    Copy of context with guest PII replaced, nested rows included.

    Example:
        >>> redact_context({"event_id": "evt-1", "row": {"email": "a@b.in"}})
        {'event_id': 'evt-1', 'row': {'email': '***REDACTED***'}}
    """
    redacted: dict[str, Any] = {}
    for key, value in context.items():
        if _is_sensitive(key):
            redacted[key] = REDACTED
        elif isinstance(value, Mapping):
            redacted[key] = redact_context(value)
        elif isinstance(value, list):
            redacted[key] = [
                redact_context(item) if isinstance(item, Mapping) else item for item in value
            ]
        else:
            redacted[key] = value
    return redacted


class LogOperation:
    """
    Time a ledger operation and log its start and outcome.

    Fields passed to record() inside the block are added to the completion
    record, e.g. how many rows an import accepted:

        with LogOperation(logger, "import_guests", event_id=event_id) as op:
            result = import_guests(...)
            op.record(imported=result.imported, skipped=result.skipped)
    """

    def __init__(self, logger: structlog.stdlib.BoundLogger, operation: str, **context: Any):
        self.logger = logger
        self.operation = operation
        self.context = redact_context(context)
        self.outcome: dict[str, Any] = {}
        self.start_time = 0.0

    def record(self, **fields: Any) -> None:
        self.outcome.update(redact_context(fields))

    def __enter__(self) -> "LogOperation":
        self.start_time = time.perf_counter()
        self.logger.info(f"{self.operation} started", operation=self.operation, **self.context)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        duration_ms = round((time.perf_counter() - self.start_time) * 1000, 2)

        if exc_type is None:
            self.logger.info(
                f"{self.operation} completed",
                operation=self.operation,
                duration_ms=duration_ms,
                **self.context,
                **self.outcome,
            )
        else:
            # Tracebacks only outside production
            self.logger.error(
                f"{self.operation} failed",
                operation=self.operation,
                duration_ms=duration_ms,
                error=str(exc_val),
                exc_info=not is_production(),
                **self.context,
            )
