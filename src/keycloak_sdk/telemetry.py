"""Structured logging and tracing for Keycloak calls.

Log lines carry the active span's trace and span ids so a failed admin
call can be matched to its ``http_request`` span.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

import structlog
from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

from .errors import KeycloakError

if TYPE_CHECKING:
    from collections.abc import Generator, MutableMapping

    from .config import TelemetryConfig

_INSTRUMENTATION = "keycloak-sdk"
_VERSION = "0.1.0"

_tracer: trace.Tracer | None = None
_logger: structlog.BoundLogger | None = None


def get_tracer() -> trace.Tracer:
    global _tracer
    if _tracer is None:
        _tracer = trace.get_tracer(_INSTRUMENTATION, _VERSION)
    return _tracer


def get_logger() -> structlog.BoundLogger:
    global _logger
    if _logger is None:
        _logger = structlog.get_logger(_INSTRUMENTATION)
    return _logger


def add_span_context(
    logger: Any, method_name: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """structlog processor adding ``trace_id``/``span_id`` of the current span."""
    span_context = trace.get_current_span().get_span_context()
    if span_context.is_valid:
        event_dict.setdefault("trace_id", format(span_context.trace_id, "032x"))
        event_dict.setdefault("span_id", format(span_context.span_id, "016x"))
    return event_dict


def configure_telemetry(
    config: TelemetryConfig,
    *,
    realm: str | None = None,
    client_id: str | None = None,
) -> None:
    """Install the SDK logger and tracer.

    ``realm`` and ``client_id``, when given, are bound on every log line.
    Disabling telemetry swaps in a no-op tracer and leaves logging alone.
    """
    global _tracer, _logger

    if not config.enabled:
        _tracer = trace.NoOpTracer()
        return

    level = logging.getLevelNamesMapping()[config.log_level]
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            add_span_context,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    bound = {
        key: value
        for key, value in (("realm", realm), ("client_id", client_id))
        if value
    }
    _tracer = trace.get_tracer(config.service_name, _VERSION)
    _logger = structlog.get_logger(config.service_name).bind(**bound)


@contextmanager
def trace_operation(
    name: str,
    *,
    attributes: dict[str, Any] | None = None,
) -> Generator[trace.Span, None, None]:
    """Run a block inside a span.

    A ``KeycloakError`` escaping the block is recorded on the span as
    ``keycloak.error_code`` plus ``http.status_code`` when the error has one.
    """
    with get_tracer().start_as_current_span(
        name, attributes=attributes, record_exception=False, set_status_on_exception=False
    ) as span:
        try:
            yield span
        except KeycloakError as e:
            span.set_attribute("keycloak.error_code", str(e.code))
            if e.status_code is not None:
                span.set_attribute("http.status_code", e.status_code)
            span.set_status(Status(StatusCode.ERROR, e.message))
            span.record_exception(e)
            raise
        except Exception as e:
            span.set_status(Status(StatusCode.ERROR, str(e)))
            span.record_exception(e)
            raise
