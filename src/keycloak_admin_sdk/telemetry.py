"""Logging and tracing for the Keycloak Admin SDK.

Every client applies its :class:`~keycloak_admin_sdk.config.TelemetryConfig`
on construction. SDK loggers carry the realm, token realm and auth method of
the client that emits them, and credential values are masked before any
configured renderer sees them.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

import structlog
from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

from .errors import KeycloakAdminError

if TYPE_CHECKING:
    from collections.abc import Generator, MutableMapping

    from .config import KeycloakConfig, TelemetryConfig

SDK_NAME = "keycloak-admin-sdk"
SDK_VERSION = "0.1.0"

# Event keys whose values are credentials
SECRET_KEYS = frozenset({
    "access_token",
    "authorization",
    "client_secret",
    "password",
    "refresh_token",
    "token",
})
MASK = "***"

_tracer: trace.Tracer | None = None
_logger_name = SDK_NAME


def get_tracer() -> trace.Tracer:
    """Get or create the SDK tracer."""
    global _tracer
    if _tracer is None:
        _tracer = trace.get_tracer(SDK_NAME, SDK_VERSION)
    return _tracer


def get_logger(config: KeycloakConfig | None = None) -> structlog.BoundLogger:
    """SDK logger, bound to a client's realm context when ``config`` is given."""
    logger = structlog.get_logger(_logger_name)
    if config is None:
        return logger
    return logger.bind(
        realm=config.realm,
        auth_realm=config.auth_realm,
        auth_method=str(config.auth_method),
    )


def redact_secrets(
    _logger: Any, _method: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """structlog processor masking credential-valued keys."""
    for key in event_dict.keys() & SECRET_KEYS:
        if event_dict[key] is not None:
            event_dict[key] = MASK
    return event_dict


def configure_telemetry(config: TelemetryConfig) -> None:
    """Apply a client's telemetry settings.

    Disabling telemetry swaps in a no-op tracer. The structlog pipeline is
    process-wide, so it is only installed when ``configure_logging`` is set.
    """
    global _tracer, _logger_name

    _logger_name = config.service_name
    if not config.enabled:
        _tracer = trace.NoOpTracer()
        return
    _tracer = trace.get_tracer(config.service_name, SDK_VERSION)

    if not config.configure_logging:
        return

    renderer = (
        structlog.processors.JSONRenderer()
        if config.json_logs
        else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            redact_secrets,
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            _level_number(config.log_level)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )


def _level_number(level: str) -> int:
    return logging.getLevelNamesMapping().get(level.upper(), logging.INFO)


@contextmanager
def trace_operation(
    name: str,
    *,
    attributes: dict[str, Any] | None = None,
) -> Generator[trace.Span, None, None]:
    """Run a block inside a span.

    ``None`` attribute values are skipped. SDK errors leaving the block tag
    the span with their error code and HTTP status.

    Args:
        name: Span name, e.g. ``keycloak.request``.
        attributes: Optional span attributes.

    Yields:
        The active span.
    """
    with get_tracer().start_as_current_span(name) as span:
        for key, value in (attributes or {}).items():
            if value is not None:
                span.set_attribute(key, value)
        try:
            yield span
        except Exception as e:
            if isinstance(e, KeycloakAdminError):
                span.set_attribute("keycloak.error_code", e.code)
                if e.status_code is not None:
                    span.set_attribute("http.status_code", e.status_code)
            span.set_status(Status(StatusCode.ERROR, str(e)))
            span.record_exception(e)
            raise
