"""Keycloak Python SDK."""

from .client import KeycloakClient, default_http_client
from .config import KeycloakConfig, TelemetryConfig
from .context import RequestContext
from .core.request_builder import FORM_ENCODED, RequestHeaders
from .errors import (
    DeadlineExceededError,
    DecodeError,
    EncodingError,
    ErrorCode,
    FormEncodingError,
    InvalidConfigError,
    JSONEncodingError,
    KeycloakError,
    RequestCancelledError,
    TransportError,
    UpstreamError,
    URLResolutionError,
)
from .models import AccessGrantRequest, OIDCToken, Response
from .telemetry import configure_telemetry

__all__ = [
    "KeycloakClient",
    "KeycloakConfig",
    "TelemetryConfig",
    "RequestContext",
    "RequestHeaders",
    "FORM_ENCODED",
    "KeycloakError",
    "ErrorCode",
    "URLResolutionError",
    "EncodingError",
    "FormEncodingError",
    "JSONEncodingError",
    "TransportError",
    "RequestCancelledError",
    "DeadlineExceededError",
    "UpstreamError",
    "DecodeError",
    "InvalidConfigError",
    "AccessGrantRequest",
    "OIDCToken",
    "Response",
    "configure_telemetry",
    "default_http_client",
]

__version__ = "0.1.0"
