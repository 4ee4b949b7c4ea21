"""Error classes for the Keycloak SDK.

Every failure of the request pipeline surfaces as a subclass of
``KeycloakError`` carrying a stable error code, so callers can branch on
the category without parsing messages.
"""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    import httpx

    from .models import Response


class ErrorCode(StrEnum):
    """Standardized error codes for the Keycloak SDK."""

    # Request construction errors (1xxx)
    URL_RESOLUTION = "REQ_1001"
    ENCODING = "REQ_1002"
    FORM_ENCODING = "REQ_1003"
    JSON_ENCODING = "REQ_1004"

    # Network errors (2xxx)
    TRANSPORT = "NET_2001"
    CANCELLED = "NET_2002"
    DEADLINE_EXCEEDED = "NET_2003"

    # Upstream errors (3xxx)
    UPSTREAM = "UPS_3001"

    # Decoding errors (4xxx)
    DECODE = "DEC_4001"

    # Configuration errors (5xxx)
    INVALID_CONFIG = "CFG_5001"


class KeycloakError(Exception):
    """Base error for the Keycloak SDK with structured error information."""

    def __init__(
        self,
        message: str,
        code: ErrorCode | str,
        *,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code if isinstance(code, str) else code.value
        self.status_code = status_code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        return {
            "error": self.message,
            "code": self.code,
            "status_code": self.status_code,
            "details": self.details,
        }

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class URLResolutionError(KeycloakError):
    """Relative path could not be resolved against the base URL."""

    def __init__(self, path: str, *, cause: Exception | None = None) -> None:
        super().__init__(
            f"Cannot resolve path {path!r} against base URL",
            ErrorCode.URL_RESOLUTION,
            details={"path": path, "cause": str(cause)} if cause else {"path": path},
        )
        self.path = path
        self.__cause__ = cause


class EncodingError(KeycloakError):
    """Request body could not be serialized. No network attempt was made."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.ENCODING,
        *,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            message,
            code,
            details={"cause": str(cause)} if cause else None,
        )
        self.__cause__ = cause


class FormEncodingError(EncodingError):
    """Body cannot be mapped to URL-encoded form fields."""

    def __init__(self, message: str, *, cause: Exception | None = None) -> None:
        super().__init__(message, ErrorCode.FORM_ENCODING, cause=cause)


class JSONEncodingError(EncodingError):
    """Body cannot be serialized to JSON."""

    def __init__(self, message: str, *, cause: Exception | None = None) -> None:
        super().__init__(message, ErrorCode.JSON_ENCODING, cause=cause)


class TransportError(KeycloakError):
    """Network-level dispatch failure."""

    def __init__(
        self,
        message: str = "Request dispatch failed",
        *,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            message,
            ErrorCode.TRANSPORT,
            details={"cause": str(cause)} if cause else None,
        )
        self.__cause__ = cause


class RequestCancelledError(KeycloakError):
    """The request context was cancelled by the caller."""

    def __init__(self, message: str = "Request context cancelled") -> None:
        super().__init__(message, ErrorCode.CANCELLED)


class DeadlineExceededError(KeycloakError):
    """The request context deadline passed."""

    def __init__(
        self,
        message: str = "Request context deadline exceeded",
        *,
        timeout_seconds: float | None = None,
    ) -> None:
        super().__init__(
            message,
            ErrorCode.DEADLINE_EXCEEDED,
            status_code=408,
            details={"timeout_seconds": timeout_seconds} if timeout_seconds else None,
        )


class UpstreamError(KeycloakError):
    """Keycloak answered with a status code of 300 or above.

    Owns the raw response for caller inspection. ``message`` holds the
    ``error_description`` of the body and is empty when the body is missing
    or not in that shape.
    """

    def __init__(self, response: httpx.Response, message: str = "") -> None:
        request = response.request
        super().__init__(
            f"{request.method} {request.url}: {response.status_code} {message}",
            ErrorCode.UPSTREAM,
            status_code=response.status_code,
        )
        self.response = response
        self.message = message


class DecodeError(KeycloakError):
    """A successful response body could not be decoded into the target."""

    def __init__(
        self,
        message: str,
        *,
        response: Response,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            message,
            ErrorCode.DECODE,
            status_code=response.status_code,
            details={"cause": str(cause)} if cause else None,
        )
        self.response_wrapper = response
        self.__cause__ = cause


class InvalidConfigError(KeycloakError):
    """Invalid SDK configuration."""

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
    ) -> None:
        super().__init__(
            message,
            ErrorCode.INVALID_CONFIG,
            details={"field": field} if field else None,
        )
