"""Request construction for the Keycloak SDK.

Turns a logical request (method, relative path, body, header hints and the
admin flag) into a fully encoded ``httpx.Request``.
"""

from __future__ import annotations

import json
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any
from urllib.parse import urlencode, urljoin

import httpx
from pydantic import BaseModel

from ..errors import (
    FormEncodingError,
    InvalidConfigError,
    JSONEncodingError,
    URLResolutionError,
)
from ..telemetry import get_logger

if TYPE_CHECKING:
    from ..config import KeycloakConfig
    from ..context import RequestContext
    from ..models import OIDCToken

FORM_ENCODED = "application/x-www-form-urlencoded"
JSON_CONTENT = "application/json"

_SCALARS = (str, int, float, bool)

TokenSource = Callable[["RequestContext | None"], "OIDCToken"]


@dataclass(frozen=True)
class RequestHeaders:
    """Header hints supplied by the caller."""

    authorization: str = ""
    content_type: str = ""


def encode_form(body: Any) -> str:
    """Encode a body as ``application/x-www-form-urlencoded``.

    The body must expose ``to_form()`` or be a mapping of field names to
    scalars or sequences of scalars.

    Raises:
        FormEncodingError: If the body cannot be mapped to form fields.
    """
    if hasattr(body, "to_form"):
        fields = body.to_form()
    elif isinstance(body, Mapping):
        fields = body
    else:
        msg = f"Cannot form-encode body of type {type(body).__name__}"
        raise FormEncodingError(msg)

    pairs: list[tuple[str, str]] = []
    for key, value in fields.items():
        if value is None:
            continue
        if isinstance(value, _SCALARS):
            pairs.append((str(key), _form_scalar(value)))
        elif (
            isinstance(value, Sequence)
            and not isinstance(value, (bytes, bytearray))
            and all(isinstance(v, _SCALARS) for v in value)
        ):
            pairs.extend((str(key), _form_scalar(v)) for v in value)
        else:
            msg = f"Cannot form-encode field {key!r} of type {type(value).__name__}"
            raise FormEncodingError(msg)
    return urlencode(pairs)


def _form_scalar(value: str | int | float | bool) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def encode_json(body: Any) -> bytes:
    """Encode a body as JSON, leaving ``<``, ``>`` and ``&`` unescaped.

    Pydantic models are dumped by alias with unset fields left out. Output
    ends with a newline.

    Raises:
        JSONEncodingError: If the body is not JSON serializable.
    """
    try:
        if isinstance(body, BaseModel):
            body = body.model_dump(mode="json", by_alias=True, exclude_none=True)
        payload = json.dumps(
            body, ensure_ascii=False, allow_nan=False, separators=(",", ":")
        )
    except (TypeError, ValueError) as e:
        raise JSONEncodingError(f"Cannot JSON-encode body: {e}", cause=e) from e
    return (payload + "\n").encode("utf-8")


class RequestBuilder:
    """Builds wire requests relative to the configured base URL.

    Admin requests get a fresh bearer token from ``token_source`` on every
    build; no token is reused.
    """

    def __init__(
        self,
        config: KeycloakConfig,
        token_source: TokenSource | None = None,
    ) -> None:
        """Initialize request builder.

        Args:
            config: SDK configuration.
            token_source: Callable returning a fresh admin token.
        """
        self.config = config
        self._token_source = token_source
        self._logger = get_logger()

    def resolve(self, path: str) -> httpx.URL:
        """Resolve a relative path against the base URL.

        Raises:
            URLResolutionError: On malformed input.
        """
        try:
            return httpx.URL(urljoin(self.config.base_url, path))
        except (TypeError, ValueError, httpx.InvalidURL) as e:
            raise URLResolutionError(str(path), cause=e) from e

    def build(
        self,
        method: str,
        path: str,
        body: Any = None,
        headers: RequestHeaders | None = None,
        is_admin_request: bool = False,
        *,
        ctx: RequestContext | None = None,
    ) -> httpx.Request:
        """Build an ``httpx.Request``.

        Args:
            method: HTTP method.
            path: Path relative to the base URL.
            body: Optional request body.
            headers: Authorization and content type hints.
            is_admin_request: Attach a freshly acquired admin bearer token.
            ctx: Context forwarded to the admin token acquisition.

        Returns:
            The encoded request.

        Raises:
            URLResolutionError: Path cannot be resolved.
            FormEncodingError: Form body cannot be mapped.
            JSONEncodingError: JSON body cannot be serialized.
            KeycloakError: Admin token acquisition failed.
        """
        headers = headers or RequestHeaders()
        url = self.resolve(path)

        content: bytes | None = None
        if headers.content_type == FORM_ENCODED and body is not None:
            content = encode_form(body).encode("ascii")
        elif body is not None:
            content = encode_json(body)

        request_headers: dict[str, str] = {}
        if headers.content_type:
            request_headers["Content-Type"] = headers.content_type
        elif body is not None:
            request_headers["Content-Type"] = JSON_CONTENT
        if headers.authorization:
            request_headers["Authorization"] = headers.authorization

        if is_admin_request:
            request_headers["Authorization"] = f"Bearer {self._admin_token(ctx)}"

        return httpx.Request(method, url, content=content, headers=request_headers)

    def _admin_token(self, ctx: RequestContext | None) -> str:
        if self._token_source is None:
            msg = "Admin request built without a token source"
            raise InvalidConfigError(msg, field="token_source")
        token = self._token_source(ctx)
        self._logger.debug("admin_token_attached", realm=self.config.realm)
        return token.access_token
