"""HTTP execution for the Keycloak SDK.

Sends a built request once, classifies the outcome and decodes the body.
There is no retry: one network attempt per call.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import httpx
from pydantic import (
    BaseModel,
    PydanticUserError,
    TypeAdapter,
    ValidationError,
)

from ..errors import DecodeError, TransportError, UpstreamError
from ..models import Response
from ..telemetry import get_logger, trace_operation

if TYPE_CHECKING:
    from ..context import RequestContext

_decoder = json.JSONDecoder()


def is_error_status(status_code: int) -> bool:
    """Any status of 300 or above is an error."""
    return status_code >= 300


def first_json_value(content: bytes) -> Any:
    """Decode the first JSON value in a body, ignoring anything after it."""
    value, _ = _decoder.raw_decode(content.decode("utf-8").lstrip())
    return value


def error_message(content: bytes) -> str:
    """Extract ``error_description`` from an error body, best effort."""
    if not content:
        return ""
    try:
        payload = json.loads(content)
    except ValueError:
        return ""
    if isinstance(payload, dict):
        description = payload.get("error_description")
        if isinstance(description, str):
            return description
    return ""


class HTTPExecutor:
    """Synchronous single-attempt HTTP executor.

    Decode targets:

    - an object with ``write()``: raw body bytes are copied into it.
    - a ``dict`` or ``list``: the JSON body is merged into it in place.
    - a pydantic model instance: the JSON object is merged over its set
      fields and the instance is revalidated in place.
    - any other type (model class, ``list[Model]``...): the body is
      validated into a new value stored on ``Response.data``.

    Only the first JSON value of a body is decoded; trailing bytes are
    ignored.
    """

    def __init__(self, client: httpx.Client, timeout: float | None = None) -> None:
        """Initialize HTTP executor.

        Args:
            client: Shared HTTP client.
            timeout: Default request timeout in seconds.
        """
        self._client = client
        self._timeout = timeout
        self._logger = get_logger()

    def execute(
        self,
        request: httpx.Request,
        target: Any = None,
        ctx: RequestContext | None = None,
    ) -> Response:
        """Send the request and decode the response.

        Args:
            request: Request from the request builder.
            target: Optional decode target.
            ctx: Optional cancellation and deadline handle.

        Returns:
            Response wrapper.

        Raises:
            RequestCancelledError: Context cancelled.
            DeadlineExceededError: Context deadline passed.
            TransportError: Dispatch failed.
            UpstreamError: Status code of 300 or above.
            DecodeError: Success body does not decode into the target.
        """
        self._apply_context(request, ctx)

        with trace_operation(
            "http_request",
            attributes={"http.method": request.method, "http.url": str(request.url)},
        ) as span:
            try:
                response = self._client.send(request, stream=True)
            except httpx.HTTPError as e:
                self._logger.warning(
                    "request_failed",
                    method=request.method,
                    url=str(request.url),
                    error=str(e),
                )
                if ctx is not None and ctx.done():
                    raise ctx.error() from e
                raise TransportError(str(e), cause=e) from e

            try:
                span.set_attribute("http.status_code", response.status_code)
                if is_error_status(response.status_code):
                    raise self._upstream_error(response)
                return self._decode(response, target)
            except httpx.HTTPError as e:
                # Body stream broke after the status line arrived.
                raise TransportError(str(e), cause=e) from e
            finally:
                response.close()

    def _apply_context(self, request: httpx.Request, ctx: RequestContext | None) -> None:
        """Refuse a done context and bound the timeout by its deadline."""
        timeout = self._timeout
        if ctx is not None:
            if ctx.done():
                raise ctx.error()
            remaining = ctx.remaining()
            if remaining is not None:
                timeout = remaining if timeout is None else min(timeout, remaining)
        if timeout is not None:
            request.extensions["timeout"] = httpx.Timeout(timeout).as_dict()

    def _upstream_error(self, response: httpx.Response) -> UpstreamError:
        try:
            content = response.read()
        except httpx.HTTPError:
            content = b""
        error = UpstreamError(response, error_message(content))
        self._logger.warning(
            "upstream_error",
            method=response.request.method,
            url=str(response.request.url),
            status_code=response.status_code,
            message=error.message,
        )
        return error

    def _decode(self, response: httpx.Response, target: Any) -> Response:
        wrapper = Response(response=response)
        if target is None:
            response.read()
            return wrapper

        if hasattr(target, "write"):
            for chunk in response.iter_bytes():
                target.write(chunk)
            return wrapper

        content = response.read()
        if not content.strip():
            # Empty body leaves the target untouched.
            return wrapper

        try:
            payload = first_json_value(content)
            if isinstance(target, dict | list):
                self._merge(payload, target)
            elif isinstance(target, BaseModel):
                self._update_model(payload, target)
            else:
                wrapper.data = TypeAdapter(target).validate_python(payload)
        except (
            ValueError,
            TypeError,
            ValidationError,
            PydanticUserError,
        ) as e:
            raise DecodeError(
                f"Cannot decode response body: {e}",
                response=wrapper,
                cause=e,
            ) from e
        return wrapper

    @staticmethod
    def _update_model(payload: Any, target: BaseModel) -> None:
        if not isinstance(payload, dict):
            msg = f"expected JSON object, got {type(payload).__name__}"
            raise TypeError(msg)
        merged = {**target.model_dump(by_alias=True, exclude_unset=True), **payload}
        # Re-running __init__ validates into the same instance.
        target.__init__(**merged)  # type: ignore[misc]

    @staticmethod
    def _merge(payload: Any, target: dict[str, Any] | list[Any]) -> None:
        if isinstance(target, dict):
            if not isinstance(payload, dict):
                msg = f"expected JSON object, got {type(payload).__name__}"
                raise TypeError(msg)
            target.update(payload)
        else:
            if not isinstance(payload, list):
                msg = f"expected JSON array, got {type(payload).__name__}"
                raise TypeError(msg)
            target[:] = payload
