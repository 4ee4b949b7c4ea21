"""Request pipeline: builder, token acquirer and executor."""

from __future__ import annotations

from .http_executor import HTTPExecutor
from .request_builder import RequestBuilder, RequestHeaders, encode_form, encode_json
from .token_ops import TokenAcquirer

__all__ = [
    "HTTPExecutor",
    "RequestBuilder",
    "RequestHeaders",
    "TokenAcquirer",
    "encode_form",
    "encode_json",
]
