"""
Property-based tests for the request pipeline.

- JSON bodies keep <, > and & verbatim
- Admin requests always carry the freshly minted bearer token
- Every status of 300 or above is an error, everything below succeeds
"""

from __future__ import annotations

import json

import httpx
import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from keycloak_sdk.config import KeycloakConfig
from keycloak_sdk.core.http_executor import HTTPExecutor
from keycloak_sdk.core.request_builder import RequestBuilder, RequestHeaders, encode_json
from keycloak_sdk.errors import UpstreamError
from keycloak_sdk.models import OIDCToken

CONFIG = KeycloakConfig.public_admin(
    "https://keycloak.example.com/", "demo", False, "admin-cli", "admin", "pw"
)

html_text = st.text(alphabet=st.sampled_from("<>&abc \"'/"), min_size=1, max_size=40)
token_text = st.text(
    alphabet=st.characters(min_codepoint=33, max_codepoint=126), min_size=1, max_size=64
)


class TestJSONEncodingProperties:
    """Property tests for JSON encoding."""

    @given(value=html_text)
    @settings(max_examples=100)
    def test_html_characters_not_escaped(self, value: str) -> None:
        """Property: <, > and & appear literally in the payload."""
        payload = encode_json({"description": value}).decode()

        for char in "<>&":
            assert payload.count(char) == value.count(char)
        assert "\\u003c" not in payload
        assert "\\u003e" not in payload
        assert "\\u0026" not in payload

    @given(
        body=st.dictionaries(
            st.text(max_size=10),
            st.one_of(st.text(max_size=20), st.integers(), st.booleans(), st.none()),
            max_size=5,
        )
    )
    @settings(max_examples=100)
    def test_payload_is_json_with_trailing_newline(self, body: dict) -> None:
        """Property: encoded payload parses back and ends with a newline."""
        payload = encode_json(body)

        assert payload.endswith(b"\n")
        assert json.loads(payload) == body


class TestAdminHeaderProperties:
    """Property tests for the admin authorization header."""

    @given(token=token_text, hint=st.one_of(st.just(""), token_text))
    @settings(max_examples=100)
    def test_bearer_overrides_hint(self, token: str, hint: str) -> None:
        """Property: admin requests carry Bearer <token> whatever the hint."""
        builder = RequestBuilder(CONFIG, token_source=lambda ctx: OIDCToken(access_token=token))

        request = builder.build(
            "GET",
            "admin/realms/demo/users",
            headers=RequestHeaders(authorization=hint),
            is_admin_request=True,
        )

        assert request.headers["Authorization"] == f"Bearer {token}"


class TestStatusClassificationProperties:
    """Property tests for status classification."""

    @staticmethod
    def _executor(status: int) -> HTTPExecutor:
        body = json.dumps({"access_token": "abc"}).encode()
        transport = httpx.MockTransport(lambda request: httpx.Response(status, content=body))
        return HTTPExecutor(httpx.Client(transport=transport))

    @given(status=st.integers(min_value=200, max_value=299))
    @settings(max_examples=50)
    def test_below_300_succeeds(self, status: int) -> None:
        """Property: 2xx responses decode into the target."""
        response = self._executor(status).execute(
            httpx.Request("GET", "https://keycloak.example.com/x"), OIDCToken
        )

        assert response.data.access_token == "abc"

    @given(status=st.integers(min_value=300, max_value=599))
    @settings(max_examples=50)
    def test_300_and_above_fail(self, status: int) -> None:
        """Property: responses of 300 and above raise UpstreamError."""
        with pytest.raises(UpstreamError) as exc_info:
            self._executor(status).execute(
                httpx.Request("GET", "https://keycloak.example.com/x"), OIDCToken
            )

        assert exc_info.value.status_code == status
