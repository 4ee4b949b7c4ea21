"""
Shared test fixtures for Keycloak SDK tests.

Provides configurations for the three credential modes and a fake
Keycloak server built on ``httpx.MockTransport``.
"""

from __future__ import annotations

from collections.abc import Callable
from urllib.parse import parse_qs

import httpx
import pytest

from keycloak_sdk.client import KeycloakClient
from keycloak_sdk.config import KeycloakConfig

BASE_URL = "https://keycloak.example.com/"
REALM = "test-realm"
TOKEN_PATH = f"/realms/{REALM}/protocol/openid-connect/token"

Handler = Callable[[httpx.Request], httpx.Response]


class FakeKeycloak:
    """Records requests; answers the token endpoint and delegates the rest."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.token_requests: list[dict[str, str]] = []
        self.access_token = "admin-token"
        self.token_status = 200
        self.routes: dict[tuple[str, str], Handler] = {}

    @staticmethod
    def form_of(request: httpx.Request) -> dict[str, str]:
        """Decode a form-encoded request body into single values."""
        return {k: v[0] for k, v in parse_qs(request.content.decode()).items()}

    def route(self, method: str, path: str, handler: Handler) -> None:
        self.routes[(method, path)] = handler

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path == TOKEN_PATH:
            self.token_requests.append(self.form_of(request))
            if self.token_status >= 300:
                return httpx.Response(
                    self.token_status,
                    json={"error": "invalid_grant", "error_description": "Invalid user credentials"},
                )
            return httpx.Response(
                200,
                json={
                    "access_token": self.access_token,
                    "expires_in": 300,
                    "token_type": "Bearer",
                    "not-before-policy": 0,
                },
            )
        handler = self.routes.get((request.method, request.url.path))
        if handler is None:
            return httpx.Response(404, json={"error": "not_found"})
        return handler(request)

    def resource_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path != TOKEN_PATH]


@pytest.fixture
def service_account_config() -> KeycloakConfig:
    """Provide a service-account configuration."""
    return KeycloakConfig.service_account(BASE_URL, REALM, False, "svc-client", "svc-secret")


@pytest.fixture
def confidential_admin_config() -> KeycloakConfig:
    """Provide a confidential-admin configuration."""
    return KeycloakConfig.confidential_admin(
        BASE_URL, REALM, False, "admin-client", "admin-secret", "admin", "s3cret"
    )


@pytest.fixture
def public_admin_config() -> KeycloakConfig:
    """Provide a public-admin configuration."""
    return KeycloakConfig.public_admin(BASE_URL, REALM, False, "admin-cli", "admin", "s3cret")


@pytest.fixture
def fake_keycloak() -> FakeKeycloak:
    return FakeKeycloak()


@pytest.fixture
def http_client(fake_keycloak: FakeKeycloak):
    client = httpx.Client(transport=httpx.MockTransport(fake_keycloak))
    yield client
    client.close()


@pytest.fixture
def keycloak_client(
    confidential_admin_config: KeycloakConfig,
    http_client: httpx.Client,
) -> KeycloakClient:
    """Provide a confidential-admin client talking to the fake server."""
    return KeycloakClient(confidential_admin_config, http_client)
