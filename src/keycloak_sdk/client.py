"""Keycloak client: composes configuration, pipeline and services."""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING, Any

import httpx

from .config import KeycloakConfig
from .core.http_executor import HTTPExecutor
from .core.request_builder import RequestBuilder, RequestHeaders
from .core.token_ops import TokenAcquirer
from .models import OIDCToken
from .services.admin_user import AdminUserService
from .services.authentication import AuthenticationService
from .services.uma import UMAService

if TYPE_CHECKING:
    from .context import RequestContext
    from .models import Response

_default_client: httpx.Client | None = None
_default_client_lock = threading.Lock()


def default_http_client() -> httpx.Client:
    """Process-wide HTTP client used when none is supplied."""
    global _default_client
    with _default_client_lock:
        if _default_client is None or _default_client.is_closed:
            _default_client = httpx.Client(
                headers={"User-Agent": "keycloak-sdk/0.1.0 Python"},
                follow_redirects=False,
            )
        return _default_client


class KeycloakClient:
    """Synchronous Keycloak client.

    Safe to share between threads. Every admin request performs its own
    token round trip; the latest token is kept in ``admin_oidc`` for
    inspection only.
    """

    def __init__(
        self,
        config: KeycloakConfig,
        http_client: httpx.Client | None = None,
    ) -> None:
        self.config = config
        self._http = http_client if http_client is not None else default_http_client()

        self._admin_oidc = OIDCToken()

        self.authentication = AuthenticationService(self)
        self.admin_user = AdminUserService(self)
        self.uma = UMAService(self)

        self._token_acquirer = TokenAcquirer(config, self.authentication)
        self._builder = RequestBuilder(config, token_source=self._acquire_admin_token)
        self._executor = HTTPExecutor(self._http, timeout=config.timeout)

    @classmethod
    def service_account(
        cls,
        base_url: str,
        realm: str,
        has_offline_access: bool,
        client_id: str,
        client_secret: str,
        *,
        http_client: httpx.Client | None = None,
    ) -> KeycloakClient:
        """Client for a service account with elevated privileges."""
        config = KeycloakConfig.service_account(
            base_url, realm, has_offline_access, client_id, client_secret
        )
        return cls(config, http_client)

    @classmethod
    def confidential_admin(
        cls,
        base_url: str,
        realm: str,
        has_offline_access: bool,
        client_id: str,
        client_secret: str,
        admin_account: str,
        admin_pass: str,
        *,
        http_client: httpx.Client | None = None,
    ) -> KeycloakClient:
        """Client for an admin user behind a confidential client."""
        config = KeycloakConfig.confidential_admin(
            base_url,
            realm,
            has_offline_access,
            client_id,
            client_secret,
            admin_account,
            admin_pass,
        )
        return cls(config, http_client)

    @classmethod
    def public_admin(
        cls,
        base_url: str,
        realm: str,
        has_offline_access: bool,
        client_id: str,
        admin_account: str,
        admin_pass: str,
        *,
        http_client: httpx.Client | None = None,
    ) -> KeycloakClient:
        """Client for an admin user behind a public client."""
        config = KeycloakConfig.public_admin(
            base_url, realm, has_offline_access, client_id, admin_account, admin_pass
        )
        return cls(config, http_client)

    @classmethod
    def from_env(
        cls,
        prefix: str = "KEYCLOAK_",
        *,
        http_client: httpx.Client | None = None,
    ) -> KeycloakClient:
        """Client configured from environment variables."""
        return cls(KeycloakConfig.from_env(prefix), http_client)

    def __enter__(self) -> KeycloakClient:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def close(self) -> None:
        """Close the HTTP client unless it is the shared default."""
        if self._http is not _default_client:
            self._http.close()

    @property
    def base_url(self) -> str:
        return self.config.base_url

    @property
    def realm(self) -> str:
        return self.config.realm

    @property
    def client_id(self) -> str:
        return self.config.client_id

    @property
    def client_secret(self) -> str:
        return self.config.client_secret_value

    @property
    def admin_account(self) -> str:
        return self.config.admin_account

    @property
    def admin_pass(self) -> str:
        return self.config.admin_pass_value

    @property
    def admin_oidc(self) -> OIDCToken:
        """Most recently acquired admin token."""
        return self._admin_oidc

    def new_request(
        self,
        method: str,
        path: str,
        body: Any = None,
        headers: RequestHeaders | None = None,
        is_admin_request: bool = False,
        *,
        ctx: RequestContext | None = None,
    ) -> httpx.Request:
        """Build a request relative to the base URL. See ``RequestBuilder.build``."""
        return self._builder.build(
            method, path, body, headers, is_admin_request, ctx=ctx
        )

    def do(
        self,
        request: httpx.Request,
        target: Any = None,
        *,
        ctx: RequestContext | None = None,
    ) -> Response:
        """Send a request. See ``HTTPExecutor.execute``."""
        return self._executor.execute(request, target, ctx)

    def _acquire_admin_token(self, ctx: RequestContext | None) -> OIDCToken:
        token = self._token_acquirer.acquire(ctx)
        self._admin_oidc = token
        return token
