"""OpenID Connect endpoints of a realm."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..core.request_builder import FORM_ENCODED, RequestHeaders
from ..models import AccessGrantRequest, OIDCToken, UserInfo

if TYPE_CHECKING:
    from ..client import KeycloakClient
    from ..context import RequestContext

REFRESH_GRANT = "refresh_token"


class AuthenticationService:
    """Token and userinfo endpoints.

    Token requests are never admin requests, so acquiring an admin token
    through this service does not recurse.
    """

    def __init__(self, client: KeycloakClient) -> None:
        self._client = client

    def get_oidc_token(
        self,
        grant: AccessGrantRequest,
        ctx: RequestContext | None = None,
    ) -> OIDCToken:
        """Submit a grant request to the token endpoint.

        The configured client id always travels in the form; the secret
        only for confidential clients.
        """
        config = self._client.config
        secret = config.client_secret_value if config.is_confidential else ""
        request = self._client.new_request(
            "POST",
            config.realm_path("protocol", "openid-connect", "token"),
            grant.with_client(config.client_id, secret),
            RequestHeaders(content_type=FORM_ENCODED),
        )
        response = self._client.do(request, OIDCToken, ctx=ctx)
        return response.data or OIDCToken()

    def refresh_token(
        self,
        refresh_token: str,
        ctx: RequestContext | None = None,
    ) -> OIDCToken:
        """Exchange a refresh token for a new token set."""
        grant = AccessGrantRequest(grant_type=REFRESH_GRANT, refresh_token=refresh_token)
        return self.get_oidc_token(grant, ctx=ctx)

    def get_user_info(
        self,
        access_token: str,
        ctx: RequestContext | None = None,
    ) -> UserInfo | None:
        """Claims of the user owning ``access_token``."""
        config = self._client.config
        request = self._client.new_request(
            "GET",
            config.realm_path("protocol", "openid-connect", "userinfo"),
            headers=RequestHeaders(authorization=f"Bearer {access_token}"),
        )
        return self._client.do(request, UserInfo, ctx=ctx).data
