"""Admin token acquisition for the Keycloak SDK."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..config import CLIENT_GRANT
from ..models import AccessGrantRequest
from ..telemetry import get_logger

if TYPE_CHECKING:
    from ..config import KeycloakConfig
    from ..context import RequestContext
    from ..models import OIDCToken
    from ..services.authentication import AuthenticationService

OFFLINE_SCOPE = "offline_access"


class TokenAcquirer:
    """Obtains one fresh admin access token per call.

    The grant type follows the configured mode: service accounts use
    ``client_credentials``, every admin mode uses ``password`` with the
    admin account. Nothing is cached and failures are not retried.
    """

    def __init__(
        self,
        config: KeycloakConfig,
        authentication: AuthenticationService,
    ) -> None:
        self.config = config
        self._authentication = authentication
        self._logger = get_logger()

    def build_grant_request(self) -> AccessGrantRequest:
        """Assemble the grant request from the configuration."""
        scope = OFFLINE_SCOPE if self.config.has_offline_access else ""
        grant_type = self.config.grant_type
        if grant_type == CLIENT_GRANT:
            return AccessGrantRequest(grant_type=grant_type, scope=scope)
        return AccessGrantRequest(
            grant_type=grant_type,
            scope=scope,
            username=self.config.admin_account,
            password=self.config.admin_pass_value,
        )

    def acquire(self, ctx: RequestContext | None = None) -> OIDCToken:
        """Fetch an admin token from the token endpoint.

        Raises:
            KeycloakError: Whatever the token request failed with.
        """
        grant = self.build_grant_request()
        token = self._authentication.get_oidc_token(grant, ctx=ctx)
        self._logger.debug(
            "admin_token_acquired",
            realm=self.config.realm,
            grant_type=grant.grant_type,
            offline=bool(grant.scope),
        )
        return token
