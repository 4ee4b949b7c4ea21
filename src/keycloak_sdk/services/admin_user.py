"""User administration endpoints. Every call is an admin request."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ..core.request_builder import encode_form
from ..models import CredentialRepresentation, UserRepresentation

if TYPE_CHECKING:
    from ..client import KeycloakClient
    from ..context import RequestContext
    from ..models import Response


class AdminUserService:
    """CRUD on ``admin/realms/{realm}/users``."""

    def __init__(self, client: KeycloakClient) -> None:
        self._client = client

    def list_users(
        self,
        ctx: RequestContext | None = None,
        **query: Any,
    ) -> list[UserRepresentation]:
        """Search users; keyword arguments become query parameters.

        ``None`` values are dropped and booleans are sent as ``true``/``false``.
        """
        path = self._client.config.admin_path("users")
        params = encode_form(query)
        if params:
            path = f"{path}?{params}"
        request = self._client.new_request("GET", path, is_admin_request=True, ctx=ctx)
        return self._client.do(request, list[UserRepresentation], ctx=ctx).data or []

    def get_user(
        self,
        user_id: str,
        ctx: RequestContext | None = None,
    ) -> UserRepresentation | None:
        request = self._client.new_request(
            "GET",
            self._client.config.admin_path("users", user_id),
            is_admin_request=True,
            ctx=ctx,
        )
        return self._client.do(request, UserRepresentation, ctx=ctx).data

    def create_user(
        self,
        user: UserRepresentation,
        ctx: RequestContext | None = None,
    ) -> Response:
        """Create a user. The new id is in the ``Location`` header."""
        request = self._client.new_request(
            "POST",
            self._client.config.admin_path("users"),
            user,
            is_admin_request=True,
            ctx=ctx,
        )
        return self._client.do(request, ctx=ctx)

    def update_user(
        self,
        user_id: str,
        user: UserRepresentation,
        ctx: RequestContext | None = None,
    ) -> Response:
        request = self._client.new_request(
            "PUT",
            self._client.config.admin_path("users", user_id),
            user,
            is_admin_request=True,
            ctx=ctx,
        )
        return self._client.do(request, ctx=ctx)

    def delete_user(
        self,
        user_id: str,
        ctx: RequestContext | None = None,
    ) -> Response:
        request = self._client.new_request(
            "DELETE",
            self._client.config.admin_path("users", user_id),
            is_admin_request=True,
            ctx=ctx,
        )
        return self._client.do(request, ctx=ctx)

    def reset_password(
        self,
        user_id: str,
        credential: CredentialRepresentation,
        ctx: RequestContext | None = None,
    ) -> Response:
        request = self._client.new_request(
            "PUT",
            self._client.config.admin_path("users", user_id, "reset-password"),
            credential,
            is_admin_request=True,
            ctx=ctx,
        )
        return self._client.do(request, ctx=ctx)
