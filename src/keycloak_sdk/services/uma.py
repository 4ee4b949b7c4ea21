"""User-Managed Access protection API."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..models import PermissionRequest, PermissionTicket, ResourceSet

if TYPE_CHECKING:
    from ..client import KeycloakClient
    from ..context import RequestContext
    from ..models import Response


class UMAService:
    """Resource sets and permission tickets under ``authz/protection``.

    Calls carry the admin bearer token as the protection API token.
    """

    def __init__(self, client: KeycloakClient) -> None:
        self._client = client

    def _path(self, *segments: str) -> str:
        return self._client.config.realm_path("authz", "protection", *segments)

    def list_resource_sets(self, ctx: RequestContext | None = None) -> list[str]:
        """Ids of the registered resource sets."""
        request = self._client.new_request(
            "GET", self._path("resource_set"), is_admin_request=True, ctx=ctx
        )
        return self._client.do(request, list[str], ctx=ctx).data or []

    def get_resource_set(
        self,
        resource_id: str,
        ctx: RequestContext | None = None,
    ) -> ResourceSet | None:
        request = self._client.new_request(
            "GET", self._path("resource_set", resource_id), is_admin_request=True, ctx=ctx
        )
        return self._client.do(request, ResourceSet, ctx=ctx).data

    def create_resource_set(
        self,
        resource: ResourceSet,
        ctx: RequestContext | None = None,
    ) -> ResourceSet | None:
        request = self._client.new_request(
            "POST", self._path("resource_set"), resource, is_admin_request=True, ctx=ctx
        )
        return self._client.do(request, ResourceSet, ctx=ctx).data

    def delete_resource_set(
        self,
        resource_id: str,
        ctx: RequestContext | None = None,
    ) -> Response:
        request = self._client.new_request(
            "DELETE", self._path("resource_set", resource_id), is_admin_request=True, ctx=ctx
        )
        return self._client.do(request, ctx=ctx)

    def create_permission_ticket(
        self,
        permissions: list[PermissionRequest],
        ctx: RequestContext | None = None,
    ) -> PermissionTicket | None:
        request = self._client.new_request(
            "POST",
            self._path("permission"),
            [p.model_dump(exclude_none=True) for p in permissions],
            is_admin_request=True,
            ctx=ctx,
        )
        return self._client.do(request, PermissionTicket, ctx=ctx).data
