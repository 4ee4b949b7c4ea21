"""Pydantic models for the Keycloak SDK.

Request bodies that travel form-encoded implement ``to_form()`` which maps
each populated field to its wire key. JSON bodies are dumped by alias with
unset fields left out.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict, Field


class AccessGrantRequest(BaseModel):
    """Token endpoint grant request, built fresh per acquisition."""

    model_config = ConfigDict(frozen=True)

    grant_type: str
    scope: str = ""
    username: str = ""
    password: str = ""
    refresh_token: str = ""
    client_id: str = ""
    client_secret: str = ""

    def to_form(self) -> dict[str, str]:
        """Map populated fields to form keys, omitting empty ones."""
        form = {"grant_type": self.grant_type}
        if self.scope:
            form["scope"] = self.scope
        if self.username:
            form["username"] = self.username
        if self.password:
            form["password"] = self.password
        if self.refresh_token:
            form["refresh_token"] = self.refresh_token
        if self.client_id:
            form["client_id"] = self.client_id
        if self.client_secret:
            form["client_secret"] = self.client_secret
        return form

    def with_client(self, client_id: str, client_secret: str = "") -> AccessGrantRequest:
        """Copy of the grant carrying client credentials."""
        return self.model_copy(
            update={"client_id": client_id, "client_secret": client_secret}
        )


class OIDCToken(BaseModel):
    """OpenID Connect token endpoint response."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    access_token: str = ""
    expires_in: int = 0
    refresh_expires_in: int = 0
    refresh_token: str = ""
    token_type: str = ""
    id_token: str = ""
    not_before_policy: int = Field(default=0, alias="not-before-policy")
    session_state: str = ""
    scope: str = ""


class UserInfo(BaseModel):
    """OpenID Connect userinfo claims."""

    model_config = ConfigDict(extra="allow")

    sub: str
    email: str | None = None
    email_verified: bool | None = None
    name: str | None = None
    preferred_username: str | None = None
    given_name: str | None = None
    family_name: str | None = None


class CredentialRepresentation(BaseModel):
    """Keycloak user credential."""

    model_config = ConfigDict(populate_by_name=True)

    type: str = "password"
    value: str | None = None
    temporary: bool | None = None


class UserRepresentation(BaseModel):
    """Keycloak admin user representation."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str | None = None
    username: str | None = None
    email: str | None = None
    first_name: str | None = Field(default=None, alias="firstName")
    last_name: str | None = Field(default=None, alias="lastName")
    enabled: bool | None = None
    email_verified: bool | None = Field(default=None, alias="emailVerified")
    attributes: dict[str, list[str]] | None = None
    credentials: list[CredentialRepresentation] | None = None


class ResourceSet(BaseModel):
    """UMA protected resource."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str | None = Field(default=None, alias="_id")
    name: str
    type: str | None = None
    uris: list[str] | None = None
    owner: str | None = None
    owner_managed_access: bool | None = Field(default=None, alias="ownerManagedAccess")
    resource_scopes: list[str] | None = None


class PermissionRequest(BaseModel):
    """UMA permission request for a single resource."""

    model_config = ConfigDict(populate_by_name=True)

    resource_id: str
    resource_scopes: list[str] | None = None
    claims: dict[str, Any] | None = None


class PermissionTicket(BaseModel):
    """UMA permission ticket."""

    model_config = ConfigDict(extra="ignore")

    ticket: str


@dataclass
class Response:
    """Successful Keycloak response.

    ``data`` holds the decoded body when the caller passed a model type as
    the decode target.
    """

    response: httpx.Response
    data: Any = None

    @property
    def status_code(self) -> int:
        return self.response.status_code
