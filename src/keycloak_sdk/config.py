"""Configuration for the Keycloak SDK.

Uses Pydantic v2 frozen models: the identity-provider coordinates and the
privilege mode are captured once and never change for the client lifetime.
"""

from __future__ import annotations

import logging
import os
from typing import Annotated, Any, Self
from urllib.parse import quote

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator

from .errors import InvalidConfigError

DEFAULT_BASE = "realms"
DEFAULT_ADMIN_BASE = "admin/realms"

CLIENT_GRANT = "client_credentials"
PASSWORD_GRANT = "password"


class TelemetryConfig(BaseModel):
    """Tracing and structured logging configuration."""

    model_config = ConfigDict(frozen=True)

    enabled: bool = True
    service_name: str = "keycloak-sdk"
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize to an upper-case stdlib level name."""
        level = v.upper()
        if level not in logging.getLevelNamesMapping():
            msg = f"Unknown log level: {v}"
            raise ValueError(msg)
        return level


class KeycloakConfig(BaseModel):
    """Keycloak coordinates and credential mode.

    Exactly one of three modes is meant to be active, selected by the
    matching class method:

    - service account: ``is_service_account`` and ``is_confidential``,
      client id and secret.
    - confidential admin: ``is_confidential`` only, client id and secret
      plus admin account and password.
    - public admin: neither flag, admin account and password, no secret.

    The field values are trusted as given.
    """

    model_config = ConfigDict(frozen=True)

    base_url: str
    realm: str

    # Requires the offline_access role
    has_offline_access: bool = False
    # Requires confidential access type and service accounts enabled
    is_service_account: bool = False
    # Requires the client secret when making protected requests
    is_confidential: bool = False

    client_id: str = ""
    client_secret: SecretStr | None = None

    admin_account: str = ""
    admin_pass: SecretStr | None = None

    timeout: Annotated[float, Field(gt=0, le=300)] = 30.0
    telemetry: TelemetryConfig = Field(default_factory=TelemetryConfig)

    @classmethod
    def service_account(
        cls,
        base_url: str,
        realm: str,
        has_offline_access: bool,
        client_id: str,
        client_secret: str,
        **kwargs: Any,
    ) -> Self:
        """Service account with elevated privileges."""
        return cls(
            base_url=base_url,
            realm=realm,
            has_offline_access=has_offline_access,
            is_service_account=True,
            is_confidential=True,
            client_id=client_id,
            client_secret=client_secret,
            **kwargs,
        )

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
        **kwargs: Any,
    ) -> Self:
        """Admin user authenticating through a confidential client."""
        return cls(
            base_url=base_url,
            realm=realm,
            has_offline_access=has_offline_access,
            is_service_account=False,
            is_confidential=True,
            client_id=client_id,
            client_secret=client_secret,
            admin_account=admin_account,
            admin_pass=admin_pass,
            **kwargs,
        )

    @classmethod
    def public_admin(
        cls,
        base_url: str,
        realm: str,
        has_offline_access: bool,
        client_id: str,
        admin_account: str,
        admin_pass: str,
        **kwargs: Any,
    ) -> Self:
        """Admin user authenticating through a public client."""
        return cls(
            base_url=base_url,
            realm=realm,
            has_offline_access=has_offline_access,
            is_service_account=False,
            is_confidential=False,
            client_id=client_id,
            admin_account=admin_account,
            admin_pass=admin_pass,
            **kwargs,
        )

    @property
    def grant_type(self) -> str:
        """Grant type used to obtain admin tokens for this mode."""
        if self.is_confidential and self.is_service_account:
            return CLIENT_GRANT
        return PASSWORD_GRANT

    def realm_path(self, *segments: str) -> str:
        """Relative path under ``realms/{realm}``."""
        return _join(DEFAULT_BASE, self.realm, *segments)

    def admin_path(self, *segments: str) -> str:
        """Relative path under ``admin/realms/{realm}``."""
        return _join(DEFAULT_ADMIN_BASE, self.realm, *segments)

    @property
    def client_secret_value(self) -> str:
        """Client secret as plain text, empty when not configured."""
        return self.client_secret.get_secret_value() if self.client_secret else ""

    @property
    def admin_pass_value(self) -> str:
        """Admin password as plain text, empty when not configured."""
        return self.admin_pass.get_secret_value() if self.admin_pass else ""

    @classmethod
    def from_env(cls, prefix: str = "KEYCLOAK_") -> Self:
        """Create config from environment variables.

        ``SERVICE_ACCOUNT`` selects the service-account mode, otherwise a
        present ``CLIENT_SECRET`` selects the confidential admin mode and
        its absence the public admin mode.
        """

        def get_env(key: str, default: Any = None) -> Any:
            return os.environ.get(f"{prefix}{key}", default)

        def get_flag(key: str) -> bool:
            return str(get_env(key, "")).strip().lower() in {"1", "true", "yes", "on"}

        required: dict[str, str] = {}
        for key in ("BASE_URL", "REALM", "CLIENT_ID"):
            value = get_env(key)
            if not value:
                msg = f"{prefix}{key} environment variable is required"
                raise InvalidConfigError(msg, field=key.lower())
            required[key.lower()] = value

        client_secret = get_env("CLIENT_SECRET")
        extra = {"timeout": float(get_env("TIMEOUT", "30.0"))}
        has_offline_access = get_flag("OFFLINE_ACCESS")

        if get_flag("SERVICE_ACCOUNT"):
            if not client_secret:
                msg = f"{prefix}CLIENT_SECRET is required for service accounts"
                raise InvalidConfigError(msg, field="client_secret")
            return cls.service_account(
                has_offline_access=has_offline_access,
                client_secret=client_secret,
                **required,
                **extra,
            )

        admin_account = get_env("ADMIN_ACCOUNT", "")
        admin_pass = get_env("ADMIN_PASS", "")
        if client_secret:
            return cls.confidential_admin(
                has_offline_access=has_offline_access,
                client_secret=client_secret,
                admin_account=admin_account,
                admin_pass=admin_pass,
                **required,
                **extra,
            )
        return cls.public_admin(
            has_offline_access=has_offline_access,
            admin_account=admin_account,
            admin_pass=admin_pass,
            **required,
            **extra,
        )


def _join(base: str, *segments: str) -> str:
    return "/".join([base, *(quote(s, safe="") for s in segments)])
