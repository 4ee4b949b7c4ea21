"""
Property-based tests for admin token acquisition.

Grant selection is a pure function of the credential mode, and the
offline scope follows the offline access flag for every grant type.
"""

from __future__ import annotations

from unittest.mock import MagicMock

from hypothesis import given, settings
from hypothesis import strategies as st

from keycloak_sdk.config import KeycloakConfig
from keycloak_sdk.core.token_ops import OFFLINE_SCOPE, TokenAcquirer
from keycloak_sdk.models import OIDCToken

BASE_URL = "https://keycloak.example.com/"

text = st.text(min_size=1, max_size=30)
modes = st.sampled_from(["service_account", "confidential_admin", "public_admin"])


def make_config(
    mode: str,
    offline: bool,
    client_id: str,
    secret: str,
    account: str,
    password: str,
) -> KeycloakConfig:
    if mode == "service_account":
        return KeycloakConfig.service_account(BASE_URL, "demo", offline, client_id, secret)
    if mode == "confidential_admin":
        return KeycloakConfig.confidential_admin(
            BASE_URL, "demo", offline, client_id, secret, account, password
        )
    return KeycloakConfig.public_admin(BASE_URL, "demo", offline, client_id, account, password)


class TestGrantSelectionProperties:
    """Property tests for grant type selection."""

    @given(
        mode=modes,
        offline=st.booleans(),
        client_id=text,
        secret=text,
        account=text,
        password=text,
    )
    @settings(max_examples=100)
    def test_grant_matches_mode(
        self,
        mode: str,
        offline: bool,
        client_id: str,
        secret: str,
        account: str,
        password: str,
    ) -> None:
        """Property: service accounts use client_credentials, admins use password."""
        config = make_config(mode, offline, client_id, secret, account, password)
        grant = TokenAcquirer(config, MagicMock()).build_grant_request()

        if mode == "service_account":
            assert grant.grant_type == "client_credentials"
            assert grant.username == ""
            assert grant.password == ""
        else:
            assert grant.grant_type == "password"
            assert grant.username == account
            assert grant.password == password

    @given(mode=modes, offline=st.booleans())
    @settings(max_examples=50)
    def test_offline_scope_follows_flag(self, mode: str, offline: bool) -> None:
        """Property: scope is offline_access iff offline access is requested."""
        config = make_config(mode, offline, "cli", "secret", "admin", "pw")
        grant = TokenAcquirer(config, MagicMock()).build_grant_request()

        form = grant.to_form()
        if offline:
            assert grant.scope == OFFLINE_SCOPE
            assert form["scope"] == "offline_access"
        else:
            assert grant.scope == ""
            assert "scope" not in form

    @given(
        is_service_account=st.booleans(),
        is_confidential=st.booleans(),
    )
    @settings(max_examples=20)
    def test_client_grant_requires_both_flags(
        self,
        is_service_account: bool,
        is_confidential: bool,
    ) -> None:
        """Property: client_credentials only when confidential and service account."""
        config = KeycloakConfig(
            base_url=BASE_URL,
            realm="demo",
            is_service_account=is_service_account,
            is_confidential=is_confidential,
            admin_account="admin",
        )

        grant = TokenAcquirer(config, MagicMock()).build_grant_request()

        expected = "client_credentials" if is_service_account and is_confidential else "password"
        assert grant.grant_type == expected


class TestAcquireProperties:
    """Property tests for acquire()."""

    @given(access_token=st.text(min_size=1, max_size=64), offline=st.booleans())
    @settings(max_examples=50)
    def test_acquire_submits_fresh_grant(self, access_token: str, offline: bool) -> None:
        """Property: each call submits exactly one grant and returns its token."""
        authentication = MagicMock()
        authentication.get_oidc_token.return_value = OIDCToken(access_token=access_token)
        config = make_config("public_admin", offline, "cli", "", "admin", "pw")
        acquirer = TokenAcquirer(config, authentication)

        token = acquirer.acquire()
        acquirer.acquire()

        assert token.access_token == access_token
        assert authentication.get_oidc_token.call_count == 2
        grant = authentication.get_oidc_token.call_args.args[0]
        assert grant.grant_type == "password"
        assert grant.scope == (OFFLINE_SCOPE if offline else "")
