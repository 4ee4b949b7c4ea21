"""Endpoint wrappers built on the request pipeline."""

from __future__ import annotations

from .admin_user import AdminUserService
from .authentication import AuthenticationService
from .uma import UMAService

__all__ = ["AdminUserService", "AuthenticationService", "UMAService"]
