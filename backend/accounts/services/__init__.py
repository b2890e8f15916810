"""Service layer public API.

This package exposes the essential building blocks for the service layer so that
callers can import from :mod:`accounts.services` without knowing internal structure.

Re-exports
----------
- Base primitives (from ``accounts.services._shared.base``)
    * :class:`BaseService`

- Session service (from ``accounts.services.sessions``)
    * :class:`SessionService`
    * DTOs: :class:`SignUpIn`, :class:`VerifyIn`, :class:`ResendIn`,
      :class:`SignInIn`, :class:`RefreshIn`, :class:`LogoutIn`,
      :class:`SignUpOut`, :class:`TokenPairOut`
"""

from __future__ import annotations

from ._shared.base import BaseService
from .sessions import (
    LogoutIn,
    RefreshIn,
    ResendIn,
    SessionService,
    SignInIn,
    SignUpIn,
    SignUpOut,
    TokenPairOut,
    VerifyIn,
)

__all__ = [
    "BaseService",
    "SessionService",
    "SignUpIn",
    "SignUpOut",
    "VerifyIn",
    "ResendIn",
    "SignInIn",
    "RefreshIn",
    "LogoutIn",
    "TokenPairOut",
]
