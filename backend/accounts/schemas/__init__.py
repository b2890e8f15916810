"""Marshmallow schemas for request validation and response serialization."""

from __future__ import annotations

from .auth import (
    RefreshTokenSchema,
    ResendSchema,
    SignInSchema,
    SignUpResultSchema,
    SignUpSchema,
    TokenPairSchema,
    VerifySchema,
    WhoAmISchema,
)

__all__ = [
    "SignUpSchema",
    "VerifySchema",
    "ResendSchema",
    "SignInSchema",
    "RefreshTokenSchema",
    "TokenPairSchema",
    "SignUpResultSchema",
    "WhoAmISchema",
]
