"""Repository package exposing persistence-layer access for all domain models."""

from __future__ import annotations

from accounts.repositories.base import BaseRepository
from accounts.repositories.errors import RecordExists, RecordNotFound, RepositoryError
from accounts.repositories.refresh_token import RefreshTokenRepository
from accounts.repositories.user import UserRepository
from accounts.repositories.verification_code import VerificationCodeRepository

__all__ = [
    # Base
    "BaseRepository",
    "RepositoryError",
    "RecordNotFound",
    "RecordExists",
    # Domain
    "UserRepository",
    "VerificationCodeRepository",
    "RefreshTokenRepository",
]
