"""Refresh token repository keyed by ``(user_id, device_id)``."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import cast

from sqlalchemy import delete, select

from accounts.models.refresh_token import RefreshToken
from accounts.repositories.base import BaseRepository


class RefreshTokenRepository(BaseRepository[RefreshToken]):
    """Persistence-only repository for :class:`RefreshToken`.

    Only token *hashes* cross this boundary; hashing happens in the service.
    """

    model = RefreshToken
    name = "refresh_tokens"

    def upsert(
        self,
        *,
        user_id: int,
        device_id: str,
        token_hash: str,
        expires_at: datetime,
        created_at: datetime,
    ) -> None:
        """Create or overwrite the session record of one device.

        :param user_id: Owner of the session.
        :type user_id: int
        :param device_id: Device the session belongs to.
        :type device_id: str
        :param token_hash: Keyed hash of the new refresh token.
        :type token_hash: str
        :param expires_at: Absolute expiry of the new refresh token.
        :type expires_at: datetime
        :param created_at: Issuance time of the new refresh token.
        :type created_at: datetime
        :raises RecordExists: If ``token_hash`` collides with another record.
        """
        with self._guard("upsert"):
            self._upsert(
                {
                    "user_id": user_id,
                    "device_id": device_id,
                    "token_hash": token_hash,
                    "expires_at": expires_at,
                    "created_at": created_at,
                },
                conflict_columns=("user_id", "device_id"),
                update_columns=("token_hash", "expires_at", "created_at"),
            )

    def get_by_hash(self, token_hash: str) -> RefreshToken | None:
        """Return the record whose stored hash equals ``token_hash``.

        :param token_hash: Hash of the presented refresh token.
        :type token_hash: str
        :returns: Record or ``None``.
        :rtype: RefreshToken | None
        """
        stmt = select(RefreshToken).where(RefreshToken.token_hash == token_hash)
        with self._guard("get_by_hash"):
            return cast(RefreshToken | None, self.session.execute(stmt).scalars().first())

    def delete_by_hash(self, token_hash: str) -> int:
        """Delete the record matching ``token_hash``.

        :returns: Number of deleted rows (``0`` or ``1``).
        :rtype: int
        """
        stmt = (
            delete(RefreshToken)
            .where(RefreshToken.token_hash == token_hash)
            .execution_options(synchronize_session="fetch")
        )
        with self._guard("delete_by_hash"):
            result = self.session.execute(stmt)
        return int(result.rowcount or 0)  # type: ignore[attr-defined]

    def list_for_user(self, user_id: int) -> Sequence[RefreshToken]:
        stmt = (
            select(RefreshToken)
            .where(RefreshToken.user_id == user_id)
            .order_by(RefreshToken.device_id)
        )
        with self._guard("list_for_user"):
            return list(self.session.execute(stmt).scalars().all())

    def purge_expired(self, now: datetime) -> int:
        """Delete every record whose ``expires_at`` is not after ``now``."""
        stmt = (
            delete(RefreshToken)
            .where(RefreshToken.expires_at <= now)
            .execution_options(synchronize_session=False)
        )
        with self._guard("purge_expired"):
            result = self.session.execute(stmt)
        return int(result.rowcount or 0)  # type: ignore[attr-defined]
