"""Verification code repository: issuance, locking lookup and consumption."""

from __future__ import annotations

from datetime import datetime
from typing import cast

from sqlalchemy import delete, select

from accounts.models.verification_code import VerificationCode
from accounts.repositories.base import BaseRepository


class VerificationCodeRepository(BaseRepository[VerificationCode]):
    """Persistence-only repository for :class:`VerificationCode`.

    A user owns at most one row; issuing a new code overwrites it in place.
    """

    model = VerificationCode
    name = "verification_codes"

    def upsert(self, *, user_id: int, code: str, expires_at: datetime) -> None:
        """Store ``code`` as the only live code of ``user_id``.

        Any previous code of the user is replaced, so it stops being
        consumable as soon as the surrounding transaction commits.

        :param user_id: Owner of the code.
        :type user_id: int
        :param code: Plain verification code.
        :type code: str
        :param expires_at: Absolute (aware) expiry.
        :type expires_at: datetime
        """
        with self._guard("upsert"):
            self._upsert(
                {"user_id": user_id, "code": code, "expires_at": expires_at},
                conflict_columns=("user_id",),
                update_columns=("code", "expires_at"),
            )

    def get_live_for_update(self, code: str, now: datetime) -> VerificationCode | None:
        """Lock and return an unexpired row carrying ``code``.

        Uses ``SELECT ... FOR UPDATE`` so concurrent verifications of the same
        code serialize on the row; dialects without row locks ignore the hint.

        :param code: Code submitted by the user.
        :type code: str
        :param now: Reference time; rows with ``expires_at <= now`` are skipped.
        :type now: datetime
        :returns: Locked row or ``None``.
        :rtype: VerificationCode | None
        """
        stmt = (
            select(VerificationCode)
            .where(VerificationCode.code == code, VerificationCode.expires_at > now)
            .order_by(VerificationCode.id)
            .limit(1)
            .with_for_update()
        )
        with self._guard("get_live_for_update"):
            return cast(VerificationCode | None, self.session.execute(stmt).scalars().first())

    def consume(self, *, code_id: int, code: str) -> int:
        """Delete the claimed row and report how many rows went away.

        :param code_id: Primary key of the row returned by the locking read.
        :type code_id: int
        :param code: Code value the row must still carry.
        :type code: str
        :returns: Number of deleted rows (``0`` when another transaction won).
        :rtype: int
        """
        stmt = (
            delete(VerificationCode)
            .where(VerificationCode.id == code_id, VerificationCode.code == code)
            .execution_options(synchronize_session="fetch")
        )
        with self._guard("consume"):
            result = self.session.execute(stmt)
        return int(result.rowcount or 0)  # type: ignore[attr-defined]

    def purge_expired(self, now: datetime) -> int:
        """Delete every code whose ``expires_at`` is not after ``now``.

        :returns: Number of deleted rows.
        :rtype: int
        """
        stmt = (
            delete(VerificationCode)
            .where(VerificationCode.expires_at <= now)
            .execution_options(synchronize_session=False)
        )
        with self._guard("purge_expired"):
            result = self.session.execute(stmt)
        return int(result.rowcount or 0)  # type: ignore[attr-defined]
