# accounts/services/sessions/service.py
from __future__ import annotations

import secrets

from accounts.core.config import AuthSettings
from accounts.repositories.errors import RecordExists, RecordNotFound
from accounts.services._shared.base import BaseService
from accounts.services._shared.errors import (
    AlreadyExistsError,
    InvalidCredentialsError,
    InvalidTokenError,
    NotFoundError,
    NotVerifiedError,
    TokenExpiredError,
)
from accounts.services._shared.ports.clock import Clock
from accounts.services._shared.ports.code_generator import CodeGenerator, RandomCodeGenerator
from accounts.services._shared.ports.credential_hasher import CredentialHasher
from accounts.services._shared.ports.notifier import MailMessage, NotificationError, Notifier
from accounts.services._shared.ports.token_signer import TokenSigner
from accounts.services.sessions.dto import (
    LogoutIn,
    RefreshIn,
    ResendIn,
    SignInIn,
    SignUpIn,
    SignUpOut,
    TokenPairOut,
    VerifyIn,
)
from accounts.uow.coordinator import TransactionCoordinator
from accounts.uow.sqlalchemy_uow import SQLAlchemyUnitOfWork

VERIFICATION_SUBJECT = "Verification email"
VERIFICATION_BODY = "Verification code: {code}"


class SessionService(BaseService):
    """
    Account and device-session lifecycle.

    Sign-up, verification, resend, sign-in, refresh, logout and access-token
    authentication, composed from:

    * the transaction coordinator (every storage write),
    * two token signers (``access`` / ``refresh`` contexts),
    * a salted password hasher and a deterministic refresh-token hasher,
    * a notifier that receives verification codes *after* commit.

    Plaintext passwords, codes and tokens are never logged nor persisted.
    """

    def __init__(
        self,
        *,
        access_signer: TokenSigner,
        refresh_signer: TokenSigner,
        password_hasher: CredentialHasher,
        token_hasher: CredentialHasher,
        notifier: Notifier,
        code_generator: CodeGenerator | None = None,
        settings: AuthSettings | None = None,
        coordinator: TransactionCoordinator | None = None,
        clock: Clock | None = None,
    ) -> None:
        """
        Initialize the service with its dependencies.

        :param access_signer: Signing context of short-lived access tokens.
        :param refresh_signer: Signing context of refresh tokens.
        :param password_hasher: Salted hasher for stored passwords.
        :param token_hasher: Deterministic hasher for stored refresh tokens.
        :param notifier: Delivery channel for verification codes.
        :param code_generator: Source of verification codes.
        :param settings: Token/code lifetimes and rotation grace window.
        :param coordinator: Transaction coordinator.
        :param clock: Time source shared with the signers.
        """
        super().__init__(coordinator=coordinator, clock=clock)
        self.access = access_signer
        self.refresh_signer = refresh_signer
        self.passwords = password_hasher
        self.tokens = token_hasher
        self.notifier = notifier
        self.codes = code_generator or RandomCodeGenerator()
        self.cfg = settings or AuthSettings()
        self._decoy_hash: str | None = None

    # ------------------------------------------------------------------ #
    # Sign-up / verification
    # ------------------------------------------------------------------ #

    def sign_up(self, dto: SignUpIn) -> SignUpOut:
        """
        Register an unverified account and email it a verification code.

        The user row and its code are written in one transaction; the email
        goes out only after commit. When the login or email is taken, an
        unverified account with that email gets a fresh code instead
        (``created=False``).

        :param dto: Sign-up input.
        :returns: Account id plus creation/delivery flags.
        :raises AlreadyExistsError: If the identity belongs to a verified
            account, or the login collides with another user's.
        """
        op = "sessions.sign_up"
        with self.operation(op):
            password_hash = self.passwords.hash(dto.password)
            code = self.codes.generate()
            now = self.now_utc()

            def unit(uow: SQLAlchemyUnitOfWork) -> tuple[int, str]:
                user = uow.users.create(
                    login=dto.login, email=dto.email, password_hash=password_hash
                )
                uow.verification_codes.upsert(
                    user_id=user.id, code=code, expires_at=now + self.cfg.code_ttl
                )
                return user.id, user.email

            try:
                user_id, email = self.tx.run(unit)
            except RecordExists:
                return self._recover_sign_up(dto.email, code)

            self.log.info("User signed up", extra={"op": op, "user_id": user_id})
            sent = self._deliver_code(email, code, op)
            return SignUpOut(user_id=user_id, created=True, verification_sent=sent)

    def _recover_sign_up(self, email: str, code: str) -> SignUpOut:
        """Re-issue ``code`` to a pending account whose email matches ``email``."""

        def unit(uow: SQLAlchemyUnitOfWork) -> tuple[int, str, bool] | None:
            user = uow.users.get_by_email(email)
            if user is None:
                return None
            return user.id, user.email, user.verified

        found = self.tx.run(unit)
        if found is None or found[2]:
            raise AlreadyExistsError("User")
        user_id, stored_email, _ = found
        sent = self._trigger_verification(user_id, stored_email, "sessions.sign_up", code=code)
        return SignUpOut(user_id=user_id, created=False, verification_sent=sent)

    def resend(self, dto: ResendIn) -> SignUpOut:
        """
        Replace the pending code of an unverified account and send it again.

        :raises NotFoundError: If no account uses ``dto.email``.
        :raises AlreadyExistsError: If the account is already verified.
        """
        op = "sessions.resend"
        with self.operation(op):

            def unit(uow: SQLAlchemyUnitOfWork) -> tuple[int, str, bool] | None:
                user = uow.users.get_by_email(dto.email)
                if user is None:
                    return None
                return user.id, user.email, user.verified

            found = self.tx.run(unit)
            if found is None:
                raise NotFoundError("User")
            user_id, email, verified = found
            if verified:
                raise AlreadyExistsError("User")
            sent = self._trigger_verification(user_id, email, op)
            return SignUpOut(user_id=user_id, created=False, verification_sent=sent)

    def _trigger_verification(
        self, user_id: int, email: str, op: str, *, code: str | None = None
    ) -> bool:
        """Upsert a new code for ``user_id`` (invalidating the old one) and send it."""
        code = code or self.codes.generate()
        expires_at = self.now_utc() + self.cfg.code_ttl
        self.tx.run(
            lambda uow: uow.verification_codes.upsert(
                user_id=user_id, code=code, expires_at=expires_at
            )
        )
        self.log.info("Verification code re-issued", extra={"op": op, "user_id": user_id})
        return self._deliver_code(email, code, op)

    def _deliver_code(self, email: str, code: str, op: str) -> bool:
        message = MailMessage(
            to=email,
            subject=VERIFICATION_SUBJECT,
            body=VERIFICATION_BODY.format(code=code),
        )
        try:
            self.notifier.send(message)
        except (NotificationError, OSError):
            self.log.error("Verification email not delivered", extra={"op": op}, exc_info=True)
            return False
        return True

    def verify(self, dto: VerifyIn) -> int:
        """
        Consume a live code and mark its owner verified, atomically.

        Wrong, used and expired codes are indistinguishable.

        :param dto: Verification input.
        :returns: Identifier of the verified user.
        :raises NotFoundError: If no live row carries the code, or another
            transaction consumed it first.
        """
        op = "sessions.verify"
        with self.operation(op):
            now = self.now_utc()

            def unit(uow: SQLAlchemyUnitOfWork) -> int:
                row = uow.verification_codes.get_live_for_update(dto.code, now)
                if row is None:
                    raise NotFoundError("VerificationCode")
                user_id = row.user_id
                if uow.verification_codes.consume(code_id=row.id, code=row.code) != 1:
                    raise NotFoundError("VerificationCode")
                uow.users.mark_verified(user_id)
                return user_id

            try:
                user_id = self.tx.run(unit)
            except RecordNotFound as exc:
                raise NotFoundError("User") from exc

            self.log.info("User verified", extra={"op": op, "user_id": user_id})
            return user_id

    # ------------------------------------------------------------------ #
    # Sessions
    # ------------------------------------------------------------------ #

    def sign_in(self, dto: SignInIn) -> TokenPairOut:
        """
        Authenticate credentials and open a session for ``dto.device_id``.

        :raises InvalidCredentialsError: Unknown login or wrong password.
        :raises NotVerifiedError: Credentials match an unverified account.
        """
        op = "sessions.sign_in"
        with self.operation(op):

            def unit(uow: SQLAlchemyUnitOfWork) -> tuple[int, str, bool] | None:
                user = uow.users.get_by_login(dto.login)
                if user is None:
                    return None
                return user.id, user.password_hash, user.verified

            found = self.tx.run(unit)
            if found is None:
                # Same hashing cost as a wrong password on an existing login
                self.passwords.verify(dto.password, self._decoy())
                raise InvalidCredentialsError()
            if not self.passwords.verify(dto.password, found[1]):
                raise InvalidCredentialsError()
            user_id, _, verified = found
            if not verified:
                raise NotVerifiedError()
            pair = self.create_session(user_id, dto.device_id)
            self.log.info(
                "Session opened", extra={"op": op, "user_id": user_id, "device_id": dto.device_id}
            )
            return pair

    def _decoy(self) -> str:
        """Hash of a random secret, computed once with the configured hasher."""
        if self._decoy_hash is None:
            self._decoy_hash = self.passwords.hash(secrets.token_urlsafe(16))
        return self._decoy_hash

    def create_session(self, user_id: int, device_id: str) -> TokenPairOut:
        """
        Mint an access/refresh pair and store the refresh hash for the device.

        Both tokens are minted before the single upsert, so a signing failure
        leaves storage untouched. A previous session of the same device is
        overwritten.

        :param user_id: Session owner.
        :param device_id: Device the session is bound to.
        :returns: Plaintext token pair.
        """
        now = self.now_utc()
        subject = str(user_id)
        access = self.access.issue(subject, self.cfg.access_ttl)
        refresh = self.refresh_signer.issue(subject, self.cfg.refresh_ttl)
        token_hash = self.tokens.hash(refresh)

        self.tx.run(
            lambda uow: uow.refresh_tokens.upsert(
                user_id=user_id,
                device_id=device_id,
                token_hash=token_hash,
                expires_at=now + self.cfg.refresh_ttl,
                created_at=now,
            )
        )
        return TokenPairOut(access_token=access, refresh_token=refresh)

    def refresh(self, dto: RefreshIn) -> TokenPairOut:
        """
        Exchange a refresh token for a new access token.

        Policy
        ------
        - Remaining validity above ``rotation_grace``: new access token, the
          *same* refresh token, no storage write.
        - Otherwise: full rotation; the stored hash is overwritten and the
          presented refresh token stops working.

        :raises InvalidTokenError: Unknown (or already rotated) refresh token.
        :raises TokenExpiredError: The stored session has expired.
        """
        op = "sessions.refresh"
        with self.operation(op):
            token_hash = self.tokens.hash(dto.refresh_token)

            def unit(uow: SQLAlchemyUnitOfWork):
                record = uow.refresh_tokens.get_by_hash(token_hash)
                if record is None:
                    return None
                return record.user_id, record.device_id, record.expires_at

            found = self.tx.run(unit)
            if found is None:
                raise InvalidTokenError()
            user_id, device_id, expires_at = found

            now = self.now_utc()
            if expires_at <= now:
                raise TokenExpiredError()

            if expires_at - now > self.cfg.rotation_grace:
                access = self.access.issue(str(user_id), self.cfg.access_ttl)
                return TokenPairOut(access_token=access, refresh_token=dto.refresh_token)

            pair = self.create_session(user_id, device_id)
            self.log.info(
                "Session rotated", extra={"op": op, "user_id": user_id, "device_id": device_id}
            )
            return pair

    def logout(self, dto: LogoutIn) -> None:
        """
        Close the device session owning ``dto.refresh_token``.

        Sessions of the user's other devices are untouched.

        :raises NotFoundError: If no session matches the token.
        """
        op = "sessions.logout"
        with self.operation(op):
            deleted = self.tx.store.refresh_tokens.delete_by_hash(
                self.tokens.hash(dto.refresh_token)
            )
            if deleted == 0:
                raise NotFoundError("RefreshToken")

    def authenticate_access(self, token: str) -> int:
        """
        Resolve a bearer access token to its user id.

        :raises InvalidTokenError: If the token does not verify in the access context.
        """
        with self.operation("sessions.authenticate"):
            subject = self.access.verify(token)
            if not subject.isdigit():
                raise InvalidTokenError()
            return int(subject)

    def purge_expired(self) -> tuple[int, int]:
        """
        Delete expired verification codes and refresh records.

        :returns: ``(codes_deleted, sessions_deleted)``.
        """
        op = "sessions.purge_expired"
        with self.operation(op):
            now = self.now_utc()

            def unit(uow: SQLAlchemyUnitOfWork) -> tuple[int, int]:
                return (
                    uow.verification_codes.purge_expired(now),
                    uow.refresh_tokens.purge_expired(now),
                )

            codes, sessions = self.tx.run(unit)
            self.log.info(
                "Expired rows purged: codes=%s sessions=%s", codes, sessions, extra={"op": op}
            )
            return codes, sessions
