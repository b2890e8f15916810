# accounts/services/sessions/dto.py
from __future__ import annotations

from dataclasses import dataclass

# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class SignUpIn:
    """
    Input DTO for sign-up.

    :param login: Unique sign-in handle (2–86 chars).
    :type login: str
    :param email: Contact address receiving the verification code.
    :type email: str
    :param password: Raw password (8–86 chars, hashed before storage).
    :type password: str
    """

    login: str
    email: str
    password: str


@dataclass(frozen=True, slots=True)
class VerifyIn:
    """
    Input DTO for code verification.

    :param code: Code received by email.
    :type code: str
    """

    code: str


@dataclass(frozen=True, slots=True)
class ResendIn:
    email: str


@dataclass(frozen=True, slots=True)
class SignInIn:
    """
    Input DTO for sign-in.

    :param login: User login.
    :type login: str
    :param password: Raw password (to be verified).
    :type password: str
    :param device_id: Identifier of the calling app instance.
    :type device_id: str
    """

    login: str
    password: str
    device_id: str


@dataclass(frozen=True, slots=True)
class RefreshIn:
    """
    Input DTO for token refresh.

    :param refresh_token: Encoded refresh JWT.
    :type refresh_token: str
    """

    refresh_token: str


@dataclass(frozen=True, slots=True)
class LogoutIn:
    refresh_token: str


# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class TokenPairOut:
    """
    Output DTO with access and refresh tokens.

    :param access_token: Encoded access JWT.
    :type access_token: str
    :param refresh_token: Encoded refresh JWT.
    :type refresh_token: str
    """

    access_token: str
    refresh_token: str


@dataclass(frozen=True, slots=True)
class SignUpOut:
    """
    Output DTO for sign-up and resend.

    :param user_id: Identifier of the (new or pending) account.
    :type user_id: int
    :param created: ``False`` when an unverified account was reused.
    :type created: bool
    :param verification_sent: ``False`` when the code could not be delivered.
    :type verification_sent: bool
    """

    user_id: int
    created: bool
    verification_sent: bool
