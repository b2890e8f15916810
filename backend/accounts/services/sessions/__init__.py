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
from accounts.services.sessions.service import SessionService

__all__ = [
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
