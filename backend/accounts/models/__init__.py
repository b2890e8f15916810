from accounts.models.refresh_token import RefreshToken
from accounts.models.user import User
from accounts.models.verification_code import VerificationCode

__all__ = [
    "RefreshToken",
    "User",
    "VerificationCode",
]
