from accounts.infra.hashing.hmac_token_hasher import HmacTokenHasher
from accounts.infra.hashing.werkzeug_password_hasher import WerkzeugPasswordHasher

__all__ = ["HmacTokenHasher", "WerkzeugPasswordHasher"]
