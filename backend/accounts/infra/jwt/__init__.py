from accounts.infra.jwt.pyjwt_token_signer import JWTTokenSigner

__all__ = ["JWTTokenSigner"]
