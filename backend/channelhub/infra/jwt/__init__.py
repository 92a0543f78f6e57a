from .pyjwt_token_issuer import PyJWTTokenIssuer

__all__ = ["PyJWTTokenIssuer"]
