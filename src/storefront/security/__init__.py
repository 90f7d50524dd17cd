"""
Security Module for the storefront service.

Bearer credential extraction and the token verifiers used to authenticate the
order-creation path.
"""

from .auth import (
    AuthenticationError,
    CognitoTokenVerifier,
    InvalidTokenError,
    JWTTokenVerifier,
    Principal,
    TokenVerifier,
    extract_bearer_token,
    get_header,
)

__all__ = [
    "AuthenticationError",
    "CognitoTokenVerifier",
    "InvalidTokenError",
    "JWTTokenVerifier",
    "Principal",
    "TokenVerifier",
    "extract_bearer_token",
    "get_header",
]
