"""
Bearer token authentication.

This module provides the credential extraction used by the order workflow and
two interchangeable token verifiers:

- ``CognitoTokenVerifier`` asks Cognito to resolve an access token (GetUser)
- ``JWTTokenVerifier`` validates a JWT locally against a secret or a JWKS URL

A verifier either returns a ``Principal`` or raises ``AuthenticationError``.
"""

import re
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Protocol, runtime_checkable

import boto3
import jwt
from aws_lambda_powertools.metrics import MetricUnit
from botocore.exceptions import BotoCoreError, ClientError

from storefront.handlers.utils.observability import count, logger, metrics, tracer

_BEARER_PATTERN = re.compile(r'^Bearer\s+', re.IGNORECASE)


class AuthenticationError(Exception):
    """Base authentication error."""
    pass


class InvalidTokenError(AuthenticationError):
    """Token is invalid, expired or could not be verified."""
    pass


@dataclass(frozen=True)
class Principal:
    """Authenticated identity resolved from a bearer credential."""

    username: str
    user_id: Optional[str] = None
    attributes: Dict[str, Any] = field(default_factory=dict)


@runtime_checkable
class TokenVerifier(Protocol):
    """Protocol for services that resolve a bearer credential to a principal."""

    def resolve_principal(self, token: str) -> Principal:
        ...


def get_header(headers: Optional[Mapping[str, str]], name: str) -> Optional[str]:
    """Case-insensitive header lookup."""
    if not headers:
        return None
    wanted = name.lower()
    for key, value in headers.items():
        if key.lower() == wanted:
            return value
    return None


def extract_bearer_token(headers: Optional[Mapping[str, str]]) -> Optional[str]:
    """
    Extract the raw bearer credential from request headers.

    Args:
        headers: Request headers, any key casing

    Returns:
        The credential with the scheme stripped (possibly empty), or None when
        the Authorization header is missing or uses another scheme
    """
    auth_header = get_header(headers, 'Authorization')
    if not auth_header or not _BEARER_PATTERN.match(auth_header):
        return None
    return _BEARER_PATTERN.sub('', auth_header, count=1).strip()


class CognitoTokenVerifier:
    """
    Resolves Cognito access tokens by calling the GetUser API.

    Cognito validates the token signature, expiry and revocation itself, so a
    successful call is proof the token is live.
    """

    def __init__(self, client: Optional[Any] = None, region_name: Optional[str] = None):
        """
        Initialize Cognito verifier.

        Args:
            client: Pre-built ``cognito-idp`` client (tests inject a stubbed one)
            region_name: AWS region of the user pool
        """
        if client is None:
            client_kwargs = {'region_name': region_name} if region_name else {}
            client = boto3.client('cognito-idp', **client_kwargs)
        self.client = client

    @tracer.capture_method
    def resolve_principal(self, token: str) -> Principal:
        if not token:
            raise InvalidTokenError('No token provided')

        start_time = time.time()
        try:
            user = self.client.get_user(AccessToken=token)
        except ClientError as e:
            count("AuthenticationFailure")
            message = e.response['Error'].get('Message') or e.response['Error']['Code']
            logger.warning("Cognito rejected access token", extra={
                "error_code": e.response['Error']['Code'],
                "error_message": message,
            })
            raise InvalidTokenError(f'Invalid token: {message}') from e
        except BotoCoreError as e:
            count("AuthenticationFailure")
            logger.error("Cognito token verification failed", extra={"error": str(e)})
            raise InvalidTokenError(f'Invalid token: {e}') from e

        attributes = {attr['Name']: attr['Value'] for attr in user.get('UserAttributes', [])}
        metrics.add_metric(
            name="AuthenticationDuration",
            unit=MetricUnit.Milliseconds,
            value=(time.time() - start_time) * 1000,
        )
        logger.info("Cognito authentication successful", extra={"username": user['Username']})

        return Principal(
            username=user['Username'],
            user_id=attributes.get('sub'),
            attributes=attributes,
        )


class JWTTokenVerifier:
    """
    JWT verifier supporting shared-secret and JWKS-based validation.

    For RS256 Cognito tokens, point ``jwks_url`` at the user pool's
    ``/.well-known/jwks.json`` and set ``issuer`` to the pool URL.
    """

    USERNAME_CLAIMS = ('username', 'cognito:username', 'sub')

    def __init__(
        self,
        secret_key: Optional[str] = None,
        jwks_url: Optional[str] = None,
        algorithm: str = 'HS256',
        issuer: Optional[str] = None,
        audience: Optional[str] = None,
        leeway: int = 10,
    ):
        """
        Initialize JWT verifier.

        Args:
            secret_key: Secret key for HMAC algorithms
            jwks_url: URL to fetch the JSON Web Key Set from
            algorithm: JWT algorithm (HS256, RS256, etc.)
            issuer: Expected token issuer
            audience: Expected token audience
            leeway: Time leeway for expiry validation (seconds)
        """
        if not secret_key and not jwks_url:
            raise ValueError('JWTTokenVerifier needs a secret_key or a jwks_url')

        self.secret_key = secret_key
        self.algorithm = algorithm
        self.issuer = issuer
        self.audience = audience
        self.leeway = leeway
        self.jwks_client = jwt.PyJWKClient(jwks_url) if jwks_url else None

        logger.info("JWT verifier initialized", extra={
            "algorithm": algorithm,
            "has_secret": bool(secret_key),
            "jwks_url": jwks_url,
            "issuer": issuer,
        })

    @tracer.capture_method
    def resolve_principal(self, token: str) -> Principal:
        if not token:
            raise InvalidTokenError('No token provided')

        try:
            if self.jwks_client is not None:
                key = self.jwks_client.get_signing_key_from_jwt(token).key
            else:
                key = self.secret_key
            payload = jwt.decode(
                token,
                key,
                algorithms=[self.algorithm],
                issuer=self.issuer,
                audience=self.audience,
                leeway=self.leeway,
            )
        except jwt.ExpiredSignatureError as e:
            count("AuthenticationTokenExpired")
            raise InvalidTokenError('Invalid token: Token has expired') from e
        except jwt.PyJWTError as e:
            count("AuthenticationFailure")
            logger.warning("JWT validation failed", extra={"error": str(e)})
            raise InvalidTokenError(f'Invalid token: {e}') from e

        username = next((payload[claim] for claim in self.USERNAME_CLAIMS if payload.get(claim)), None)
        if not username:
            count("AuthenticationFailure")
            raise InvalidTokenError('Invalid token: no username claim')

        return Principal(
            username=str(username),
            user_id=payload.get('sub'),
            attributes={k: v for k, v in payload.items() if k not in ('exp', 'iat', 'nbf')},
        )
