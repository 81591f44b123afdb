"""
Bearer token authentication against Amazon Cognito.

Every protected request carries an ``Authorization: Bearer <id token>``
header. The token is verified against the user pool JWKS (RS256, issuer,
audience and ``token_use``) and reduced to the caller's ``UserClaims``.
"""

import re
import threading
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

import jwt
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.data_classes import APIGatewayProxyEvent

from service.handlers.models.env_vars import get_service_env_vars
from service.handlers.utils.errors import InternalError, UnauthorizedError
from service.handlers.utils.observability import logger, metrics, tracer

BEARER_PREFIX = re.compile(r'^Bearer(?:\s+|$)', re.IGNORECASE)
USER_ID_LOG_PREFIX_LENGTH = 8

MISSING_TOKEN_MESSAGE = 'Token de autorización requerido'
INVALID_TOKEN_MESSAGE = 'Token inválido o expirado'


@dataclass(frozen=True)
class UserClaims:
    """Identity of the authenticated caller."""

    user_id: str
    user_email: Optional[str] = None

    @property
    def log_id(self) -> str:
        """Truncated user id, safe to write to logs."""
        return self.user_id[:USER_ID_LOG_PREFIX_LENGTH]


class CognitoTokenVerifier:
    """Verifies Cognito ID tokens with the user pool's public keys."""

    def __init__(self, user_pool_id: str, app_client_id: str, region: str, jwks_client: Optional[Any] = None):
        """
        Initialize the verifier.

        Args:
            user_pool_id: Cognito User Pool ID
            app_client_id: App Client ID, checked as the token audience
            region: AWS region of the user pool
            jwks_client: Preconfigured PyJWKClient (for testing)
        """
        self.app_client_id = app_client_id
        self.issuer = f'https://cognito-idp.{region}.amazonaws.com/{user_pool_id}'
        self.jwks_client = jwks_client or jwt.PyJWKClient(f'{self.issuer}/.well-known/jwks.json')

    def verify(self, token: str) -> Dict[str, Any]:
        """
        Verify an ID token and return its claims.

        Raises:
            jwt.PyJWTError: If the signature, expiry, issuer or audience is invalid
            UnauthorizedError: If the token is not an ID token
        """
        signing_key = self.jwks_client.get_signing_key_from_jwt(token)
        claims = jwt.decode(
            token,
            signing_key.key,
            algorithms=['RS256'],
            audience=self.app_client_id,
            issuer=self.issuer,
            options={'require': ['exp', 'iat', 'sub']},
        )
        if claims.get('token_use') != 'id':
            raise UnauthorizedError(INVALID_TOKEN_MESSAGE)
        return claims


_token_verifier: Optional[CognitoTokenVerifier] = None
_token_verifier_lock = threading.Lock()


def get_token_verifier() -> CognitoTokenVerifier:
    """
    Get the process-wide token verifier, creating it on first use.

    Raises:
        InternalError: If the Cognito pool or client id is not configured
    """
    global _token_verifier
    with _token_verifier_lock:
        if _token_verifier is None:
            settings = get_service_env_vars()
            if not settings.COGNITO_POOL_ID or not settings.COGNITO_APP_CLIENT_ID:
                raise InternalError('COGNITO_POOL_ID and COGNITO_APP_CLIENT_ID must be configured')
            _token_verifier = CognitoTokenVerifier(
                user_pool_id=settings.COGNITO_POOL_ID,
                app_client_id=settings.COGNITO_APP_CLIENT_ID,
                region=settings.AWS_REGION,
            )
        return _token_verifier


def get_header(headers: Optional[Mapping[str, str]], name: str) -> Optional[str]:
    """Case-insensitive header lookup."""
    if not headers:
        return None
    wanted = name.lower()
    for key, value in headers.items():
        if key.lower() == wanted:
            return value
    return None


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Strip a case-insensitive ``Bearer`` prefix; an empty remainder means no token."""
    if not authorization:
        return None
    token = BEARER_PREFIX.sub('', authorization.strip(), count=1).strip()
    return token or None


class AuthMiddleware:
    """Authenticates API Gateway requests; raises ``UnauthorizedError`` on any failure."""

    @staticmethod
    @tracer.capture_method
    def authenticate(event: APIGatewayProxyEvent) -> UserClaims:
        token = extract_bearer_token(get_header(event.raw_event.get('headers'), 'Authorization'))
        if token is None:
            AuthMiddleware._reject('missing_token', MISSING_TOKEN_MESSAGE)

        verifier = get_token_verifier()
        try:
            payload = verifier.verify(token)
        except jwt.PyJWTError as exc:
            AuthMiddleware._reject(exc.__class__.__name__, INVALID_TOKEN_MESSAGE, exc)
        except UnauthorizedError as exc:
            AuthMiddleware._reject('wrong_token_use', exc.message, exc)

        claims = UserClaims(user_id=payload['sub'], user_email=payload.get('email'))
        logger.info('User authenticated', extra={'user_id_prefix': claims.log_id})
        return claims

    @staticmethod
    def _reject(reason: str, message: str, cause: Optional[Exception] = None) -> None:
        metrics.add_metric(name='AuthenticationFailure', unit=MetricUnit.Count, value=1)
        logger.warning('Authentication failed', extra={'reason': reason})
        raise UnauthorizedError(message) from cause
