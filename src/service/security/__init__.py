"""
Security Module for the catalog and user services.

Bearer token authentication against Amazon Cognito and cached access to
credentials stored in AWS Secrets Manager.
"""

from .auth import AuthMiddleware, CognitoTokenVerifier, UserClaims, get_token_verifier
from .secrets_manager import SecretNotFoundError, SecretRetrievalError, SecretsStore, get_secrets_store

__all__ = [
    "AuthMiddleware",
    "CognitoTokenVerifier",
    "UserClaims",
    "get_token_verifier",
    "SecretsStore",
    "SecretNotFoundError",
    "SecretRetrievalError",
    "get_secrets_store",
]
