"""
AWS Secrets Manager integration for database credentials.

Secrets are fetched once per execution environment and cached in memory. The
boto3 client uses short connect and read timeouts and a single attempt so that
a slow or unreachable Secrets Manager fails the request quickly instead of
consuming the whole Lambda timeout.
"""

import json
import threading
import time
from typing import Any, Dict, Optional

import boto3
from aws_lambda_powertools.metrics import MetricUnit
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from service.handlers.utils.errors import InternalError
from service.handlers.utils.observability import logger, metrics, tracer

CONNECT_TIMEOUT_SHARE = 0.4


class SecretNotFoundError(InternalError):
    """Raised when the configured secret does not exist."""


class SecretRetrievalError(InternalError):
    """Raised when a secret cannot be fetched, decrypted or parsed."""


class SecretsStore:
    """
    In-memory cache in front of AWS Secrets Manager.

    Only successful fetches are cached; a failed fetch leaves the cache empty
    so that the next invocation retries.
    """

    def __init__(
        self,
        region_name: str,
        timeout_seconds: int = 5,
        client: Optional[Any] = None,
    ):
        """
        Initialize the secrets store.

        Args:
            region_name: AWS region name
            timeout_seconds: Upper bound for one call, split between connecting and reading
            client: Preconfigured secretsmanager client (for testing)
        """
        self.region_name = region_name
        connect_timeout = round(timeout_seconds * CONNECT_TIMEOUT_SHARE, 2)
        self.client = client or boto3.client(
            'secretsmanager',
            region_name=region_name,
            config=Config(
                connect_timeout=connect_timeout,
                read_timeout=round(timeout_seconds - connect_timeout, 2),
                retries={'total_max_attempts': 1, 'mode': 'standard'},
            ),
        )
        self._cache: Dict[str, Dict[str, Any]] = {}
        self._lock = threading.Lock()

    @tracer.capture_method
    def get_secret_json(self, secret_id: str) -> Dict[str, Any]:
        """
        Get a JSON secret as a dictionary.

        Args:
            secret_id: Name or ARN of the secret

        Returns:
            Parsed secret document

        Raises:
            SecretNotFoundError: If secret doesn't exist
            SecretRetrievalError: If the call fails, times out or the secret is not a JSON object
        """
        with self._lock:
            cached = self._cache.get(secret_id)
            if cached is not None:
                logger.debug('Secret retrieved from cache')
                return cached

            start_time = time.time()
            try:
                response = self.client.get_secret_value(SecretId=secret_id)
            except ClientError as e:
                error_code = e.response.get('Error', {}).get('Code', 'Unknown')
                metrics.add_metric(name='SecretRetrievalError', unit=MetricUnit.Count, value=1)
                logger.error('Failed to retrieve secret', extra={'error_code': error_code})
                if error_code == 'ResourceNotFoundException':
                    raise SecretNotFoundError('Secret not found') from e
                raise SecretRetrievalError(f'Failed to retrieve secret: {error_code}') from e
            except BotoCoreError as e:
                # Connect and read timeouts surface here
                metrics.add_metric(name='SecretRetrievalError', unit=MetricUnit.Count, value=1)
                logger.error('Secrets Manager unreachable', extra={'error_type': e.__class__.__name__})
                raise SecretRetrievalError('Secrets Manager unreachable') from e

            secret = self._parse_secret_value(response)
            self._cache[secret_id] = secret

            logger.info('Secret retrieved successfully', extra={
                'version_id': response.get('VersionId'),
                'duration_ms': round((time.time() - start_time) * 1000, 2),
            })
            return secret

    def get_secret_field(self, secret_id: str, field: str) -> str:
        """Get a single non-empty string field of a JSON secret."""
        value = self.get_secret_json(secret_id).get(field)
        if not isinstance(value, str) or not value:
            raise SecretRetrievalError(f'Secret does not contain {field}')
        return value

    def invalidate(self, secret_id: str) -> None:
        with self._lock:
            self._cache.pop(secret_id, None)

    @staticmethod
    def _parse_secret_value(response: Dict[str, Any]) -> Dict[str, Any]:
        secret_string = response.get('SecretString')
        if secret_string is None:
            raise SecretRetrievalError('Binary secrets are not supported')
        try:
            secret = json.loads(secret_string)
        except json.JSONDecodeError as e:
            raise SecretRetrievalError('Secret is not valid JSON') from e
        if not isinstance(secret, dict):
            raise SecretRetrievalError('Secret is not a JSON object')
        return secret


_secrets_store: Optional[SecretsStore] = None
_secrets_store_lock = threading.Lock()


def get_secrets_store(region_name: str, timeout_seconds: int = 5) -> SecretsStore:
    """Get the process-wide secrets store, creating it on first use."""
    global _secrets_store
    with _secrets_store_lock:
        if _secrets_store is None:
            _secrets_store = SecretsStore(region_name=region_name, timeout_seconds=timeout_seconds)
        return _secrets_store
