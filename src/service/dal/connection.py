"""
MongoDB connection management for the catalog functions.

One ``MongoClient`` is kept per execution environment and reused across warm
invocations. Whether it is usable is read from the driver's live topology
rather than from a flag, so a client whose servers went away is replaced on
the next request.
"""

import threading
from typing import Any, Callable, Optional

from pymongo import MongoClient
from pymongo.database import Database
from pymongo.errors import ConfigurationError, InvalidOperation, PyMongoError

from service.dal import DatabaseConnectionError
from service.handlers.models.env_vars import CatalogEnvVars, get_catalog_env_vars
from service.handlers.utils.observability import logger, tracer
from service.security.secrets_manager import (
    SecretNotFoundError,
    SecretRetrievalError,
    SecretsStore,
    get_secrets_store,
)

MONGODB_URI_SECRET_KEY = 'MONGODB_URI'


class MongoConnectionManager:
    """Owns the pooled MongoDB client of the current execution environment."""

    def __init__(
        self,
        settings: CatalogEnvVars,
        secrets: Optional[SecretsStore] = None,
        client_factory: Callable[..., Any] = MongoClient,
    ) -> None:
        """
        Initialize the connection manager.

        Args:
            settings: Validated catalog environment variables
            secrets: Secrets store used to resolve the connection string
            client_factory: MongoClient compatible callable (for testing)
        """
        self.settings = settings
        self._secrets = secrets
        self._client_factory = client_factory
        self._client: Optional[Any] = None
        self._mongo_uri: Optional[str] = None
        self._lock = threading.Lock()

    def is_connected(self) -> bool:
        client = self._client
        if client is None:
            return False
        try:
            return client.topology_description.has_readable_server()
        except InvalidOperation:
            # Client was closed
            return False

    @tracer.capture_method
    def ensure_connection(self) -> None:
        """
        Make sure a live client exists, connecting when needed.

        Raises:
            DatabaseConnectionError: If credentials cannot be fetched or the server cannot be reached
        """
        if self.is_connected():
            return
        with self._lock:
            if self.is_connected():
                return
            self._connect()

    @property
    def database(self) -> Database:
        if self._client is None:
            raise DatabaseConnectionError('MongoDB client is not connected')
        try:
            return self._client.get_default_database()
        except ConfigurationError:
            # Connection string names no database
            return self._client.get_database(self.settings.MONGODB_DATABASE)

    def close(self) -> None:
        with self._lock:
            if self._client is not None:
                self._client.close()
                self._client = None

    def _connect(self) -> None:
        uri = self._resolve_uri()
        if self._client is not None:
            logger.info('Replacing stale MongoDB client')
            self._client.close()
            self._client = None

        client = self._client_factory(
            uri,
            maxPoolSize=self.settings.MONGODB_MAX_POOL_SIZE,
            minPoolSize=self.settings.MONGODB_MIN_POOL_SIZE,
            serverSelectionTimeoutMS=self.settings.MONGODB_SERVER_SELECTION_TIMEOUT_MS,
            socketTimeoutMS=self.settings.MONGODB_SOCKET_TIMEOUT_MS,
            connectTimeoutMS=self.settings.MONGODB_CONNECT_TIMEOUT_MS,
            maxIdleTimeMS=self.settings.MONGODB_MAX_IDLE_TIME_MS,
            retryWrites=True,
            retryReads=True,
            compressors='zlib',
        )
        try:
            client.admin.command('ping')
        except PyMongoError as exc:
            client.close()
            self._forget_credentials()
            logger.error('MongoDB connection failed', extra={'error_type': exc.__class__.__name__})
            raise DatabaseConnectionError('Could not connect to MongoDB') from exc

        self._client = client
        logger.info('MongoDB connection established', extra={
            'max_pool_size': self.settings.MONGODB_MAX_POOL_SIZE,
            'min_pool_size': self.settings.MONGODB_MIN_POOL_SIZE,
        })

    def _resolve_uri(self) -> str:
        if self._mongo_uri is not None:
            return self._mongo_uri

        secret_arn = self.settings.MONGODB_SECRET_ARN
        if secret_arn:
            try:
                uri = self._get_secrets().get_secret_field(secret_arn, MONGODB_URI_SECRET_KEY)
            except (SecretNotFoundError, SecretRetrievalError) as exc:
                raise DatabaseConnectionError('Could not load MongoDB credentials') from exc
        elif self.settings.MONGODB_URI:
            uri = self.settings.MONGODB_URI
        else:
            raise DatabaseConnectionError('MONGODB_SECRET_ARN is not configured')

        self._mongo_uri = uri
        return uri

    def _get_secrets(self) -> SecretsStore:
        if self._secrets is None:
            self._secrets = get_secrets_store(
                region_name=self.settings.AWS_REGION,
                timeout_seconds=self.settings.SECRETS_TIMEOUT_SECONDS,
            )
        return self._secrets

    def _forget_credentials(self) -> None:
        # Rotated credentials are picked up on the next attempt
        self._mongo_uri = None
        if self.settings.MONGODB_SECRET_ARN:
            self._get_secrets().invalidate(self.settings.MONGODB_SECRET_ARN)


_connection_manager: Optional[MongoConnectionManager] = None
_connection_manager_lock = threading.Lock()


def get_connection_manager() -> MongoConnectionManager:
    """Get the process-wide MongoDB connection manager, creating it on first use."""
    global _connection_manager
    with _connection_manager_lock:
        if _connection_manager is None:
            _connection_manager = MongoConnectionManager(settings=get_catalog_env_vars())
        return _connection_manager
