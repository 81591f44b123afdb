"""
Relational database connection management for the user service.

A single SQLAlchemy engine is built lazily per execution environment. Stale
pooled connections are detected by ``pool_pre_ping`` on checkout.
"""

import threading
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from service.dal import DatabaseConnectionError
from service.dal.sql_models import Base
from service.handlers.models.env_vars import UserServiceEnvVars, get_user_service_env_vars
from service.handlers.utils.observability import logger, tracer
from service.security.secrets_manager import (
    SecretNotFoundError,
    SecretRetrievalError,
    SecretsStore,
    get_secrets_store,
)

DATABASE_URL_SECRET_KEY = 'DATABASE_URL'
POOL_RECYCLE_SECONDS = 300


class SqlConnectionManager:
    """
    Owns the SQLAlchemy engine and session factory of the current execution environment.

    An engine is only kept once it has answered a query; later stale pooled
    connections are replaced by ``pool_pre_ping``. A failed connection attempt,
    or a session that loses its connection, drops the engine and the cached
    credentials so the next request resolves them again.
    """

    def __init__(
        self,
        settings: UserServiceEnvVars,
        secrets: Optional[SecretsStore] = None,
        engine: Optional[Engine] = None,
    ) -> None:
        self.settings = settings
        self._secrets = secrets
        self._engine = engine
        self._session_factory: Optional[sessionmaker] = sessionmaker(bind=engine, expire_on_commit=False) if engine else None
        self._lock = threading.Lock()

    def is_connected(self) -> bool:
        return self._engine is not None

    @tracer.capture_method
    def ensure_connection(self) -> None:
        """
        Build the engine on first use and check that the database answers.

        Raises:
            DatabaseConnectionError: If the URL cannot be resolved or the database is unreachable
        """
        if self.is_connected():
            return
        with self._lock:
            if self.is_connected():
                return
            engine = self._build_engine(self._resolve_url())
            try:
                with engine.connect() as connection:
                    connection.execute(text('SELECT 1'))
            except SQLAlchemyError as exc:
                engine.dispose()
                self._forget_credentials()
                logger.error('Database connection failed', extra={'error_type': exc.__class__.__name__})
                raise DatabaseConnectionError('Could not connect to the database') from exc
            self._engine = engine
            self._session_factory = sessionmaker(bind=engine, expire_on_commit=False)
            logger.info('Database connection established', extra={'dialect': engine.dialect.name})

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Transactional session: commits on success, rolls back on any error."""
        if self._session_factory is None:
            raise DatabaseConnectionError('Database engine is not initialized')
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except OperationalError:
            session.rollback()
            self.reset()
            raise
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def reset(self) -> None:
        """Dispose the engine and forget credentials; the next ``ensure_connection`` reconnects."""
        with self._lock:
            if self._engine is not None:
                logger.warning('Discarding database engine')
                self._engine.dispose()
            self._engine = None
            self._session_factory = None
            self._forget_credentials()

    def create_schema(self) -> None:
        """Create missing tables; existing tables are left untouched."""
        self.ensure_connection()
        Base.metadata.create_all(self._engine)
        logger.info('Database schema ensured', extra={'tables': sorted(Base.metadata.tables)})

    def _build_engine(self, url: str) -> Engine:
        kwargs: Dict[str, Any] = {'pool_pre_ping': True}
        if url.startswith('sqlite'):
            # One shared in-memory database for every session
            kwargs.update(poolclass=StaticPool, connect_args={'check_same_thread': False})
        else:
            kwargs.update(
                pool_size=self.settings.DB_POOL_SIZE,
                max_overflow=0,
                pool_recycle=POOL_RECYCLE_SECONDS,
                connect_args={'connect_timeout': self.settings.DB_CONNECT_TIMEOUT_SECONDS},
            )
        return create_engine(url, **kwargs)

    def _resolve_url(self) -> str:
        secret_arn = self.settings.DB_SECRET_ARN
        if secret_arn:
            try:
                return self._get_secrets().get_secret_field(secret_arn, DATABASE_URL_SECRET_KEY)
            except (SecretNotFoundError, SecretRetrievalError) as exc:
                raise DatabaseConnectionError('Could not load database credentials') from exc
        if self.settings.DATABASE_URL:
            return self.settings.DATABASE_URL
        raise DatabaseConnectionError('DB_SECRET_ARN is not configured')

    def _get_secrets(self) -> SecretsStore:
        if self._secrets is None:
            self._secrets = get_secrets_store(
                region_name=self.settings.AWS_REGION,
                timeout_seconds=self.settings.SECRETS_TIMEOUT_SECONDS,
            )
        return self._secrets

    def _forget_credentials(self) -> None:
        if self.settings.DB_SECRET_ARN:
            self._get_secrets().invalidate(self.settings.DB_SECRET_ARN)


_sql_connection_manager: Optional[SqlConnectionManager] = None
_sql_connection_manager_lock = threading.Lock()


def get_sql_connection_manager() -> SqlConnectionManager:
    """Get the process-wide SQL connection manager, creating it on first use."""
    global _sql_connection_manager
    with _sql_connection_manager_lock:
        if _sql_connection_manager is None:
            _sql_connection_manager = SqlConnectionManager(settings=get_user_service_env_vars())
        return _sql_connection_manager
