"""
Pytest configuration and shared fixtures for the catalog services.

Environment variables are set before any ``service`` module is imported so
that the Powertools tracer, logger and metrics singletons start disabled and
namespaced for tests.
"""

import json
import os
from typing import Any, Callable, Dict, Optional
from unittest.mock import Mock, patch

os.environ.update({
    "AWS_DEFAULT_REGION": "eu-central-1",
    "AWS_REGION": "eu-central-1",
    "AWS_ACCESS_KEY_ID": "testing",
    "AWS_SECRET_ACCESS_KEY": "testing",
    "AWS_SECURITY_TOKEN": "testing",
    "AWS_SESSION_TOKEN": "testing",
    "ENVIRONMENT": "test",
    "APP_VERSION": "test-1.0.0",
    "POWERTOOLS_SERVICE_NAME": "test-catalog-services",
    "POWERTOOLS_METRICS_NAMESPACE": "TestCatalogServices",
    "POWERTOOLS_TRACE_DISABLED": "true",  # Disable X-Ray in tests
    "POWERTOOLS_LOG_LEVEL": "DEBUG",
    "LAMBDA_ENV_MODELER_DISABLE_CACHE": "true",
    "COGNITO_POOL_ID": "eu-central-1_TestPool",
    "COGNITO_APP_CLIENT_ID": "test-client-id",
    "BUCKET_NAME": "test-product-images",
})

import jwt  # noqa: E402
import mongomock  # noqa: E402
import pytest  # noqa: E402

from service.dal import connection as mongo_connection  # noqa: E402
from service.dal import sql_connection  # noqa: E402
from service.dal.sql_connection import SqlConnectionManager  # noqa: E402
from service.handlers import image_handler  # noqa: E402
from service.handlers.models.env_vars import UserServiceEnvVars  # noqa: E402
from service.security import auth, secrets_manager  # noqa: E402

VALID_TOKEN = "valid-token"
TEST_USER_ID = "0f5c2a8e-1b7d-4c3e-9a6f-2d8e4b1c7a90"
TEST_USER_EMAIL = "tester@example.com"


@pytest.fixture(autouse=True)
def reset_singletons():
    """Reset process-wide singletons between tests."""
    def _reset():
        auth._token_verifier = None
        mongo_connection._connection_manager = None
        sql_connection._sql_connection_manager = None
        secrets_manager._secrets_store = None
        image_handler.get_s3_client.cache_clear()

    _reset()
    yield
    _reset()


@pytest.fixture
def lambda_context():
    """Create a mock Lambda context for testing."""
    context = Mock()
    context.function_name = "test-catalog-function"
    context.function_version = "1"
    context.invoked_function_arn = "arn:aws:lambda:eu-central-1:123456789012:function:test-catalog-function"
    context.memory_limit_in_mb = "512"
    context.get_remaining_time_in_millis = lambda: 30000
    context.aws_request_id = "test-request-id-123"
    context.log_group_name = "/aws/lambda/test-catalog-function"
    context.log_stream_name = "2024/01/01/[$LATEST]test123"
    return context


@pytest.fixture
def make_event() -> Callable[..., Dict[str, Any]]:
    """Factory for API Gateway REST proxy events."""
    def _make_event(
        method: str = "GET",
        path: str = "/",
        path_parameters: Optional[Dict[str, str]] = None,
        query: Optional[Dict[str, str]] = None,
        body: Any = None,
        token: Optional[str] = VALID_TOKEN,
        headers: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        request_headers = {"Content-Type": "application/json", "User-Agent": "test-agent/1.0"}
        if token is not None:
            request_headers["Authorization"] = f"Bearer {token}"
        request_headers.update(headers or {})

        if body is not None and not isinstance(body, str):
            body = json.dumps(body)

        return {
            "httpMethod": method,
            "path": path,
            "resource": path,
            "headers": request_headers,
            "body": body,
            "requestContext": {
                "requestId": "test-request-id-123",
                "accountId": "123456789012",
                "stage": "test",
                "httpMethod": method,
                "path": path,
                "identity": {"sourceIp": "127.0.0.1", "userAgent": "test-agent/1.0"},
            },
            "pathParameters": path_parameters,
            "queryStringParameters": query,
            "multiValueQueryStringParameters": None,
            "stageVariables": None,
            "isBase64Encoded": False,
        }

    return _make_event


class FakeTokenVerifier:
    """Accepts exactly one token and rejects everything else like PyJWT would."""

    def verify(self, token: str) -> Dict[str, Any]:
        if token != VALID_TOKEN:
            raise jwt.InvalidSignatureError("Signature verification failed")
        return {"sub": TEST_USER_ID, "email": TEST_USER_EMAIL, "token_use": "id"}


@pytest.fixture
def token_verifier():
    """Replace Cognito verification with a fake accepting ``VALID_TOKEN``."""
    verifier = FakeTokenVerifier()
    with patch("service.security.auth.get_token_verifier", return_value=verifier):
        yield verifier


class InMemoryMongoConnection:
    """Connection manager stand-in serving a mongomock database."""

    def __init__(self, database):
        self.database = database
        self.ensure_calls = 0

    def ensure_connection(self) -> None:
        self.ensure_calls += 1

    def is_connected(self) -> bool:
        return True


@pytest.fixture
def mongo_database():
    """Fresh in-memory MongoDB database."""
    client = mongomock.MongoClient()
    yield client["catalog-test"]
    client.close()


@pytest.fixture
def mongo_connection_manager(mongo_database):
    """Route every catalog handler to the in-memory database."""
    manager = InMemoryMongoConnection(mongo_database)
    with patch("service.handlers.product_handler.get_connection_manager", return_value=manager), \
            patch("service.handlers.category_handler.get_connection_manager", return_value=manager), \
            patch("service.handlers.deal_handler.get_connection_manager", return_value=manager):
        yield manager


@pytest.fixture
def sql_connection_manager():
    """SQLite-backed connection manager with the schema created."""
    manager = SqlConnectionManager(settings=UserServiceEnvVars(DATABASE_URL="sqlite://"))
    manager.create_schema()
    yield manager
    manager._engine.dispose()


@pytest.fixture
def user_api(sql_connection_manager):
    """Route the user handler to the SQLite connection manager."""
    with patch("service.handlers.user_handler.get_sql_connection_manager", return_value=sql_connection_manager):
        yield sql_connection_manager


@pytest.fixture
def client_error():
    """Build botocore ClientErrors for error handling tests."""
    from botocore.exceptions import ClientError

    def create_error(error_code: str, message: str = "Test error", operation_name: str = "TestOperation"):
        return ClientError(
            error_response={"Error": {"Code": error_code, "Message": message}},
            operation_name=operation_name,
        )

    return create_error


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
        elif "e2e" in str(item.fspath):
            item.add_marker(pytest.mark.e2e)
