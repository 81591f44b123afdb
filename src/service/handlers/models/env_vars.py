"""
Environment variable models for type-safe configuration.

Each Lambda function validates its environment once per cold start through
aws-lambda-env-modeler; the resulting models are cached for the lifetime of
the execution environment.
"""

from typing import Annotated, Optional

from aws_lambda_env_modeler import BaseModel as BaseEnvModel, get_environment_variables
from pydantic import Field


class ServiceEnvVars(BaseEnvModel):
    """Environment variables shared by every function."""

    # Environment name (dev, test, staging, prod)
    ENVIRONMENT: Annotated[str, Field(
        default='prod',
        description='Deployment environment name',
        pattern=r'^(dev|test|staging|prod)$'
    )] = 'prod'

    APP_VERSION: Annotated[str, Field(
        default='1.0.0',
        description='Application version string'
    )] = '1.0.0'

    AWS_REGION: Annotated[str, Field(
        default='eu-central-1',
        description='AWS region for service deployment'
    )] = 'eu-central-1'

    POWERTOOLS_SERVICE_NAME: Annotated[str, Field(
        default='catalog-services',
        description='Service name for AWS Powertools'
    )] = 'catalog-services'

    # Cognito user pool used to verify caller identity tokens
    COGNITO_POOL_ID: Annotated[str, Field(
        default='',
        description='Cognito user pool id, e.g. eu-central-1_AbCdEf'
    )] = ''

    COGNITO_APP_CLIENT_ID: Annotated[str, Field(
        default='',
        description='Cognito app client id used as the token audience'
    )] = ''

    # CORS headers are only attached when explicitly enabled
    CORS_ENABLED: Annotated[bool, Field(
        default=False,
        description='Attach CORS headers to every response'
    )] = False

    CORS_ALLOW_ORIGIN: Annotated[str, Field(
        default='*',
        description='CORS allowed origins for API responses'
    )] = '*'

    CORS_ALLOW_HEADERS: Annotated[str, Field(
        default='Content-Type,X-Amz-Date,Authorization,X-Api-Key,X-Amz-Security-Token',
        description='CORS allowed headers for API requests'
    )] = 'Content-Type,X-Amz-Date,Authorization,X-Api-Key,X-Amz-Security-Token'

    CORS_ALLOW_METHODS: Annotated[str, Field(
        default='GET,POST,PUT,DELETE,OPTIONS',
        description='CORS allowed HTTP methods'
    )] = 'GET,POST,PUT,DELETE,OPTIONS'

    SECRETS_TIMEOUT_SECONDS: Annotated[int, Field(
        default=5,
        description='Total connect plus read budget for one Secrets Manager call',
        ge=1,
        le=30
    )] = 5

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.ENVIRONMENT == 'dev'

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.ENVIRONMENT == 'prod'


class CatalogEnvVars(ServiceEnvVars):
    """Environment variables for the document-store backed functions (product, category, deal)."""

    MONGODB_SECRET_ARN: Annotated[Optional[str], Field(
        default=None,
        description='Secrets Manager secret holding a JSON document with MONGODB_URI'
    )] = None

    # Local development only, ignored when MONGODB_SECRET_ARN is set
    MONGODB_URI: Annotated[Optional[str], Field(
        default=None,
        description='Connection string used when no secret is configured'
    )] = None

    MONGODB_DATABASE: Annotated[str, Field(
        default='catalog',
        description='Database used when the connection string names none',
        min_length=1
    )] = 'catalog'

    MONGODB_MAX_POOL_SIZE: Annotated[int, Field(default=10, ge=1, le=100)] = 10
    MONGODB_MIN_POOL_SIZE: Annotated[int, Field(default=2, ge=0, le=100)] = 2
    MONGODB_SERVER_SELECTION_TIMEOUT_MS: Annotated[int, Field(default=5000, ge=100)] = 5000
    MONGODB_SOCKET_TIMEOUT_MS: Annotated[int, Field(default=45000, ge=100)] = 45000
    MONGODB_CONNECT_TIMEOUT_MS: Annotated[int, Field(default=10000, ge=100)] = 10000
    MONGODB_MAX_IDLE_TIME_MS: Annotated[int, Field(default=60000, ge=0)] = 60000


class UserServiceEnvVars(ServiceEnvVars):
    """Environment variables for the relational user service."""

    DB_SECRET_ARN: Annotated[Optional[str], Field(
        default=None,
        description='Secrets Manager secret holding a JSON document with DATABASE_URL'
    )] = None

    # Local development only, ignored when DB_SECRET_ARN is set
    DATABASE_URL: Annotated[Optional[str], Field(
        default=None,
        description='SQLAlchemy database URL used when no secret is configured'
    )] = None

    DB_POOL_SIZE: Annotated[int, Field(default=5, ge=1, le=50)] = 5
    DB_CONNECT_TIMEOUT_SECONDS: Annotated[int, Field(default=5, ge=1, le=60)] = 5


class ImageEnvVars(ServiceEnvVars):
    """Environment variables for the image upload function."""

    BUCKET_NAME: Annotated[str, Field(
        description='S3 bucket receiving product images',
        min_length=1
    )]


def get_service_env_vars() -> ServiceEnvVars:
    return get_environment_variables(model=ServiceEnvVars)


def get_catalog_env_vars() -> CatalogEnvVars:
    return get_environment_variables(model=CatalogEnvVars)


def get_user_service_env_vars() -> UserServiceEnvVars:
    return get_environment_variables(model=UserServiceEnvVars)


def get_image_env_vars() -> ImageEnvVars:
    """
    Get typed environment variables for the image function.

    Raises:
        ValueError: If BUCKET_NAME is not configured
    """
    return get_environment_variables(model=ImageEnvVars)
