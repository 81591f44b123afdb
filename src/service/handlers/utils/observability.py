"""
Centralized observability utilities for the catalog and user Lambda handlers.

This module provides configured instances of AWS Lambda Powertools for logging,
tracing, and metrics collection. The logger uses a redacting formatter so that
credentials, tokens and personal data never reach CloudWatch.
"""

from typing import Any, Dict

from aws_lambda_powertools.logging import Logger
from aws_lambda_powertools.logging.formatter import LambdaPowertoolsFormatter
from aws_lambda_powertools.metrics import Metrics
from aws_lambda_powertools.tracing import Tracer

# Metrics namespace for business KPIs
METRICS_NAMESPACE = 'CatalogServices'

REDACTED = '[REDACTED]'
LARGE_BODY_REDACTED = '[LARGE_BODY_REDACTED]'
MAX_LOGGED_BODY_LENGTH = 100

SENSITIVE_KEYS = frozenset({
    'password',
    'password_hash',
    'token',
    'id_token',
    'access_token',
    'refresh_token',
    'jwt',
    'secret',
    'secret_string',
    'api_key',
    'authorization',
    'cookie',
    'email',
    'user_email',
    'phone',
    'ssn',
    'credit_card',
    'mongodb_uri',
    'database_url',
})


# snake_case, camelCase and kebab-case spellings all match
_SENSITIVE_KEYS_NORMALIZED = frozenset(key.replace('_', '') for key in SENSITIVE_KEYS)


def _normalize_key(key: Any) -> str:
    return str(key).lower().replace('_', '').replace('-', '')


def redact(value: Any) -> Any:
    """Return a copy of ``value`` with sensitive keys masked, recursing into dicts and lists."""
    if isinstance(value, dict):
        sanitized: Dict[str, Any] = {}
        for key, item in value.items():
            normalized = _normalize_key(key)
            if normalized in _SENSITIVE_KEYS_NORMALIZED:
                sanitized[key] = REDACTED
            elif normalized == 'body' and isinstance(item, str) and len(item) > MAX_LOGGED_BODY_LENGTH:
                sanitized[key] = LARGE_BODY_REDACTED
            else:
                sanitized[key] = redact(item)
        return sanitized
    if isinstance(value, (list, tuple)):
        return [redact(item) for item in value]
    return value


class RedactingFormatter(LambdaPowertoolsFormatter):
    """Powertools JSON formatter that masks sensitive fields before serialization."""

    def serialize(self, log: Dict[str, Any]) -> str:
        return super().serialize(log=redact(log))


# JSON output format, service name can be set by environment variable "POWERTOOLS_SERVICE_NAME"
# Level can be set by "POWERTOOLS_LOG_LEVEL" or "LOG_LEVEL"
logger: Logger = Logger(logger_formatter=RedactingFormatter())

# Disabled by setting POWERTOOLS_TRACE_DISABLED to "True"
tracer: Tracer = Tracer()

# Namespace and service name can be set by environment variables:
# - POWERTOOLS_METRICS_NAMESPACE
# - POWERTOOLS_SERVICE_NAME
metrics = Metrics(namespace=METRICS_NAMESPACE)
