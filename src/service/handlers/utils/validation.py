"""
Request input validation on top of pydantic models.

Two conventions are offered and both produce the same error body:

* ``validate_or_response`` returns a ready 400 response (or None on success)
  for handlers that short-circuit themselves.
* ``parse_or_raise`` raises ``RequestValidationError`` and lets the request
  boundary render it.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Generic, List, Mapping, Optional, Type, TypeVar

from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.data_classes import APIGatewayProxyEvent
from pydantic import BaseModel, ValidationError

from service.handlers.utils.errors import VALIDATION_ERROR_MESSAGE, RequestValidationError
from service.handlers.utils.observability import logger, metrics
from service.handlers.utils.responses import validation_error_response

ModelT = TypeVar('ModelT', bound=BaseModel)

QUERY_PARAMS_REQUIRED_MESSAGE = 'Query parameters son requeridos'
PATH_PARAMS_REQUIRED_MESSAGE = 'Path parameters son requeridos'
INVALID_JSON_MESSAGE = 'El cuerpo de la petición no es un JSON válido'


@dataclass
class ValidationResult(Generic[ModelT]):
    """Either the validated model or the list of field errors, never both."""

    data: Optional[ModelT] = None
    errors: List[Dict[str, str]] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return self.data is not None


def format_validation_errors(error: ValidationError) -> List[Dict[str, str]]:
    """Flatten pydantic errors to ``{field, message, code}`` items, keeping pydantic's order."""
    return [
        {
            'field': '.'.join(str(part) for part in item['loc']),
            'message': item['msg'],
            'code': item['type'],
        }
        for item in error.errors(include_url=False)
    ]


def validate(model: Type[ModelT], data: Any) -> ValidationResult[ModelT]:
    try:
        return ValidationResult(data=model.model_validate(data))
    except ValidationError as exc:
        errors = format_validation_errors(exc)
        metrics.add_metric(name='ValidationError', unit=MetricUnit.Count, value=1)
        logger.warning('Request validation failed', extra={
            'model': model.__name__,
            'error_count': len(errors),
            'fields': [item['field'] for item in errors],
        })
        return ValidationResult(errors=errors)


def validate_or_response(model: Type[ModelT], data: Any) -> Optional[Dict[str, Any]]:
    """Return a 400 response when ``data`` is invalid, None otherwise."""
    result = validate(model, data)
    if result.is_valid:
        return None
    return validation_error_response(result.errors)


def parse_or_raise(model: Type[ModelT], data: Any) -> ModelT:
    """
    Validate ``data`` against ``model``.

    Raises:
        RequestValidationError: With the formatted field errors
    """
    result = validate(model, data)
    if not result.is_valid:
        raise RequestValidationError(VALIDATION_ERROR_MESSAGE, errors=result.errors)
    return result.data


def parse_json_body(event: APIGatewayProxyEvent) -> Any:
    """
    Decode the request body; a missing body decodes to an empty object.

    Raises:
        RequestValidationError: If the body is not valid JSON
    """
    raw_body = event.body
    if raw_body is None or raw_body == '':
        return {}
    try:
        return json.loads(raw_body)
    except json.JSONDecodeError as exc:
        raise RequestValidationError(
            VALIDATION_ERROR_MESSAGE,
            errors=[{'field': 'body', 'message': INVALID_JSON_MESSAGE, 'code': 'invalid_json'}],
        ) from exc


def validate_query_params(
    model: Type[ModelT],
    params: Optional[Mapping[str, str]],
    required: bool = False,
) -> ModelT:
    """
    Validate query string parameters.

    Absent parameters validate as an empty mapping unless ``required`` is set.

    Raises:
        RequestValidationError: If parameters are required but absent, or invalid
    """
    if params is None:
        if required:
            raise RequestValidationError(QUERY_PARAMS_REQUIRED_MESSAGE)
        params = {}
    return parse_or_raise(model, dict(params))


def validate_path_params(model: Type[ModelT], params: Optional[Mapping[str, str]]) -> ModelT:
    """
    Validate path parameters, which are always required.

    Raises:
        RequestValidationError: If parameters are absent or invalid
    """
    if params is None:
        raise RequestValidationError(PATH_PARAMS_REQUIRED_MESSAGE)
    return parse_or_raise(model, dict(params))


def path_parameters(event: APIGatewayProxyEvent) -> Optional[Dict[str, str]]:
    """Path parameters exactly as API Gateway sent them, None when absent."""
    return event.raw_event.get('pathParameters')


def query_parameters(event: APIGatewayProxyEvent) -> Optional[Dict[str, str]]:
    """Query string parameters exactly as API Gateway sent them, None when absent."""
    return event.raw_event.get('queryStringParameters')
