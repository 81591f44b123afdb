"""
Standard API Gateway response envelope.

Every response body has the shape ``{"success", "message", "data"?}``; ``data``
is omitted entirely when there is nothing to return.
"""

import json
from typing import Any, Dict, List, Optional

from service.handlers.models.env_vars import get_service_env_vars
from service.handlers.utils.errors import (
    INTERNAL_ERROR_MESSAGE,
    VALIDATION_ERROR_MESSAGE,
    RequestValidationError,
    ServiceError,
    classify_error,
)

SUCCESS_MESSAGE = 'Operación exitosa'
CREATED_MESSAGE = 'Recurso creado exitosamente'

_NO_DATA = object()


def build_headers(headers: Optional[Dict[str, str]] = None) -> Dict[str, str]:
    """Content-Type plus the CORS headers when CORS_ENABLED is set."""
    settings = get_service_env_vars()
    default_headers = {'Content-Type': 'application/json'}

    if settings.CORS_ENABLED:
        default_headers.update({
            'Access-Control-Allow-Origin': settings.CORS_ALLOW_ORIGIN,
            'Access-Control-Allow-Headers': settings.CORS_ALLOW_HEADERS,
            'Access-Control-Allow-Methods': settings.CORS_ALLOW_METHODS,
        })

    if headers:
        default_headers.update(headers)
    return default_headers


def format_response(
    status_code: int,
    message: str,
    data: Any = _NO_DATA,
    success: Optional[bool] = None,
    headers: Optional[Dict[str, str]] = None,
) -> Dict[str, Any]:
    """
    Create a standardized API Gateway proxy response.

    Args:
        status_code: HTTP status code
        message: Human readable message
        data: Optional payload; omitted from the body when not given
        success: Explicit success flag, derived from the status code when None
        headers: Extra headers merged over the defaults

    Returns:
        Dictionary with statusCode, headers and a JSON string body
    """
    body: Dict[str, Any] = {
        'success': success if success is not None else 200 <= status_code < 300,
        'message': message,
    }
    if data is not _NO_DATA:
        body['data'] = data

    return {
        'statusCode': status_code,
        'headers': build_headers(headers),
        'body': json.dumps(body, ensure_ascii=False, default=str),
    }


def success_response(data: Any = _NO_DATA, message: str = SUCCESS_MESSAGE) -> Dict[str, Any]:
    return format_response(200, message, data)


def created_response(data: Any = _NO_DATA, message: str = CREATED_MESSAGE) -> Dict[str, Any]:
    return format_response(201, message, data)


def no_content_response() -> Dict[str, Any]:
    return {'statusCode': 204, 'headers': build_headers(), 'body': ''}


def preflight_response() -> Dict[str, Any]:
    return format_response(200, 'OK')


def validation_error_response(
    errors: List[Dict[str, str]],
    message: str = VALIDATION_ERROR_MESSAGE,
) -> Dict[str, Any]:
    return format_response(400, message, {'errors': errors}, success=False)


def route_not_found_response(path: str, method: str, available_routes: List[str]) -> Dict[str, Any]:
    return format_response(
        404,
        f'Ruta {path} con método {method} no encontrada',
        {'availableRoutes': available_routes},
        success=False,
    )


def error_response(error: BaseException) -> Dict[str, Any]:
    """
    Convert any exception into an error envelope.

    The status code comes from the error kind. Messages of non-operational
    errors are hidden from the client; in the dev environment the original
    message is attached as ``data.error``.
    """
    service_error: ServiceError = classify_error(error)

    if isinstance(service_error, RequestValidationError):
        return validation_error_response(service_error.errors, service_error.message)

    if service_error.is_operational:
        return format_response(service_error.status_code, service_error.message, success=False)

    if get_service_env_vars().is_development:
        return format_response(
            service_error.status_code,
            INTERNAL_ERROR_MESSAGE,
            {'error': service_error.message},
            success=False,
        )
    return format_response(service_error.status_code, INTERNAL_ERROR_MESSAGE, success=False)
