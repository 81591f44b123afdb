"""
Error taxonomy for the catalog and user services.

Every error a handler may raise belongs to one closed set of kinds. The request
boundary maps the kind to an HTTP status exactly once, so handlers never pick
status codes for failures themselves.
"""

from enum import Enum
from typing import Any, Dict, List, Optional


class ErrorKind(str, Enum):
    """Closed set of failure kinds understood by the request boundary."""

    AUTH = 'AUTH'
    VALIDATION = 'VALIDATION'
    NOT_FOUND = 'NOT_FOUND'
    CONFLICT = 'CONFLICT'
    INTERNAL = 'INTERNAL'


HTTP_STATUS_BY_KIND: Dict[ErrorKind, int] = {
    ErrorKind.AUTH: 401,
    ErrorKind.VALIDATION: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CONFLICT: 409,
    ErrorKind.INTERNAL: 500,
}

VALIDATION_ERROR_MESSAGE = 'Error de validación de datos'
INTERNAL_ERROR_MESSAGE = 'Error interno del servidor'


class ServiceError(Exception):
    """
    Base class for all errors raised on purpose by the services.

    Operational errors are expected conditions whose message is safe to return
    to the caller. Non-operational errors are bugs or infrastructure failures:
    their message is logged but the client only sees a generic message.
    """

    kind: ErrorKind = ErrorKind.INTERNAL
    default_message: str = INTERNAL_ERROR_MESSAGE

    def __init__(self, message: Optional[str] = None, is_operational: bool = True) -> None:
        self.message = message or self.default_message
        self.is_operational = is_operational
        super().__init__(self.message)

    @property
    def status_code(self) -> int:
        return HTTP_STATUS_BY_KIND[self.kind]

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for logging."""
        return {
            'kind': self.kind.value,
            'message': self.message,
            'status_code': self.status_code,
            'is_operational': self.is_operational,
        }


class UnauthorizedError(ServiceError):
    """Raised when the caller could not be authenticated."""

    kind = ErrorKind.AUTH
    default_message = 'No autenticado'


class RequestValidationError(ServiceError):
    """Raised when request input does not satisfy its schema."""

    kind = ErrorKind.VALIDATION
    default_message = VALIDATION_ERROR_MESSAGE

    def __init__(self, message: Optional[str] = None, errors: Optional[List[Dict[str, str]]] = None) -> None:
        super().__init__(message)
        self.errors = errors or []

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data['errors'] = self.errors
        return data


class NotFoundError(ServiceError):
    """Raised when a requested resource does not exist."""

    kind = ErrorKind.NOT_FOUND
    default_message = 'Recurso no encontrado'


class ConflictError(ServiceError):
    """Raised when a write conflicts with the current state of a resource."""

    kind = ErrorKind.CONFLICT
    default_message = 'Conflicto con el estado actual del recurso'


class InternalError(ServiceError):
    """Raised for unexpected server-side failures."""

    kind = ErrorKind.INTERNAL
    default_message = INTERNAL_ERROR_MESSAGE

    def __init__(self, message: Optional[str] = None, is_operational: bool = False) -> None:
        super().__init__(message, is_operational=is_operational)


def classify_error(error: BaseException) -> ServiceError:
    """Map any exception onto the taxonomy; unknown exceptions become non-operational internal errors."""
    if isinstance(error, ServiceError):
        return error
    return InternalError(str(error) or error.__class__.__name__)
