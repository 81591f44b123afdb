"""
Request boundary shared by every resource Lambda.

``dispatch_request`` runs the fixed pipeline: log start, answer CORS
preflight, authenticate, ensure the store connection, pick the route by HTTP
method and presence of path parameters, invoke it and log completion. Any
exception raised along the way is converted to an error envelope here and
nowhere else.
"""

import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.data_classes import APIGatewayProxyEvent
from aws_lambda_powertools.utilities.typing import LambdaContext

from service.dal import ConnectionManager
from service.handlers.utils.errors import classify_error
from service.handlers.utils.observability import logger, metrics, tracer
from service.handlers.utils.responses import error_response, preflight_response, route_not_found_response
from service.security.auth import AuthMiddleware, UserClaims

RouteHandler = Callable[[APIGatewayProxyEvent, UserClaims], Dict[str, Any]]


@dataclass(frozen=True)
class Route:
    method: str
    requires_path_params: bool
    handler: RouteHandler
    description: str


class RouteTable:
    """Ordered routes; the first route matching method and path-parameter presence wins."""

    def __init__(self, routes: Sequence[Route]) -> None:
        self.routes: Tuple[Route, ...] = tuple(routes)
        self._warn_shadowed()

    def match(self, method: str, has_path_params: bool) -> Optional[Route]:
        method = method.lower()
        for route in self.routes:
            if route.method.lower() == method and route.requires_path_params == has_path_params:
                return route
        return None

    @property
    def descriptions(self) -> List[str]:
        return [route.description for route in self.routes]

    def _warn_shadowed(self) -> None:
        seen = set()
        for route in self.routes:
            key = (route.method.lower(), route.requires_path_params)
            if key in seen:
                logger.warning('Route shadowed by an earlier route and never reachable', extra={
                    'method': route.method,
                    'requires_path_params': route.requires_path_params,
                    'description': route.description,
                })
            seen.add(key)


def has_path_params(event: APIGatewayProxyEvent) -> bool:
    return event.raw_event.get('pathParameters') is not None


@tracer.capture_method
def dispatch_request(
    event: Dict[str, Any],
    context: LambdaContext,
    routes: RouteTable,
    connection: Optional[ConnectionManager] = None,
    authenticator: Callable[[APIGatewayProxyEvent], UserClaims] = AuthMiddleware.authenticate,
) -> Dict[str, Any]:
    """
    Handle one API Gateway proxy request.

    Args:
        event: Raw API Gateway REST proxy event
        context: Lambda context object
        routes: Route table of the resource
        connection: Store connection to ensure before routing, None for store-less services
        authenticator: Callable returning the caller's claims or raising UnauthorizedError

    Returns:
        API Gateway proxy response; never raises
    """
    request = APIGatewayProxyEvent(event)
    method = (event.get('httpMethod') or '').upper()
    path = event.get('path') or ''
    request_id = getattr(context, 'aws_request_id', None)
    started = time.perf_counter()
    claims: Optional[UserClaims] = None

    metrics.add_metric(name='RequestCount', unit=MetricUnit.Count, value=1)
    logger.info('Request started', extra={
        'request_id': request_id,
        'method': method,
        'path': path,
        'has_path_params': has_path_params(request),
    })

    try:
        if method == 'OPTIONS':
            return preflight_response()

        claims = authenticator(request)

        if connection is not None:
            connection.ensure_connection()

        route = routes.match(method, has_path_params(request))
        if route is None:
            logger.warning('Route not found', extra={'method': method, 'path': path})
            return route_not_found_response(path, method, routes.descriptions)

        logger.debug('Route matched', extra={'route': route.description})
        tracer.put_annotation(key='route', value=route.description)
        response = route.handler(request, claims)

        metrics.add_metric(name='RequestSuccess', unit=MetricUnit.Count, value=1)
        logger.info('Request completed', extra={
            'request_id': request_id,
            'status_code': response['statusCode'],
            'duration_ms': _elapsed_ms(started),
            'user_id_prefix': claims.log_id,
        })
        return response
    except Exception as exc:
        return _handle_error(exc, request_id, started, claims)


def _handle_error(
    error: Exception,
    request_id: Optional[str],
    started: float,
    claims: Optional[UserClaims],
) -> Dict[str, Any]:
    service_error = classify_error(error)
    metrics.add_metric(name='RequestError', unit=MetricUnit.Count, value=1)
    details = {
        'request_id': request_id,
        'duration_ms': _elapsed_ms(started),
        'error_kind': service_error.kind.value,
        'status_code': service_error.status_code,
    }
    if claims is not None:
        details['user_id_prefix'] = claims.log_id

    if service_error.is_operational:
        logger.warning(f'Request failed: {service_error.message}', extra=details)
    else:
        logger.exception('Request failed with unexpected error', extra=details)
    return error_response(error)


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)
