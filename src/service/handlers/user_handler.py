"""
User API - Lambda handler for ``/user``.

Routes:
    GET    /user          list users (page, pageSize)
    GET    /user/{id}     get one user
    POST   /user          register a user profile
    PUT    /user/{id}     partially update a user
    DELETE /user/{id}     soft delete a user
"""

from typing import Any, Dict

from aws_lambda_powertools.logging import correlation_paths
from aws_lambda_powertools.utilities.data_classes import APIGatewayProxyEvent
from aws_lambda_powertools.utilities.typing import LambdaContext

from service.dal.sql_connection import get_sql_connection_manager
from service.handlers.utils.dispatcher import Route, RouteTable, dispatch_request
from service.handlers.utils.observability import logger, metrics, tracer
from service.handlers.utils.responses import created_response, success_response
from service.handlers.utils.validation import (
    parse_json_body,
    parse_or_raise,
    path_parameters,
    query_parameters,
    validate_path_params,
    validate_query_params,
)
from service.logic.user_service import UserService
from service.models.input import CreateUserRequest, PaginationParams, UpdateUserRequest, UserIdPathParams
from service.security.auth import UserClaims


def get_user_service() -> UserService:
    return UserService(get_sql_connection_manager())


def list_users(event: APIGatewayProxyEvent, claims: UserClaims) -> Dict[str, Any]:
    pagination = validate_query_params(PaginationParams, query_parameters(event))
    return success_response(get_user_service().list_users(pagination), 'Usuarios obtenidos exitosamente')


def get_user(event: APIGatewayProxyEvent, claims: UserClaims) -> Dict[str, Any]:
    path = validate_path_params(UserIdPathParams, path_parameters(event))
    return success_response(get_user_service().get_user(path.id), 'Usuario obtenido exitosamente')


def create_user(event: APIGatewayProxyEvent, claims: UserClaims) -> Dict[str, Any]:
    request = parse_or_raise(CreateUserRequest, parse_json_body(event))
    return created_response(get_user_service().create_user(request), 'Usuario creado exitosamente')


def update_user(event: APIGatewayProxyEvent, claims: UserClaims) -> Dict[str, Any]:
    path = validate_path_params(UserIdPathParams, path_parameters(event))
    request = parse_or_raise(UpdateUserRequest, parse_json_body(event))
    return success_response(get_user_service().update_user(path.id, request), 'Usuario actualizado exitosamente')


def delete_user(event: APIGatewayProxyEvent, claims: UserClaims) -> Dict[str, Any]:
    path = validate_path_params(UserIdPathParams, path_parameters(event))
    get_user_service().delete_user(path.id)
    return success_response({'deleted': True}, 'Usuario eliminado exitosamente')


ROUTES = RouteTable([
    Route('get', False, list_users, 'GET /user - Listar usuarios'),
    Route('get', True, get_user, 'GET /user/{id} - Obtener usuario'),
    Route('post', False, create_user, 'POST /user - Crear usuario'),
    Route('put', True, update_user, 'PUT /user/{id} - Actualizar usuario'),
    Route('delete', True, delete_user, 'DELETE /user/{id} - Eliminar usuario'),
])


@tracer.capture_lambda_handler
@logger.inject_lambda_context(correlation_id_path=correlation_paths.API_GATEWAY_REST)
@metrics.log_metrics(capture_cold_start_metric=True)
def lambda_handler(event: Dict[str, Any], context: LambdaContext) -> Dict[str, Any]:
    return dispatch_request(event, context, ROUTES, connection=get_sql_connection_manager())
