"""
Category API - Lambda handler for ``/category``.

Handlers here validate with the return-style helpers and answer 400 on their
own instead of raising.
"""

from typing import Any, Dict

from aws_lambda_powertools.logging import correlation_paths
from aws_lambda_powertools.utilities.data_classes import APIGatewayProxyEvent
from aws_lambda_powertools.utilities.typing import LambdaContext

from service.dal.category_repository import CategoryRepository
from service.dal.connection import get_connection_manager
from service.dal.product_repository import ProductRepository
from service.handlers.utils.dispatcher import Route, RouteTable, dispatch_request
from service.handlers.utils.observability import logger, metrics, tracer
from service.handlers.utils.responses import created_response, success_response, validation_error_response
from service.handlers.utils.validation import (
    parse_json_body,
    path_parameters,
    query_parameters,
    validate,
    validate_or_response,
)
from service.logic.category_service import CategoryService
from service.models.input import (
    CategoryListParams,
    CreateCategoryRequest,
    ObjectIdPathParams,
    PaginationParams,
    UpdateCategoryRequest,
)
from service.security.auth import UserClaims


def get_category_service() -> CategoryService:
    database = get_connection_manager().database
    return CategoryService(CategoryRepository(database), ProductRepository(database))


def list_categories(event: APIGatewayProxyEvent, claims: UserClaims) -> Dict[str, Any]:
    result = validate(CategoryListParams, query_parameters(event) or {})
    if not result.is_valid:
        return validation_error_response(result.errors)

    categories = get_category_service().list_categories(result.data)
    if result.data.type == 'top':
        return success_response(categories, 'Categorías top obtenidas exitosamente')
    return success_response(categories, 'Categorías obtenidas exitosamente')


def get_category(event: APIGatewayProxyEvent, claims: UserClaims) -> Dict[str, Any]:
    invalid = validate_or_response(ObjectIdPathParams, path_parameters(event))
    if invalid:
        return invalid
    pagination = validate(PaginationParams, query_parameters(event) or {})
    if not pagination.is_valid:
        return validation_error_response(pagination.errors)

    category = get_category_service().get_category(path_parameters(event)['id'], pagination.data)
    return success_response(category, 'Categoría obtenida exitosamente')


def create_category(event: APIGatewayProxyEvent, claims: UserClaims) -> Dict[str, Any]:
    result = validate(CreateCategoryRequest, parse_json_body(event))
    if not result.is_valid:
        return validation_error_response(result.errors)
    return created_response(get_category_service().create_category(result.data), 'Categoría creada exitosamente')


def update_category(event: APIGatewayProxyEvent, claims: UserClaims) -> Dict[str, Any]:
    invalid = validate_or_response(ObjectIdPathParams, path_parameters(event))
    if invalid:
        return invalid
    result = validate(UpdateCategoryRequest, parse_json_body(event))
    if not result.is_valid:
        return validation_error_response(result.errors)

    category = get_category_service().update_category(path_parameters(event)['id'], result.data)
    return success_response(category, 'Categoría actualizada exitosamente')


def delete_category(event: APIGatewayProxyEvent, claims: UserClaims) -> Dict[str, Any]:
    invalid = validate_or_response(ObjectIdPathParams, path_parameters(event))
    if invalid:
        return invalid
    get_category_service().delete_category(path_parameters(event)['id'])
    return success_response({'deleted': True}, 'Categoría eliminada exitosamente')


ROUTES = RouteTable([
    Route('get', False, list_categories, 'GET /category - Listar categorías (type=top para destacadas)'),
    Route('get', True, get_category, 'GET /category/{id} - Obtener categoría con productos'),
    Route('post', False, create_category, 'POST /category - Crear categoría'),
    Route('put', True, update_category, 'PUT /category/{id} - Actualizar categoría'),
    Route('delete', True, delete_category, 'DELETE /category/{id} - Eliminar categoría'),
])


@tracer.capture_lambda_handler
@logger.inject_lambda_context(correlation_id_path=correlation_paths.API_GATEWAY_REST)
@metrics.log_metrics(capture_cold_start_metric=True)
def lambda_handler(event: Dict[str, Any], context: LambdaContext) -> Dict[str, Any]:
    return dispatch_request(event, context, ROUTES, connection=get_connection_manager())
