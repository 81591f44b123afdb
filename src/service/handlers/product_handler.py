"""
Product API - Lambda handler for ``/product``.

Routes:
    GET    /product          list products (page, pageSize, categoryId, isActive, minPrice, maxPrice)
    GET    /product/{id}     get one product
    POST   /product          create a product
    PUT    /product/{id}     partially update a product
    DELETE /product/{id}     delete a product
"""

from typing import Any, Dict

from aws_lambda_powertools.logging import correlation_paths
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.data_classes import APIGatewayProxyEvent
from aws_lambda_powertools.utilities.typing import LambdaContext

from service.dal.category_repository import CategoryRepository
from service.dal.connection import get_connection_manager
from service.dal.product_repository import ProductRepository
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
from service.logic.product_service import ProductService
from service.models.input import CreateProductRequest, ObjectIdPathParams, ProductListParams, UpdateProductRequest
from service.security.auth import UserClaims


def get_product_service() -> ProductService:
    database = get_connection_manager().database
    return ProductService(ProductRepository(database), CategoryRepository(database))


def list_products(event: APIGatewayProxyEvent, claims: UserClaims) -> Dict[str, Any]:
    params = validate_query_params(ProductListParams, query_parameters(event))
    products = get_product_service().list_products(params)
    return success_response(products, 'Productos obtenidos exitosamente')


def get_product(event: APIGatewayProxyEvent, claims: UserClaims) -> Dict[str, Any]:
    path = validate_path_params(ObjectIdPathParams, path_parameters(event))
    return success_response(get_product_service().get_product(path.id), 'Producto obtenido exitosamente')


def create_product(event: APIGatewayProxyEvent, claims: UserClaims) -> Dict[str, Any]:
    request = parse_or_raise(CreateProductRequest, parse_json_body(event))
    product = get_product_service().create_product(request)
    metrics.add_metric(name='ProductCreated', unit=MetricUnit.Count, value=1)
    return created_response(product, 'Producto creado exitosamente')


def update_product(event: APIGatewayProxyEvent, claims: UserClaims) -> Dict[str, Any]:
    path = validate_path_params(ObjectIdPathParams, path_parameters(event))
    request = parse_or_raise(UpdateProductRequest, parse_json_body(event))
    product = get_product_service().update_product(path.id, request)
    return success_response(product, 'Producto actualizado exitosamente')


def delete_product(event: APIGatewayProxyEvent, claims: UserClaims) -> Dict[str, Any]:
    path = validate_path_params(ObjectIdPathParams, path_parameters(event))
    get_product_service().delete_product(path.id)
    return success_response({'deleted': True}, 'Producto eliminado exitosamente')


ROUTES = RouteTable([
    Route('get', False, list_products, 'GET /product - Listar productos'),
    Route('get', True, get_product, 'GET /product/{id} - Obtener producto'),
    Route('post', False, create_product, 'POST /product - Crear producto'),
    Route('put', True, update_product, 'PUT /product/{id} - Actualizar producto'),
    Route('delete', True, delete_product, 'DELETE /product/{id} - Eliminar producto'),
])


@tracer.capture_lambda_handler
@logger.inject_lambda_context(correlation_id_path=correlation_paths.API_GATEWAY_REST)
@metrics.log_metrics(capture_cold_start_metric=True)
def lambda_handler(event: Dict[str, Any], context: LambdaContext) -> Dict[str, Any]:
    return dispatch_request(event, context, ROUTES, connection=get_connection_manager())
