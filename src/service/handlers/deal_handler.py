"""
Deal API - Lambda handler for ``/deal``.

Only the listing is exposed for now and it returns an empty collection; deal
payloads are already modelled in ``CreateDealRequest``.
"""

from typing import Any, Dict

from aws_lambda_powertools.logging import correlation_paths
from aws_lambda_powertools.utilities.data_classes import APIGatewayProxyEvent
from aws_lambda_powertools.utilities.typing import LambdaContext

from service.dal.connection import get_connection_manager
from service.handlers.utils.dispatcher import Route, RouteTable, dispatch_request
from service.handlers.utils.observability import logger, metrics, tracer
from service.handlers.utils.responses import success_response
from service.security.auth import UserClaims

COMING_SOON_MESSAGE = 'Deal service - Coming soon'


def list_deals(event: APIGatewayProxyEvent, claims: UserClaims) -> Dict[str, Any]:
    return success_response([], COMING_SOON_MESSAGE)


ROUTES = RouteTable([
    Route('get', False, list_deals, 'GET /deal - Listar ofertas'),
])


@tracer.capture_lambda_handler
@logger.inject_lambda_context(correlation_id_path=correlation_paths.API_GATEWAY_REST)
@metrics.log_metrics(capture_cold_start_metric=True)
def lambda_handler(event: Dict[str, Any], context: LambdaContext) -> Dict[str, Any]:
    return dispatch_request(event, context, ROUTES, connection=get_connection_manager())
