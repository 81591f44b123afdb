"""
Image upload API - Lambda handler for ``/image``.

``GET /image?file=<name>`` returns a pre-signed S3 PUT URL valid for 24 hours.
This function owns no database connection.
"""

from functools import lru_cache
from typing import Any, Dict

import boto3
from aws_lambda_powertools.logging import correlation_paths
from aws_lambda_powertools.utilities.data_classes import APIGatewayProxyEvent
from aws_lambda_powertools.utilities.typing import LambdaContext
from botocore.config import Config

from service.handlers.models.env_vars import get_image_env_vars
from service.handlers.utils.dispatcher import Route, RouteTable, dispatch_request
from service.handlers.utils.observability import logger, metrics, tracer
from service.handlers.utils.responses import success_response
from service.handlers.utils.validation import query_parameters, validate_query_params
from service.logic.image_service import ImageUploadService
from service.models.input import ImageUploadParams
from service.security.auth import UserClaims


@lru_cache(maxsize=1)
def get_s3_client() -> Any:
    settings = get_image_env_vars()
    return boto3.client('s3', region_name=settings.AWS_REGION, config=Config(signature_version='s3v4'))


def get_image_service() -> ImageUploadService:
    return ImageUploadService(get_s3_client(), get_image_env_vars().BUCKET_NAME)


def get_upload_url(event: APIGatewayProxyEvent, claims: UserClaims) -> Dict[str, Any]:
    params = validate_query_params(ImageUploadParams, query_parameters(event), required=True)
    upload = get_image_service().create_upload_url(params.file)
    return success_response(upload, 'URL firmada generada correctamente')


ROUTES = RouteTable([
    Route('get', False, get_upload_url, 'GET /image?file={nombre} - Generar URL firmada de subida'),
])


@tracer.capture_lambda_handler
@logger.inject_lambda_context(correlation_id_path=correlation_paths.API_GATEWAY_REST)
@metrics.log_metrics(capture_cold_start_metric=True)
def lambda_handler(event: Dict[str, Any], context: LambdaContext) -> Dict[str, Any]:
    return dispatch_request(event, context, ROUTES)
