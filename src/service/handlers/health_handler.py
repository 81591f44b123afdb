"""
Health check - Lambda handler for ``/health``.

Unauthenticated liveness probe. It touches no database so that a store
outage does not take the probe down with it.
"""

from datetime import datetime, timezone
from typing import Any, Dict

from aws_lambda_powertools.logging import correlation_paths
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext

from service.handlers.models.env_vars import get_service_env_vars
from service.handlers.utils.observability import logger, metrics, tracer
from service.handlers.utils.responses import error_response, success_response
from service.models.output import HealthCheckOutput

HEALTHY = 'healthy'


def build_health_report() -> Dict[str, Any]:
    settings = get_service_env_vars()
    return HealthCheckOutput(
        service=settings.POWERTOOLS_SERVICE_NAME,
        status=HEALTHY,
        version=settings.APP_VERSION,
        environment=settings.ENVIRONMENT,
        timestamp=datetime.now(timezone.utc),
    ).to_response()


@tracer.capture_lambda_handler
@logger.inject_lambda_context(correlation_id_path=correlation_paths.API_GATEWAY_REST)
@metrics.log_metrics(capture_cold_start_metric=True)
def lambda_handler(event: Dict[str, Any], context: LambdaContext) -> Dict[str, Any]:
    metrics.add_metric(name='HealthCheckRequestCount', unit=MetricUnit.Count, value=1)
    try:
        report = build_health_report()
    except Exception as exc:
        logger.exception('Health check failed with unexpected error')
        return error_response(exc)

    logger.info('Health check completed', extra={'status': report['status']})
    return success_response(report, 'Servicio operativo')
