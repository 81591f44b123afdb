"""
Health check Lambda Function - Entry point for the /health API.

Delegates to ``service.handlers.health_handler``, which reports service status.
"""

import os
import sys
from typing import Any, Dict

# Add the service module to the Python path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from aws_lambda_powertools.utilities.typing import LambdaContext
from service.handlers.health_handler import lambda_handler as health_handler


def lambda_handler(event: Dict[str, Any], context: LambdaContext) -> Dict[str, Any]:
    return health_handler(event, context)
