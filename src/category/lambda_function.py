"""
Category Lambda Function - Entry point for the /category API.

Delegates to ``service.handlers.category_handler``, which owns routing,
authentication and observability.
"""

import os
import sys
from typing import Any, Dict

# Add the service module to the Python path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from aws_lambda_powertools.utilities.typing import LambdaContext
from service.handlers.category_handler import lambda_handler as category_handler


def lambda_handler(event: Dict[str, Any], context: LambdaContext) -> Dict[str, Any]:
    return category_handler(event, context)
