"""
AWS Lambda Handlers Module.

Each resource module (product, category, deal, image, user, health) declares
its route table and a ``lambda_handler`` decorated with the Powertools
logger, tracer and metrics. Requests flow:

1. Handler Layer (this package): authentication, routing, validation, envelopes
2. Logic Layer: business rules
3. Data Access Layer: MongoDB and PostgreSQL persistence
"""

__version__ = "1.0.0"

from service.handlers.utils.observability import logger, metrics, tracer

__all__ = [
    "logger",
    "tracer",
    "metrics",
]
