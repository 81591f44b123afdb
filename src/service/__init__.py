"""
Catalog Services Module.

This package contains the implementation shared by every Lambda function,
following a three-layer architecture:

- handlers: API handlers, request boundary and response envelopes
- logic: Business rules for products, categories, users and image uploads
- dal: MongoDB and PostgreSQL persistence
- models: Pydantic request and response models
- security: Cognito authentication and Secrets Manager access
"""

__version__ = "1.0.0"
__description__ = "Serverless product, category, deal, image and user APIs"

# Re-export commonly used classes for convenience
from service.handlers.utils.observability import logger, metrics, tracer
from service.models.input import CreateCategoryRequest, CreateProductRequest, CreateUserRequest
from service.models.output import UserOutput

__all__ = [
    "CreateProductRequest",
    "CreateCategoryRequest",
    "CreateUserRequest",
    "UserOutput",
    "logger",
    "tracer",
    "metrics",
]
