"""
Service Models Package

This package contains the Pydantic models used throughout the service:
request input models, response output models and shared business limits.
"""

from .input import (
    CategoryListParams,
    CreateCategoryRequest,
    CreateDealRequest,
    CreateProductRequest,
    CreateUserRequest,
    ImageUploadParams,
    ObjectIdPathParams,
    PaginationParams,
    ProductListParams,
    UpdateCategoryRequest,
    UpdateDealRequest,
    UpdateProductRequest,
    UpdateUserRequest,
    UserIdPathParams,
)
from .output import HealthCheckOutput, PresignedUrlOutput, UserListOutput, UserOutput

__all__ = [
    # Input models
    "CreateProductRequest",
    "UpdateProductRequest",
    "CreateCategoryRequest",
    "UpdateCategoryRequest",
    "CreateDealRequest",
    "UpdateDealRequest",
    "CreateUserRequest",
    "UpdateUserRequest",
    "PaginationParams",
    "ProductListParams",
    "CategoryListParams",
    "ObjectIdPathParams",
    "UserIdPathParams",
    "ImageUploadParams",

    # Output models
    "UserOutput",
    "UserListOutput",
    "PresignedUrlOutput",
    "HealthCheckOutput",
]
