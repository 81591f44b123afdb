"""
Input models for request validation using Pydantic.

Request bodies and query strings use camelCase on the wire; models expose
snake_case attributes and accept either spelling.
"""

import re
from datetime import datetime
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from service.models import constants

ObjectIdStr = Annotated[str, Field(
    pattern=constants.OBJECT_ID_PATTERN,
    description='24 character hexadecimal document id',
    examples=['65f1c0ffee0ddba11deadbee'],
)]

UrlStr = Annotated[str, Field(
    pattern=constants.URL_PATTERN,
    max_length=2048,
    description='Absolute http(s) URL',
    examples=['https://cdn.example.com/images/phone.png'],
)]


class ApiModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        allow_inf_nan=False,
    )

    def changes(self, by_alias: bool = True) -> dict:
        """Non-null fields the caller actually sent, keyed by wire name unless ``by_alias`` is False."""
        return self.model_dump(by_alias=by_alias, exclude_unset=True, exclude_none=True)


def _check_price(v: float | None) -> float | None:
    # We don't use Field(gt=0) because pydantic exports it incorrectly to OpenAPI doc
    if v is None:
        return v
    if v <= 0:
        raise ValueError('price must be greater than 0')
    if v > constants.PRODUCT_MAX_PRICE:
        raise ValueError(f'price cannot exceed {constants.PRODUCT_MAX_PRICE}')
    return round(v, 2)


# Products

class CreateProductRequest(ApiModel):
    """Request model for creating a new product."""

    name: Annotated[str, Field(
        min_length=constants.PRODUCT_NAME_MIN_LENGTH,
        max_length=constants.PRODUCT_NAME_MAX_LENGTH,
        description='Product display name',
        examples=['Wireless Mouse'],
    )]

    description: Annotated[str | None, Field(
        default=None,
        max_length=constants.PRODUCT_DESCRIPTION_MAX_LENGTH,
    )] = None

    price: Annotated[float, Field(description='Unit price', examples=[19.99])]

    category_id: ObjectIdStr | None = None

    image_url: UrlStr | None = None

    stock: Annotated[int, Field(default=0, ge=0, description='Units available')] = 0

    is_active: Annotated[bool, Field(default=True)] = True

    @field_validator('price')
    @classmethod
    def validate_price(cls, v: float) -> float:
        return _check_price(v)


class UpdateProductRequest(ApiModel):
    """Partial update: every field is optional."""

    name: Annotated[str | None, Field(
        default=None,
        min_length=constants.PRODUCT_NAME_MIN_LENGTH,
        max_length=constants.PRODUCT_NAME_MAX_LENGTH,
    )] = None
    description: Annotated[str | None, Field(default=None, max_length=constants.PRODUCT_DESCRIPTION_MAX_LENGTH)] = None
    price: float | None = None
    category_id: ObjectIdStr | None = None
    image_url: UrlStr | None = None
    stock: Annotated[int | None, Field(default=None, ge=0)] = None
    is_active: bool | None = None

    @field_validator('price')
    @classmethod
    def validate_price(cls, v: float | None) -> float | None:
        return _check_price(v)


# Categories

class CreateCategoryRequest(ApiModel):
    """Request model for creating a category, optionally nested under a parent."""

    name: Annotated[str, Field(
        min_length=constants.CATEGORY_NAME_MIN_LENGTH,
        max_length=constants.CATEGORY_NAME_MAX_LENGTH,
        examples=['Electronics'],
    )]
    description: Annotated[str | None, Field(default=None, max_length=constants.CATEGORY_DESCRIPTION_MAX_LENGTH)] = None
    parent_category_id: ObjectIdStr | None = None
    image_url: UrlStr | None = None
    display_order: Annotated[int, Field(default=0, ge=0)] = 0
    is_active: bool = True


class UpdateCategoryRequest(ApiModel):
    name: Annotated[str | None, Field(
        default=None,
        min_length=constants.CATEGORY_NAME_MIN_LENGTH,
        max_length=constants.CATEGORY_NAME_MAX_LENGTH,
    )] = None
    description: Annotated[str | None, Field(default=None, max_length=constants.CATEGORY_DESCRIPTION_MAX_LENGTH)] = None
    image_url: UrlStr | None = None
    display_order: Annotated[int | None, Field(default=None, ge=0)] = None
    is_active: bool | None = None


# Deals

class CreateDealRequest(ApiModel):
    """Request model for a discount applied to a product within a date range."""

    product_id: ObjectIdStr
    discount: Annotated[float, Field(
        ge=constants.DEAL_MIN_DISCOUNT,
        le=constants.DEAL_MAX_DISCOUNT,
        description='Discount percentage',
    )]
    start_date: datetime
    end_date: datetime
    is_active: bool = True

    @model_validator(mode='after')
    def validate_date_range(self) -> 'CreateDealRequest':
        if self.end_date <= self.start_date:
            raise ValueError('endDate must be after startDate')
        return self


class UpdateDealRequest(ApiModel):
    discount: Annotated[float | None, Field(
        default=None,
        ge=constants.DEAL_MIN_DISCOUNT,
        le=constants.DEAL_MAX_DISCOUNT,
    )] = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    is_active: bool | None = None

    @model_validator(mode='after')
    def validate_date_range(self) -> 'UpdateDealRequest':
        if self.start_date and self.end_date and self.end_date <= self.start_date:
            raise ValueError('endDate must be after startDate')
        return self


# Users

def _check_email(v: str | None) -> str | None:
    if v is None:
        return v
    if not re.match(constants.EMAIL_PATTERN, v):
        raise ValueError('Invalid email format')
    return v.lower()


class CreateUserRequest(ApiModel):
    """Request model for registering a user profile."""

    email: Annotated[str, Field(
        max_length=constants.USER_EMAIL_MAX_LENGTH,
        examples=['jane.doe@example.com'],
    )]
    first_name: Annotated[str, Field(min_length=1, max_length=constants.USER_NAME_MAX_LENGTH)]
    last_name: Annotated[str, Field(min_length=1, max_length=constants.USER_NAME_MAX_LENGTH)]

    @field_validator('email')
    @classmethod
    def validate_email_format(cls, v: str) -> str:
        return _check_email(v)


class UpdateUserRequest(ApiModel):
    email: Annotated[str | None, Field(default=None, max_length=constants.USER_EMAIL_MAX_LENGTH)] = None
    first_name: Annotated[str | None, Field(default=None, min_length=1, max_length=constants.USER_NAME_MAX_LENGTH)] = None
    last_name: Annotated[str | None, Field(default=None, min_length=1, max_length=constants.USER_NAME_MAX_LENGTH)] = None

    @field_validator('email')
    @classmethod
    def validate_email_format(cls, v: str | None) -> str | None:
        return _check_email(v)


# Query and path parameters

class PaginationParams(ApiModel):
    page: Annotated[int, Field(default=constants.DEFAULT_PAGE, ge=1)] = constants.DEFAULT_PAGE
    page_size: Annotated[int, Field(
        default=constants.DEFAULT_PAGE_SIZE,
        ge=1,
        le=constants.MAX_PAGE_SIZE,
    )] = constants.DEFAULT_PAGE_SIZE

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


class ProductListParams(PaginationParams):
    category_id: ObjectIdStr | None = None
    is_active: bool | None = None
    min_price: Annotated[float | None, Field(default=None, ge=0)] = None
    max_price: Annotated[float | None, Field(default=None, ge=0)] = None

    @model_validator(mode='after')
    def validate_price_range(self) -> 'ProductListParams':
        if self.min_price is not None and self.max_price is not None and self.min_price > self.max_price:
            raise ValueError('minPrice cannot be greater than maxPrice')
        return self


class CategoryListParams(PaginationParams):
    type: Literal['all', 'top'] = 'all'


class ObjectIdPathParams(ApiModel):
    id: ObjectIdStr


class UserIdPathParams(ApiModel):
    id: Annotated[int, Field(gt=0, description='Numeric user id')]


class ImageUploadParams(ApiModel):
    file: Annotated[str, Field(min_length=1, max_length=255, examples=['phone.png'])]

    @field_validator('file')
    @classmethod
    def validate_extension(cls, v: str) -> str:
        extension = v.rsplit('.', 1)[-1].lower() if '.' in v else ''
        if extension not in constants.ALLOWED_IMAGE_EXTENSIONS:
            raise ValueError(f'file extension must be one of {", ".join(constants.ALLOWED_IMAGE_EXTENSIONS)}')
        if '/' in v or '\\' in v:
            raise ValueError('file must not contain path separators')
        return v
