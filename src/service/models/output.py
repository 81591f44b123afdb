"""
Output models for API responses using Pydantic.

Documents coming from the document store are returned as plain dictionaries
(see ``service.dal.documents``); the models here cover the relational user
records and the fixed-shape responses.
"""

from datetime import datetime
from typing import Annotated, List

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class OutputModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    def to_response(self) -> dict:
        return self.model_dump(mode='json', by_alias=True)


class UserOutput(OutputModel):
    """Public view of a user row; credentials and soft-delete markers are never exposed."""

    id: Annotated[int, Field(examples=[42])]
    email: Annotated[str, Field(examples=['jane.doe@example.com'])]
    first_name: str
    last_name: str
    created_at: datetime
    updated_at: datetime


class UserListOutput(OutputModel):
    users: List[UserOutput]
    total: Annotated[int, Field(ge=0)]
    page: Annotated[int, Field(ge=1)]
    page_size: Annotated[int, Field(ge=1)]


class PresignedUrlOutput(OutputModel):
    """Pre-signed S3 upload target for a product image."""

    file_name: Annotated[str, Field(
        description='Object key the client must upload to',
        examples=['0b9e0c0e-3f6f-4d55-9f0e-0d4f6f0b1c2a-phone.png'],
    )]
    url: Annotated[str, Field(description='Pre-signed PUT URL')]
    expires_in: Annotated[str, Field(examples=['24 hours'])]


class HealthCheckOutput(OutputModel):
    """Response model for health check endpoint."""

    service: Annotated[str, Field(
        description='Service name',
        examples=['catalog-services']
    )]

    status: Annotated[str, Field(
        description='Overall health status',
        examples=['healthy']
    )]

    version: Annotated[str, Field(examples=['1.0.0'])]

    environment: Annotated[str, Field(examples=['prod'])]

    timestamp: Annotated[datetime, Field(
        description='Timestamp of the health check'
    )]
