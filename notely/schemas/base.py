"""
Base Schemas.

Shared configuration and envelopes for API request/response schemas.
Wire format is camelCase; request bodies also accept snake_case.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base for every API schema."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class MessageResponse(CamelModel):
    """Plain acknowledgment."""

    message: str = Field(description="Human-readable status message")


class ErrorResponse(BaseModel):
    """Standard error response."""

    message: str
