"""
Base Pydantic schemas and common types.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class BaseSchema(BaseModel):
    """
    Base schema with common configuration.

    Fields are declared in snake_case and exchanged in camelCase, which is
    what the dashboard sends and expects. Either spelling is accepted on
    input.
    """

    model_config = ConfigDict(
        from_attributes=True,  # Accept snapshots and ORM rows directly
        populate_by_name=True,
        use_enum_values=True,
        alias_generator=to_camel,
    )


class TimestampSchema(BaseSchema):
    """Schema mixin for the last-update timestamp."""
    last_update: Optional[datetime] = None


class ErrorResponse(BaseSchema):
    """Body returned for every dispatch error."""
    error: str
    message: str
    context: dict
