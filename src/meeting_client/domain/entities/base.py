"""Shared pydantic configuration for backend payloads."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Backend payloads use camelCase; Python code uses snake_case.

    Unknown fields are ignored so backend additions do not break the client.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )
