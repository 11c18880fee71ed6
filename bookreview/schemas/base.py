"""
Shared Schema Base

The web client speaks camelCase (reviewText, averageRating, isAdmin) while
Python code uses snake_case. CamelModel generates the camelCase aliases;
FastAPI serializes response models by alias, and request bodies are
accepted in either spelling.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """BaseModel with camelCase aliases, readable from ORM objects."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class MessageResponse(CamelModel):
    """Plain confirmation body, e.g. after deleting a review."""

    message: str
