"""
Spacetime Backend: Memory Request/Response Schemas
===================================================

What:  Pydantic models defining the JSON contract of the /memories routes.
How:   FastAPI validates request bodies against MemoryWrite and serializes
       responses through MemoryResponse. Field names are snake_case in Python
       and camelCase on the wire (`coverUrl`, `isPublic`, `userId`,
       `createdAt`).
"""

import uuid
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base schema that reads and writes camelCase JSON keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class MemoryWrite(CamelModel):
    """
    Body of POST /memories and PUT /memories/{id}.

    PUT replaces all three fields, so an omitted `isPublic` makes the memory
    private again.

    `isPublic` is coerced by truthiness, the way the web client's form
    values arrive: null, false, 0 and "" are false; anything else,
    including "on" and "false", is true.
    """
    content: str = Field(description="Memory text")
    cover_url: str = Field(description="URL returned by POST /upload")
    is_public: bool = Field(default=False, description="Visible to other users by id")

    @field_validator("is_public", mode="before")
    @classmethod
    def coerce_is_public(cls, v: Any) -> bool:
        if v is None or isinstance(v, bool):
            return bool(v)
        if isinstance(v, (int, float)):
            return v == v and v != 0  # NaN is falsy
        if isinstance(v, str):
            return v != ""
        return True


class MemoryResponse(CamelModel):
    """A memory as returned by every /memories route."""
    id: uuid.UUID = Field(description="Memory identifier (UUID)")
    content: str = Field(description="Full text, or a 120 character excerpt in lists")
    cover_url: str = Field(description="Cover image or video URL")
    is_public: bool = Field(description="Visible to other users by id")
    user_id: uuid.UUID = Field(description="Owning user")
    created_at: datetime = Field(description="Creation time (UTC ISO 8601)")
