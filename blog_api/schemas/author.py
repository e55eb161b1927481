"""
Blog API — Author Schemas
==========================

What:  Request and response contracts for the /authors endpoints.
Why:   JSON uses camelCase (firstName, userName); Python code uses snake_case.
       Every field therefore declares its wire name as an alias, and
       populate_by_name lets services construct models by attribute name.
"""

import uuid
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from blog_api.models.author import Author


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class AuthorCreate(BaseModel):
    """Body of POST /authors (presence already checked by require_fields)."""
    first_name: str = Field(alias="firstName", max_length=100)
    last_name: str = Field(alias="lastName", max_length=100)
    user_name: str = Field(alias="userName", min_length=1, max_length=100)

    model_config = {"populate_by_name": True}


class AuthorUpdate(BaseModel):
    """
    Body of PUT /authors/{id}.

    Every field except `id` is optional; only the ones actually sent are
    applied (read them back with model_dump(exclude_unset=True)). Sending
    an explicit null is rejected rather than written to a NOT NULL column.
    """
    id: str
    first_name: Optional[str] = Field(default=None, alias="firstName", max_length=100)
    last_name: Optional[str] = Field(default=None, alias="lastName", max_length=100)
    user_name: Optional[str] = Field(default=None, alias="userName", min_length=1, max_length=100)

    model_config = {"populate_by_name": True}

    @field_validator("first_name", "last_name", "user_name")
    @classmethod
    def reject_null(cls, v: Optional[str]) -> str:
        if v is None:
            raise ValueError("must not be null")
        return v


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class AuthorResponse(BaseModel):
    """
    What:  Public representation of an author.
    Who:   Returned by POST /authors (201) and PUT /authors/{id} (200).

    `name` is the display name ("<firstName> <lastName>"); the separate
    first/last fields are not exposed.
    """
    id: uuid.UUID = Field(description="Unique author identifier (UUID)")
    name: str = Field(description="Display name: first and last name joined by a space")
    user_name: str = Field(alias="userName", description="Unique public handle")

    model_config = {"populate_by_name": True}

    @classmethod
    def from_model(cls, author: Author) -> "AuthorResponse":
        return cls(id=author.id, name=author.full_name, user_name=author.user_name)
