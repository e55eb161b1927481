"""
Blog API — Request Validation
==============================

What:  Presence, id-consistency and schema checks for incoming payloads.
When:  Called by the services before any store call, so an invalid request
       never touches the database.
How:   Every check raises ValidationError on the first failure; the global
       handler logs it once and turns it into one 400 response.
"""

import uuid
from typing import Any, Dict, Iterable, Optional, Type, TypeVar

import pydantic
from pydantic import BaseModel

from blog_api.exceptions import ValidationError

SchemaT = TypeVar("SchemaT", bound=BaseModel)


def require_fields(payload: Dict[str, Any], fields: Iterable[str]) -> None:
    """Raise on the first name in `fields` that is absent from `payload`."""
    for field in fields:
        if field not in payload:
            message = f"Missing {field} in request body"
            raise ValidationError(message=message, field=field)


def require_matching_id(path_id: Optional[str], body_id: Any) -> None:
    """Raise unless the path id and the body id are both present and equal."""
    if not (path_id and body_id and path_id == body_id):
        message = f"Request path id {path_id} and request body id {body_id} must match"
        raise ValidationError(
            message=message,
            field="id",
            context={"path_id": path_id, "body_id": body_id},
        )


def parse_record_id(raw: Any) -> Optional[uuid.UUID]:
    """
    Convert a client-supplied id to a UUID.

    Returns None for anything that is not a well-formed UUID string; callers
    decide whether that means 404 (path ids) or 400 (references).
    """
    if isinstance(raw, uuid.UUID):
        return raw
    if not isinstance(raw, str):
        return None
    try:
        return uuid.UUID(raw)
    except ValueError:
        return None


def validate_payload(schema: Type[SchemaT], payload: Dict[str, Any]) -> SchemaT:
    """
    Build `schema` from `payload`, reporting the first problem as a ValidationError.

    Pydantic collects every error; only the first is reported so the client
    sees one message, the same way require_fields behaves.
    """
    try:
        return schema.model_validate(payload)
    except pydantic.ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ())) or None
        message = f"Invalid {field} in request body: {first.get('msg')}"
        raise ValidationError(message=message, field=field)
