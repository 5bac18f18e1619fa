# chatroom/validation.py
from typing import Any, Literal

from pydantic import ValidationError as PydanticValidationError
from pydantic import field_validator
from sqlmodel import Field, SQLModel

from .errors import ValidationError
from .models import MessageKind

# client-facing aliases for the stored kinds
_KIND_ALIASES = {
    "public": MessageKind.PUBLIC.value,
    "private": MessageKind.PRIVATE.value,
}


def _strip(value: Any) -> Any:
    return value.strip() if isinstance(value, str) else value


class ParticipantIn(SQLModel):
    name: str = Field(min_length=1)

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, value: Any) -> Any:
        return _strip(value)


class MessageIn(SQLModel):
    to: str = Field(min_length=1)
    text: str = Field(min_length=1)
    kind: Literal["message", "private_message"]

    @field_validator("to", "text", mode="before")
    @classmethod
    def strip_text(cls, value: Any) -> Any:
        return _strip(value)

    @field_validator("kind", mode="before")
    @classmethod
    def normalize_kind(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = value.strip()
            return _KIND_ALIASES.get(value, value)
        return value


# where FastAPI found the value, not part of the field name
_REQUEST_SOURCES = ("body", "query", "path", "header")


def violations_from_errors(errors) -> list[dict[str, str]]:
    """Turn pydantic-style error dicts into ``{"field", "message"}`` entries."""
    violations = []
    for error in errors:
        loc = list(error.get("loc", ()))
        if error.get("type") == "json_invalid":
            loc = ["body"]
        elif len(loc) > 1 and loc[0] in _REQUEST_SOURCES:
            loc = loc[1:]
        field = ".".join(str(part) for part in loc) or "body"
        violations.append({"field": field, "message": error["msg"]})
    return violations


def _check(model: type[SQLModel], payload: Any):
    if not isinstance(payload, dict):
        raise ValidationError([{"field": "body", "message": "expected a JSON object"}])
    try:
        return model.model_validate(payload)
    except PydanticValidationError as exc:
        raise ValidationError(violations_from_errors(exc.errors())) from exc


def validate_participant(payload: Any) -> ParticipantIn:
    return _check(ParticipantIn, payload)


def validate_message(payload: Any) -> MessageIn:
    """Validate a client message; every violated field is reported at once."""
    return _check(MessageIn, payload)


def validate_limit(limit: int | None) -> int | None:
    if limit is not None and limit < 0:
        raise ValidationError([{"field": "limit", "message": "must be zero or a positive integer"}])
    return limit
