"""Request body validation that reports errors in the API's 400 format."""

from collections.abc import Iterable, Sequence
from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from core.exceptions import ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)

_LOCATIONS = frozenset({"body", "query", "path", "header", "cookie"})


def format_errors(
    errors: Iterable[dict[str, Any]], location: str | None = None
) -> list[dict[str, Any]]:
    """Convert pydantic/FastAPI error dicts to ``{path, message, location, type}`` items.

    FastAPI prefixes ``loc`` with the request part (``("body", "email")``);
    errors from a bare model validation carry the location separately.
    """
    formatted = []
    for error in errors:
        loc: Sequence[Any] = error.get("loc", ())
        where = location
        if loc and loc[0] in _LOCATIONS:
            where, loc = loc[0], loc[1:]
        formatted.append(
            {
                "path": ".".join(str(part) for part in loc),
                "message": error.get("msg", ""),
                "location": where or "body",
                "type": error.get("type", "value_error"),
            }
        )
    return formatted


def parse_body(model: type[ModelT], payload: Any) -> ModelT:
    """Validate a raw JSON body against a schema, raising the API ValidationError."""
    try:
        return model.model_validate(payload)
    except PydanticValidationError as e:
        raise ValidationError(format_errors(e.errors(), location="body")) from e
