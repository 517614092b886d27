"""Input parsing shared by the lifecycle services."""
from __future__ import annotations

from typing import Any, Iterable, Mapping, Type, TypeVar
from uuid import UUID

from pydantic import BaseModel, ValidationError

from app.core.errors import InvalidArgumentError

ModelT = TypeVar("ModelT", bound=BaseModel)

# Transport prefixes dropped from error locations.
_LOCATION_PREFIXES = ("body", "query", "path")


def describe_validation_errors(errors: Iterable[Mapping[str, Any]]) -> str:
    parts = []
    for item in errors:
        location = ".".join(str(part) for part in item.get("loc", ()) if part not in _LOCATION_PREFIXES)
        parts.append(f"{location}: {item.get('msg')}" if location else str(item.get("msg")))
    return "; ".join(parts)


def validate_payload(model: Type[ModelT], data: Any) -> ModelT:
    """Validate ``data`` against ``model``, raising InvalidArgumentError on failure."""
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise InvalidArgumentError(describe_validation_errors(exc.errors())) from exc


def parse_uuid(value: str, *, label: str) -> UUID:
    try:
        return UUID(str(value))
    except (TypeError, ValueError) as exc:
        raise InvalidArgumentError(f"Invalid {label} ID format") from exc
