"""Strict decoding of JSON payloads into the API models."""
from __future__ import annotations

from functools import lru_cache
from typing import Any, Type, TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError

from nightscout_client.errors import DecodeError

ModelT = TypeVar("ModelT", bound=BaseModel)


def describe_validation_error(error: ValidationError) -> str:
    parts = []
    for item in error.errors():
        location = ".".join(str(part) for part in item.get("loc", ())) or "<root>"
        parts.append(f"{location}: {item.get('msg')}")
    return "; ".join(parts)


@lru_cache(maxsize=None)
def _list_adapter(model: Type[BaseModel]) -> TypeAdapter:
    return TypeAdapter(list[model])


def decode_list(endpoint: str, model: Type[ModelT], payload: Any) -> list[ModelT]:
    """Decode a homogeneous list. One bad element fails the whole batch."""
    if not isinstance(payload, list):
        raise DecodeError(endpoint, f"expected a JSON array, got {type(payload).__name__}")
    try:
        return _list_adapter(model).validate_python(payload)
    except ValidationError as e:
        raise DecodeError(endpoint, describe_validation_error(e)) from e


def decode_one(endpoint: str, model: Type[ModelT], payload: Any) -> ModelT:
    if not isinstance(payload, dict):
        raise DecodeError(endpoint, f"expected a JSON object, got {type(payload).__name__}")
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        raise DecodeError(endpoint, describe_validation_error(e)) from e
