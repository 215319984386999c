"""Decoder registry for the properties endpoint."""
from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any, Dict, Optional

from pydantic import TypeAdapter, ValidationError

from nightscout_client.decoding import describe_validation_error
from nightscout_client.errors import DecodeError
from nightscout_models.properties import (
    BasalProperty,
    BgNowProperty,
    Bucket,
    CobProperty,
    DbSizeProperty,
    DeltaProperty,
    DirectionProperty,
    IobProperty,
    PropertiesResult,
    PropertyName,
    PumpProperty,
    RuntimeStateProperty,
    UpbatProperty,
)

Decoder = Callable[[Any], Any]


class PropertyDecoderRegistry:
    """Maps property names to the decoder for that property's payload."""

    def __init__(self) -> None:
        self._decoders: Dict[str, Decoder] = {}

    def register(self, name: PropertyName | str, decoder: Decoder) -> None:
        key = property_key(name)
        if key in self._decoders:
            raise ValueError(f"Decoder for property '{key}' already registered")
        self._decoders[key] = decoder

    def get(self, name: PropertyName | str) -> Optional[Decoder]:
        return self._decoders.get(property_key(name))

    def names(self) -> Iterable[str]:
        return self._decoders.keys()

    def decode(
        self,
        payload: Any,
        requested: Iterable[PropertyName | str] = (),
        endpoint: str = "properties",
    ) -> PropertiesResult:
        """Decode a properties response.

        Keys without a decoder are kept raw in ``extra``. When ``requested``
        is non-empty, keys outside it are ignored. A requested property the service
        left out stays ``None``.
        """
        if not isinstance(payload, dict):
            raise DecodeError(endpoint, f"expected a JSON object, got {type(payload).__name__}")

        wanted = {property_key(name) for name in requested}
        decoded: dict[str, Any] = {}
        raw: dict[str, Any] = {}
        for key, value in payload.items():
            if wanted and key not in wanted:
                continue
            decoder = self._decoders.get(key)
            if decoder is None:
                raw[key] = value
                continue
            try:
                decoded[key] = decoder(value)
            except ValidationError as e:
                raise DecodeError(endpoint, f"property '{key}': {describe_validation_error(e)}") from e
        return PropertiesResult(**decoded, extra=raw)


def property_key(name: PropertyName | str) -> str:
    return name.value if isinstance(name, PropertyName) else str(name).lower()


registry = PropertyDecoderRegistry()
registry.register(PropertyName.IOB, IobProperty.model_validate)
registry.register(PropertyName.COB, CobProperty.model_validate)
registry.register(PropertyName.PUMP, PumpProperty.model_validate)
registry.register(PropertyName.BASAL, BasalProperty.model_validate)
registry.register(PropertyName.BGNOW, BgNowProperty.model_validate)
registry.register(PropertyName.DELTA, DeltaProperty.model_validate)
registry.register(PropertyName.DIRECTION, DirectionProperty.model_validate)
registry.register(PropertyName.UPBAT, UpbatProperty.model_validate)
registry.register(PropertyName.DBSIZE, DbSizeProperty.model_validate)
registry.register(PropertyName.RUNTIMESTATE, RuntimeStateProperty.model_validate)
registry.register(PropertyName.BUCKETS, TypeAdapter(list[Bucket]).validate_python)


def decode_properties(payload: Any, requested: Iterable[PropertyName | str] = ()) -> PropertiesResult:
    return registry.decode(payload, requested)
