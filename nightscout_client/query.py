"""
Fluent query builders.

Each configuration call returns a new builder around a new ``QueryDescriptor``;
nothing is shared or mutated, so a partially configured builder can be reused
from several tasks. Requests are only sent by the terminal coroutines
(``fetch`` / ``latest``), which validate the descriptor first.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Generic, Optional, Type, TypeVar
from urllib.parse import quote

from pydantic import BaseModel

from nightscout_client import endpoints
from nightscout_client.decoding import decode_list
from nightscout_client.endpoints import Endpoint
from nightscout_client.errors import NotFoundError, QueryValidationError
from nightscout_client.properties import property_key
from nightscout_client.properties import registry as property_registry
from nightscout_client.transport import Transport
from nightscout_models import DeviceStatus, PropertiesResult, PropertyName, Treatment

ModelT = TypeVar("ModelT", bound=BaseModel)
BuilderT = TypeVar("BuilderT", bound="QueryBuilder")


def format_timestamp(value: datetime) -> str:
    """UTC ISO-8601 with millisecond precision, as Nightscout stores dates."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _find_params(field_name: str, values: frozenset[str]) -> list[tuple[str, str]]:
    ordered = sorted(values)
    if len(ordered) == 1:
        return [(f"find[{field_name}]", ordered[0])]
    return [(f"find[{field_name}][$in][]", value) for value in ordered]


@dataclass(frozen=True)
class QueryDescriptor:
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    limit: Optional[int] = None
    devices: frozenset[str] = field(default_factory=frozenset)
    event_types: frozenset[str] = field(default_factory=frozenset)
    properties: frozenset[str] = field(default_factory=frozenset)
    at: Optional[datetime] = None
    doc_id: Optional[str] = None

    def validate(self) -> None:
        if self.doc_id is not None:
            if not self.doc_id.strip():
                raise QueryValidationError("document id must not be empty")
            return
        if self.limit is not None and (isinstance(self.limit, bool) or not isinstance(self.limit, int)):
            raise QueryValidationError(f"limit must be an integer, got {self.limit!r}")
        if self.limit is not None and self.limit <= 0:
            raise QueryValidationError(f"limit must be positive, got {self.limit}")
        if self.start is not None and self.end is not None and _utc(self.end) < _utc(self.start):
            raise QueryValidationError(
                f"upper bound {format_timestamp(self.end)} is before lower bound {format_timestamp(self.start)}"
            )

    def to_params(self, endpoint: Endpoint) -> list[tuple[str, str]]:
        if self.doc_id is not None:
            return []
        params: list[tuple[str, str]] = []
        if self.limit is not None:
            params.append(("count", str(self.limit)))
        if endpoint.date_field:
            if self.start is not None:
                params.append((f"find[{endpoint.date_field}][$gte]", format_timestamp(self.start)))
            if self.end is not None:
                params.append((f"find[{endpoint.date_field}][$lte]", format_timestamp(self.end)))
        if self.devices and endpoint.device_field:
            params.extend(_find_params(endpoint.device_field, self.devices))
        if self.event_types:
            params.extend(_find_params("eventType", self.event_types))
        return params


def _utc(value: datetime) -> datetime:
    return value.replace(tzinfo=timezone.utc) if value.tzinfo is None else value


@dataclass(frozen=True)
class QueryBuilder(Generic[ModelT]):
    """Time range, limit and device filters shared by the list endpoints."""

    transport: Transport
    endpoint: Endpoint
    model: Type[ModelT]
    descriptor: QueryDescriptor = field(default_factory=QueryDescriptor)

    def _with(self: BuilderT, **changes: Any) -> BuilderT:
        return replace(self, descriptor=replace(self.descriptor, **changes))

    def since(self: BuilderT, start: datetime) -> BuilderT:
        return self._with(start=start)

    def until(self: BuilderT, end: datetime) -> BuilderT:
        return self._with(end=end)

    def between(self: BuilderT, start: datetime, end: datetime) -> BuilderT:
        return self._with(start=start, end=end)

    def limit(self: BuilderT, count: int) -> BuilderT:
        return self._with(limit=count)

    def device(self: BuilderT, *names: str) -> BuilderT:
        return self._with(devices=self.descriptor.devices | frozenset(names))

    def by_id(self: BuilderT, doc_id: str) -> BuilderT:
        """Look up one document by ``_id``. Filters and limit are not sent."""
        return self._with(doc_id=doc_id)

    @property
    def path(self) -> str:
        if self.descriptor.doc_id is None:
            return self.endpoint.path
        return f"{self.endpoint.path}/{quote(self.descriptor.doc_id, safe='')}"

    def params(self) -> list[tuple[str, str]]:
        """Validated query parameters for this builder."""
        self.descriptor.validate()
        return self.descriptor.to_params(self.endpoint)

    async def fetch(self) -> list[ModelT]:
        params = self.params()
        path = self.path
        payload = await self.transport.request("GET", path, params=params)
        return decode_list(path, self.model, payload)

    async def latest(self) -> ModelT:
        """Newest matching document. Any configured limit is replaced by 1."""
        items = await self._with(limit=1).fetch()
        if not items:
            raise NotFoundError(f"No {self.endpoint.name} found")
        return items[0]


class EntriesQuery(QueryBuilder[ModelT]):
    pass


class TreatmentsQuery(QueryBuilder[Treatment]):
    """Treatments. ``device()`` matches ``enteredBy``."""

    def event_type(self, *types: str) -> "TreatmentsQuery":
        return self._with(event_types=self.descriptor.event_types | frozenset(types))


class DeviceStatusQuery(QueryBuilder[DeviceStatus]):
    pass


@dataclass(frozen=True)
class PropertiesQuery:
    """Selects the property subset and optionally a point in time."""

    transport: Transport
    descriptor: QueryDescriptor = field(default_factory=QueryDescriptor)

    def only(self, *names: PropertyName | str) -> "PropertiesQuery":
        keys = frozenset(property_key(name) for name in names)
        return replace(self, descriptor=replace(self.descriptor, properties=self.descriptor.properties | keys))

    def at(self, when: datetime) -> "PropertiesQuery":
        return replace(self, descriptor=replace(self.descriptor, at=when))

    @property
    def path(self) -> str:
        return endpoints.properties_path(sorted(self.descriptor.properties))

    def params(self) -> list[tuple[str, str]]:
        self.descriptor.validate()
        if self.descriptor.at is None:
            return []
        return [("time", format_timestamp(self.descriptor.at))]

    async def fetch(self) -> PropertiesResult:
        params = self.params()
        path = self.path
        payload = await self.transport.request("GET", path, params=params)
        return property_registry.decode(payload, self.descriptor.properties, endpoint=path)

