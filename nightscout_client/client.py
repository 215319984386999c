"""
Nightscout client facade: owns the site configuration and credentials and
hands out query builders.
"""
from __future__ import annotations

from typing import Any, Optional, Sequence, Type, TypeVar

import httpx
from pydantic import BaseModel

from nightscout_client import endpoints
from nightscout_client.auth import Credentials
from nightscout_client.decoding import decode_list, decode_one
from nightscout_client.endpoints import Endpoint
from nightscout_client.errors import ConfigurationError
from nightscout_client.query import (
    DeviceStatusQuery,
    EntriesQuery,
    PropertiesQuery,
    TreatmentsQuery,
)
from nightscout_client.settings import DEFAULT_TIMEOUT, ClientConfig, load_env_settings
from nightscout_client.transport import Transport
from nightscout_models import (
    DeviceStatus,
    MbgEntry,
    ProfileSet,
    ServerStatus,
    SgvEntry,
    Treatment,
)

ModelT = TypeVar("ModelT", bound=BaseModel)


class NightscoutClient:
    """
    Typed client for a Nightscout site.

    Pass ``api_secret`` for the legacy hashed-secret header or ``token`` for
    bearer token auth; passing neither gives unauthenticated access to
    public sites. The client is immutable once built and can be shared
    between concurrent tasks.

    Example::

        client = NightscoutClient("https://ns.example.com", token="reader-abc")
        readings = await client.sgv().limit(5).device("xdrip").fetch()
        props = await client.properties().only(PropertyName.IOB, PropertyName.COB).fetch()
    """

    def __init__(
        self,
        base_url: str,
        *,
        api_secret: Optional[str] = None,
        token: Optional[str] = None,
        credentials: Optional[Credentials] = None,
        timeout: httpx.Timeout = DEFAULT_TIMEOUT,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        config = ClientConfig(base_url=base_url, timeout=timeout)
        if credentials is None:
            credentials = Credentials.resolve(api_secret=api_secret, token=token)
        elif api_secret or token:
            raise ConfigurationError("Pass either credentials or api_secret/token, not both")
        self._transport = Transport(config, credentials, http_client=http_client)

    @classmethod
    def from_env(cls, **kwargs: Any) -> "NightscoutClient":
        """Build a client from NIGHTSCOUT_URL, NIGHTSCOUT_API_SECRET and NIGHTSCOUT_TOKEN."""
        settings = load_env_settings()
        return cls(settings.base_url, api_secret=settings.api_secret, token=settings.token, **kwargs)

    @property
    def config(self) -> ClientConfig:
        return self._transport.config

    @property
    def credentials(self) -> Credentials:
        return self._transport.credentials

    @property
    def base_url(self) -> str:
        return self.config.base_url

    def __repr__(self) -> str:
        return f"NightscoutClient(base_url={self.base_url!r}, auth={self.credentials.scheme.value})"

    def _with_credentials(self, credentials: Credentials) -> "NightscoutClient":
        return type(self)(
            self.base_url,
            credentials=credentials,
            timeout=self.config.timeout,
            http_client=self._transport.http_client,
        )

    def with_secret(self, api_secret: str) -> "NightscoutClient":
        """Copy of this client that authenticates with the legacy hashed secret."""
        return self._with_credentials(Credentials.legacy_secret(api_secret))

    def with_token(self, token: str) -> "NightscoutClient":
        """Copy of this client that authenticates with an access token."""
        return self._with_credentials(Credentials.token(token))

    # Query builders

    def sgv(self) -> EntriesQuery[SgvEntry]:
        return EntriesQuery(self._transport, endpoints.SGV, SgvEntry)

    def mbg(self) -> EntriesQuery[MbgEntry]:
        return EntriesQuery(self._transport, endpoints.MBG, MbgEntry)

    def treatments(self) -> TreatmentsQuery:
        return TreatmentsQuery(self._transport, endpoints.TREATMENTS, Treatment)

    def devicestatus(self) -> DeviceStatusQuery:
        return DeviceStatusQuery(self._transport, endpoints.DEVICESTATUS, DeviceStatus)

    def properties(self) -> PropertiesQuery:
        return PropertiesQuery(self._transport)

    # Direct fetches

    async def profiles(self) -> list[ProfileSet]:
        payload = await self._transport.request("GET", endpoints.PROFILE.path)
        return decode_list(endpoints.PROFILE.path, ProfileSet, payload)

    async def status(self) -> ServerStatus:
        payload = await self._transport.request("GET", endpoints.STATUS.path)
        return decode_one(endpoints.STATUS.path, ServerStatus, payload)

    # Uploads

    async def create_treatments(self, treatments: Sequence[Treatment]) -> list[Treatment]:
        """Upload treatments in one POST. The body is always a JSON array."""
        return await self._create(endpoints.TREATMENTS, Treatment, treatments)

    async def create_sgv_entries(self, entries: Sequence[SgvEntry]) -> list[SgvEntry]:
        return await self._create(endpoints.ENTRIES, SgvEntry, entries)

    async def create_devicestatus(self, statuses: Sequence[DeviceStatus]) -> list[DeviceStatus]:
        return await self._create(endpoints.DEVICESTATUS, DeviceStatus, statuses)

    async def _create(self, endpoint: Endpoint, model: Type[ModelT], items: Sequence[ModelT]) -> list[ModelT]:
        if isinstance(items, BaseModel):
            items = [items]
        body = [item.model_dump(mode="json", by_alias=True, exclude_none=True) for item in items]
        payload = await self._transport.request("POST", endpoint.path, json_data=body)
        # Some Nightscout versions only acknowledge the upload instead of echoing it.
        if isinstance(payload, list) and payload:
            return decode_list(endpoint.path, model, payload)
        return list(items)
