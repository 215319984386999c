"""
Client configuration: base URL validation and environment lookup.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Optional

import httpx

from nightscout_client.errors import ConfigurationError

NIGHTSCOUT_URL_ENV = "NIGHTSCOUT_URL"
NIGHTSCOUT_API_SECRET_ENV = "NIGHTSCOUT_API_SECRET"
NIGHTSCOUT_TOKEN_ENV = "NIGHTSCOUT_TOKEN"

DEFAULT_TIMEOUT = httpx.Timeout(30.0, connect=10.0)


def normalize_base_url(base_url: str) -> str:
    """Validate ``base_url`` and strip trailing slashes.

    Only absolute ``http``/``https`` URLs with a host are accepted. Query
    strings and fragments are rejected since request paths are appended to
    the base.
    """
    if not isinstance(base_url, str) or not base_url.strip():
        raise ConfigurationError("Nightscout base URL is empty")
    try:
        url = httpx.URL(base_url.strip())
    except (httpx.InvalidURL, TypeError) as exc:
        raise ConfigurationError(f"Invalid Nightscout base URL {base_url!r}: {exc}") from exc

    if url.scheme not in ("http", "https"):
        raise ConfigurationError(f"Nightscout base URL must use http or https: {base_url!r}")
    if not url.host:
        raise ConfigurationError(f"Nightscout base URL has no host: {base_url!r}")
    if url.query or url.fragment:
        raise ConfigurationError(f"Nightscout base URL must not carry a query or fragment: {base_url!r}")

    return str(url).rstrip("/")


@dataclass(frozen=True)
class ClientConfig:
    """Immutable connection settings owned by a client."""

    base_url: str
    timeout: httpx.Timeout = field(default_factory=lambda: DEFAULT_TIMEOUT)

    def __post_init__(self) -> None:
        object.__setattr__(self, "base_url", normalize_base_url(self.base_url))

    def url_for(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"


@dataclass(frozen=True)
class EnvSettings:
    """Values read from the process environment."""

    base_url: Optional[str]
    api_secret: Optional[str]
    token: Optional[str]


def load_env_settings() -> EnvSettings:
    base_url = os.getenv(NIGHTSCOUT_URL_ENV)
    if not base_url:
        raise ConfigurationError(f"{NIGHTSCOUT_URL_ENV} is not set")
    return EnvSettings(
        base_url=base_url,
        api_secret=os.getenv(NIGHTSCOUT_API_SECRET_ENV) or None,
        token=os.getenv(NIGHTSCOUT_TOKEN_ENV) or None,
    )
