"""
Credential strategies for Nightscout requests.

Nightscout accepts two schemes: the legacy ``api-secret`` header carrying the
SHA-1 hex digest of the site's API secret, and access tokens sent as a bearer
``Authorization`` header. The scheme is chosen once when a client is built.
"""
from __future__ import annotations

import hashlib
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from nightscout_client.errors import ConfigurationError

API_SECRET_HEADER = "api-secret"
AUTHORIZATION_HEADER = "Authorization"


class AuthScheme(str, Enum):
    NONE = "none"
    LEGACY_SECRET = "legacy_secret"
    TOKEN = "token"


def hash_api_secret(secret: str) -> str:
    return hashlib.sha1(secret.encode("utf-8")).hexdigest()


@dataclass(frozen=True)
class Credentials:
    """Resolved authentication for a client. The header value is precomputed."""

    scheme: AuthScheme = AuthScheme.NONE
    header_value: Optional[str] = field(default=None, repr=False)

    @classmethod
    def none(cls) -> "Credentials":
        return cls()

    @classmethod
    def legacy_secret(cls, secret: str) -> "Credentials":
        if not secret:
            raise ConfigurationError("API secret must not be empty")
        return cls(AuthScheme.LEGACY_SECRET, hash_api_secret(secret))

    @classmethod
    def token(cls, token: str) -> "Credentials":
        if not token:
            raise ConfigurationError("Access token must not be empty")
        return cls(AuthScheme.TOKEN, token)

    @classmethod
    def resolve(cls, api_secret: Optional[str] = None, token: Optional[str] = None) -> "Credentials":
        """Pick the scheme from whichever credential was supplied."""
        api_secret = api_secret or None
        token = token or None
        if api_secret and token:
            raise ConfigurationError("Supply either an API secret or an access token, not both")
        if api_secret:
            return cls.legacy_secret(api_secret)
        if token:
            return cls.token(token)
        return cls.none()

    def headers(self) -> dict[str, str]:
        if self.scheme is AuthScheme.LEGACY_SECRET:
            return {API_SECRET_HEADER: self.header_value}
        if self.scheme is AuthScheme.TOKEN:
            return {AUTHORIZATION_HEADER: f"Bearer {self.header_value}"}
        return {}
