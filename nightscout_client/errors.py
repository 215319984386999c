"""
Error types raised by the Nightscout client.
"""
from __future__ import annotations

from typing import Any, Optional


class NightscoutError(Exception):
    """Base class for every error raised by this package."""


class ConfigurationError(NightscoutError, ValueError):
    """The client could not be constructed (bad base URL, conflicting credentials)."""


class QueryValidationError(NightscoutError, ValueError):
    """A query parameter is invalid. Raised before any request is sent."""


class NetworkError(NightscoutError):
    """The service could not be reached (connection, DNS, timeout)."""

    def __init__(self, message: str, original: Optional[Exception] = None):
        super().__init__(message)
        self.original = original


class ApiError(NightscoutError):
    """The service answered with a non-2xx status."""

    def __init__(self, status_code: int, body: str = "", url: Optional[str] = None):
        self.status_code = status_code
        self.body = body
        self.url = url
        super().__init__(f"Nightscout API error {status_code}: {body or 'no response body'}")


class AuthenticationError(ApiError):
    """The service rejected the credentials (HTTP 401)."""


class DecodeError(NightscoutError):
    """The response body did not match the expected shape."""

    def __init__(self, endpoint: str, detail: Any):
        self.endpoint = endpoint
        self.detail = detail
        super().__init__(f"Failed to decode response from {endpoint}: {detail}")


class NotFoundError(NightscoutError):
    """A single-result query returned nothing."""


__all__ = [
    "ApiError",
    "AuthenticationError",
    "ConfigurationError",
    "DecodeError",
    "NetworkError",
    "NightscoutError",
    "NotFoundError",
    "QueryValidationError",
]
