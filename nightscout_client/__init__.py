"""Typed async client for the Nightscout API."""

from .auth import AuthScheme, Credentials
from .client import NightscoutClient
from .errors import (
    ApiError,
    AuthenticationError,
    ConfigurationError,
    DecodeError,
    NetworkError,
    NightscoutError,
    NotFoundError,
    QueryValidationError,
)
from .frames import entries_to_frame
from .properties import decode_properties
from .query import (
    DeviceStatusQuery,
    EntriesQuery,
    PropertiesQuery,
    QueryDescriptor,
    TreatmentsQuery,
)
from .settings import ClientConfig

__all__ = [
    "ApiError",
    "AuthScheme",
    "AuthenticationError",
    "ClientConfig",
    "ConfigurationError",
    "Credentials",
    "DecodeError",
    "DeviceStatusQuery",
    "EntriesQuery",
    "NetworkError",
    "NightscoutClient",
    "NightscoutError",
    "NotFoundError",
    "PropertiesQuery",
    "QueryDescriptor",
    "QueryValidationError",
    "TreatmentsQuery",
    "decode_properties",
    "entries_to_frame",
]
