"""Nightscout API models."""

from .devicestatus import DeviceStatus
from .entries import MbgEntry, SgvEntry, Trend
from .profile import ProfileConfig, ProfileSet, ServerStatus, TimeSchedule
from .properties import (
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
    PumpData,
    PumpProperty,
    PumpReading,
    RuntimeStateProperty,
    UpbatProperty,
)
from .treatments import Treatment

__all__ = [
    "BasalProperty",
    "BgNowProperty",
    "Bucket",
    "CobProperty",
    "DbSizeProperty",
    "DeltaProperty",
    "DeviceStatus",
    "DirectionProperty",
    "IobProperty",
    "MbgEntry",
    "ProfileConfig",
    "ProfileSet",
    "PropertiesResult",
    "PropertyName",
    "PumpData",
    "PumpProperty",
    "PumpReading",
    "RuntimeStateProperty",
    "ServerStatus",
    "SgvEntry",
    "TimeSchedule",
    "Treatment",
    "Trend",
    "UpbatProperty",
]
