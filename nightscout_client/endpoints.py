"""Nightscout REST paths and their query conventions."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

PROPERTIES_PATH = "api/v2/properties"


@dataclass(frozen=True)
class Endpoint:
    """A collection path plus the document fields used for date and device filters."""

    name: str
    path: str
    date_field: Optional[str] = None
    device_field: Optional[str] = None


SGV = Endpoint("sgv", "api/v2/entries/sgv.json", date_field="dateString", device_field="device")
MBG = Endpoint("mbg", "api/v2/entries/mbg.json", date_field="dateString", device_field="device")
ENTRIES = Endpoint("entries", "api/v2/entries.json", date_field="dateString", device_field="device")
TREATMENTS = Endpoint("treatments", "api/v2/treatments.json", date_field="created_at", device_field="enteredBy")
DEVICESTATUS = Endpoint("devicestatus", "api/v2/devicestatus.json", date_field="created_at", device_field="device")
PROPERTIES = Endpoint("properties", f"{PROPERTIES_PATH}.json")
PROFILE = Endpoint("profile", "api/v2/profile.json")
STATUS = Endpoint("status", "api/v2/status.json")


def properties_path(names: list[str]) -> str:
    if not names:
        return PROPERTIES.path
    return f"{PROPERTIES_PATH}/{','.join(names)}"
