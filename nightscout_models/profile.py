"""
Therapy profile and server status models.
"""
from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class TimeSchedule(BaseModel):
    """
    One entry of a time-of-day schedule (basal, ISF, carb ratio, targets).
    """
    model_config = ConfigDict(populate_by_name=True)

    time: str = Field(description="Start time, HH:MM")
    value: float = Field(description="Value from this time on")
    time_as_seconds: Optional[int] = Field(default=None, alias="timeAsSeconds", description="Start, seconds after midnight")


class ProfileConfig(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    dia: float = Field(description="Duration of insulin action, hours")
    carbs_hr: Optional[float] = Field(default=None, description="Carb absorption rate, g/h")
    delay: Optional[float] = Field(default=None, description="Carb absorption delay, minutes")
    timezone: Optional[str] = Field(default=None, description="Profile timezone")
    units: Optional[str] = Field(default=None, description="Glucose units")
    carbratio: list[TimeSchedule] = Field(default_factory=list, description="Carb ratio schedule")
    sens: list[TimeSchedule] = Field(default_factory=list, description="Insulin sensitivity schedule")
    basal: list[TimeSchedule] = Field(default_factory=list, description="Basal schedule")
    target_low: list[TimeSchedule] = Field(default_factory=list, description="Low target schedule")
    target_high: list[TimeSchedule] = Field(default_factory=list, description="High target schedule")


class ProfileSet(BaseModel):
    """
    A stored profile document. ``store`` maps profile names to configurations.
    """
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = Field(default=None, alias="_id", description="Document ID")
    default_profile: str = Field(alias="defaultProfile", description="Name of the active profile")
    start_date: str = Field(alias="startDate", description="Effective from, ISO-8601")
    store: dict[str, ProfileConfig] = Field(description="Profiles by name")
    mills: Optional[int] = Field(default=None, description="Effective from, epoch ms")
    units: Optional[str] = Field(default=None, description="Glucose units")
    created_at: Optional[str] = Field(default=None, description="Creation time")

    @property
    def active(self) -> Optional[ProfileConfig]:
        return self.store.get(self.default_profile)


class ServerStatus(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    status: str = Field(description="Server status, 'ok' when healthy")
    name: str = Field(description="Server name")
    version: str = Field(description="Nightscout version")
    server_time: str = Field(alias="serverTime", description="Server time, ISO-8601")
    server_time_epoch: int = Field(alias="serverTimeEpoch", description="Server time, epoch ms")
    api_enabled: bool = Field(alias="apiEnabled", description="API enabled")
    careportal_enabled: bool = Field(alias="careportalEnabled", description="Careportal enabled")
    boluscalc_enabled: bool = Field(alias="boluscalcEnabled", description="Bolus calculator enabled")
    settings: Optional[dict[str, Any]] = Field(default=None, description="Site settings")
    extended_settings: Optional[dict[str, Any]] = Field(default=None, alias="extendedSettings", description="Plugin settings")
    authorized: Optional[Any] = Field(default=None, description="Authorization details")
    runtime_state: Optional[str] = Field(default=None, alias="runtimeState", description="Runtime state")
