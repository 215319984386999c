"""
Glucose entry models (sensor and meter readings).
"""
from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_DEVICE = "nightscout-client"


class Trend(str, Enum):
    """CGM trend direction as reported by the uploader."""

    DOUBLE_UP = "DoubleUp"
    SINGLE_UP = "SingleUp"
    FORTY_FIVE_UP = "FortyFiveUp"
    FLAT = "Flat"
    FORTY_FIVE_DOWN = "FortyFiveDown"
    SINGLE_DOWN = "SingleDown"
    DOUBLE_DOWN = "DoubleDown"
    NONE = "NONE"
    NOT_COMPUTABLE = "NOT COMPUTABLE"
    RATE_OUT_OF_RANGE = "RATE OUT OF RANGE"
    UNKNOWN = "UNKNOWN"

    @property
    def arrow(self) -> str:
        return _ARROWS.get(self, "↮")

    def __str__(self) -> str:
        return self.arrow


_ARROWS = {
    Trend.DOUBLE_UP: "↑↑",
    Trend.SINGLE_UP: "↑",
    Trend.FORTY_FIVE_UP: "↗",
    Trend.FLAT: "→",
    Trend.FORTY_FIVE_DOWN: "↘",
    Trend.SINGLE_DOWN: "↓",
    Trend.DOUBLE_DOWN: "↓↓",
}


class SgvEntry(BaseModel):
    """
    Sensor glucose value recorded by a CGM.

    ``direction`` is optional: manual and calibration records carry no trend.
    """
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = Field(default=None, alias="_id", description="Document ID, absent before upload")
    sgv: int = Field(description="Glucose value in mg/dL")
    date: int = Field(description="Reading time as Unix epoch milliseconds")
    date_string: str = Field(alias="dateString", description="Reading time as ISO-8601")
    device: str = Field(description="Uploading device")
    direction: Optional[Trend] = Field(default=None, description="Trend direction")
    type: str = Field(default="sgv", description="Entry type")

    @field_validator("direction", mode="before")
    @classmethod
    def coerce_unknown_trend(cls, value):
        if isinstance(value, str) and value not in Trend._value2member_map_:
            return Trend.UNKNOWN
        return value

    @classmethod
    def create(
        cls,
        sgv: int,
        at: datetime,
        direction: Optional[Trend] = None,
        device: str = DEFAULT_DEVICE,
    ) -> "SgvEntry":
        if at.tzinfo is None:
            at = at.replace(tzinfo=timezone.utc)
        return cls(
            sgv=sgv,
            date=int(at.timestamp() * 1000),
            date_string=at.astimezone(timezone.utc).isoformat(),
            device=device,
            direction=direction,
        )

    @property
    def timestamp(self) -> datetime:
        return datetime.fromtimestamp(self.date / 1000, tz=timezone.utc)


class MbgEntry(BaseModel):
    """
    Meter blood glucose value, usually entered by hand after a fingerstick.
    """
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = Field(default=None, alias="_id", description="Document ID")
    mbg: int = Field(description="Glucose value in mg/dL")
    date: int = Field(description="Reading time as Unix epoch milliseconds")
    date_string: str = Field(alias="dateString", description="Reading time as ISO-8601")
    device: Optional[str] = Field(default=None, description="Meter or uploader")
    type: str = Field(default="mbg", description="Entry type")
