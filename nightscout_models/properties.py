"""
Models for the ``/api/v2/properties`` endpoint.

Every property has its own payload shape. ``PropertiesResult`` holds one
optional attribute per known property; ``None`` means the property was not
requested or the site did not return it, which is different from a value of 0.
"""
from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from nightscout_models.treatments import Treatment


class PropertyName(str, Enum):
    IOB = "iob"
    COB = "cob"
    PUMP = "pump"
    BASAL = "basal"
    BGNOW = "bgnow"
    DELTA = "delta"
    DIRECTION = "direction"
    UPBAT = "upbat"
    DBSIZE = "dbsize"
    RUNTIMESTATE = "runtimestate"
    BUCKETS = "buckets"
    PROFILE = "profile"
    BAGE = "bage"
    CAGE = "cage"
    IAGE = "iage"
    SAGE = "sage"
    RAWBG = "rawbg"
    AR2 = "ar2"
    DEVICESTATUS = "devicestatus"
    OPENAPS = "openaps"
    LOOP = "loop"


class _PropertyModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class IobProperty(_PropertyModel):
    """Insulin on board, with the contributions that make it up."""

    iob: float = Field(description="Insulin on board in units")
    activity: Optional[float] = Field(default=None, description="Insulin activity")
    source: Optional[str] = Field(default=None, description="Where the value was computed")
    device: Optional[str] = Field(default=None, description="Reporting device")
    mills: Optional[int] = Field(default=None, description="Computation time, epoch ms")
    basal_iob: Optional[float] = Field(default=None, alias="basaliob", description="Basal contribution")
    bolus_iob: Optional[float] = Field(default=None, alias="bolusiob", description="Bolus contribution")
    last_bolus: Optional[Treatment] = Field(default=None, alias="lastBolus", description="Most recent bolus")
    display: Optional[str] = Field(default=None, description="Display value")
    display_line: Optional[str] = Field(default=None, alias="displayLine", description="Display line")


class CobProperty(_PropertyModel):
    """Carbs on board and the parameters of their decay."""

    cob: float = Field(description="Carbs on board in grams")
    is_decaying: Optional[int] = Field(default=None, alias="isDecaying", description="1 while carbs decay")
    decayed_by: Optional[str] = Field(default=None, alias="decayedBy", description="Time carbs are fully absorbed")
    raw_carb_impact: Optional[float] = Field(default=None, alias="rawCarbImpact", description="Carb impact")
    source: Optional[str] = Field(default=None, description="Where the value was computed")
    device: Optional[str] = Field(default=None, description="Reporting device")
    display: Optional[Any] = Field(default=None, description="Display value")
    display_line: Optional[str] = Field(default=None, alias="displayLine", description="Display line")


class PumpReading(_PropertyModel):
    value: Optional[Any] = Field(default=None, description="Raw value")
    display: Optional[str] = Field(default=None, description="Display value")
    level: Optional[int] = Field(default=None, description="Alert level")
    message: Optional[str] = Field(default=None, description="Alert message")
    label: Optional[str] = Field(default=None, description="Label")


class PumpData(_PropertyModel):
    battery: Optional[PumpReading] = Field(default=None, description="Pump battery")
    reservoir: Optional[PumpReading] = Field(default=None, description="Insulin reservoir")
    status: Optional[PumpReading] = Field(default=None, description="Pump status")
    clock: Optional[PumpReading] = Field(default=None, description="Pump clock")
    device: Optional[PumpReading] = Field(default=None, description="Pump device")


class PumpProperty(_PropertyModel):
    level: Optional[int] = Field(default=None, description="Overall alert level")
    message: Optional[str] = Field(default=None, description="Overall alert message")
    manufacturer: Optional[str] = Field(default=None, description="Pump manufacturer")
    model: Optional[str] = Field(default=None, description="Pump model")
    data: Optional[PumpData] = Field(default=None, description="Pump readings")

    @property
    def battery(self) -> Optional[PumpReading]:
        return self.data.battery if self.data else None

    @property
    def reservoir(self) -> Optional[PumpReading]:
        return self.data.reservoir if self.data else None

    @property
    def status(self) -> Optional[PumpReading]:
        return self.data.status if self.data else None


class BasalCurrent(_PropertyModel):
    basal: float = Field(description="Scheduled basal rate, U/h")
    temp_basal: Optional[float] = Field(default=None, alias="tempbasal", description="Temp basal rate, U/h")
    total_basal: Optional[float] = Field(default=None, alias="totalbasal", description="Effective rate, U/h")


class BasalProperty(_PropertyModel):
    display: Optional[str] = Field(default=None, description="Display value")
    current: Optional[BasalCurrent] = Field(default=None, description="Current rates")


class PropertySgv(_PropertyModel):
    id: Optional[str] = Field(default=None, alias="_id", description="Entry ID")
    mgdl: float = Field(description="Glucose in mg/dL")
    mills: int = Field(description="Reading time, epoch ms")
    device: Optional[str] = Field(default=None, description="Device")
    direction: Optional[str] = Field(default=None, description="Trend direction")
    type: Optional[str] = Field(default=None, description="Entry type")
    scaled: Optional[float] = Field(default=None, description="Value in display units")


class BgNowProperty(_PropertyModel):
    mean: float = Field(description="Mean of the latest bucket")
    last: float = Field(description="Last reading")
    mills: int = Field(description="Bucket time, epoch ms")
    sgvs: list[PropertySgv] = Field(default_factory=list, description="Readings in the bucket")


class Bucket(BgNowProperty):
    index: int = Field(description="Bucket index")
    from_mills: int = Field(alias="fromMills", description="Bucket start, epoch ms")
    to_mills: int = Field(alias="toMills", description="Bucket end, epoch ms")


class DeltaProperty(_PropertyModel):
    absolute: Optional[float] = Field(default=None, description="Absolute delta")
    elapsed_mins: Optional[float] = Field(default=None, alias="elapsedMins", description="Minutes between readings")
    interpolated: Optional[bool] = Field(default=None, description="Delta was interpolated")
    mean_5_mins_ago: Optional[float] = Field(default=None, alias="mean5MinsAgo", description="Mean 5 minutes ago")
    mgdl: float = Field(description="Delta in mg/dL")
    scaled: Optional[float] = Field(default=None, description="Delta in display units")
    display: Optional[str] = Field(default=None, description="Display value")


class DirectionProperty(_PropertyModel):
    value: str = Field(description="Trend direction name")
    label: Optional[str] = Field(default=None, description="Arrow label")
    entity: Optional[str] = Field(default=None, description="HTML entity")
    display: Optional[str] = Field(default=None, description="Display value")


class UpbatProperty(_PropertyModel):
    display: Optional[str] = Field(default=None, description="Display value")
    level: Optional[int] = Field(default=None, description="Lowest uploader battery level")
    devices: Optional[Any] = Field(default=None, description="Per-device battery state")


class DbSizeProperty(_PropertyModel):
    display: Optional[str] = Field(default=None, description="Display value")
    status: Optional[str] = Field(default=None, description="Status")
    total_data_size: Optional[float] = Field(default=None, alias="totalDataSize", description="Size in MiB")


class RuntimeStateProperty(_PropertyModel):
    state: str = Field(description="Server runtime state")


class PropertiesResult(BaseModel):
    """
    Decoded properties. Unrequested or omitted properties are ``None``.

    Returned properties without a typed model (``sage``, ``loop``, plugins)
    are kept as raw JSON in ``extra``.
    """

    iob: Optional[IobProperty] = None
    cob: Optional[CobProperty] = None
    pump: Optional[PumpProperty] = None
    basal: Optional[BasalProperty] = None
    bgnow: Optional[BgNowProperty] = None
    delta: Optional[DeltaProperty] = None
    direction: Optional[DirectionProperty] = None
    upbat: Optional[UpbatProperty] = None
    dbsize: Optional[DbSizeProperty] = None
    runtimestate: Optional[RuntimeStateProperty] = None
    buckets: Optional[list[Bucket]] = None
    extra: dict[str, Any] = Field(default_factory=dict, description="Raw payloads of properties without a typed model")

    def present(self) -> set[str]:
        """Names of every property that came back, typed or raw."""
        typed = {name for name, value in self if name != "extra" and value is not None}
        return typed | set(self.extra)
