"""
Treatment (care event) model.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class Treatment(BaseModel):
    """
    A logged care event: bolus, carb correction, temp basal, note, etc.

    Only ``event_type`` and ``created_at`` are required. The event taxonomy is
    open ended, so fields not modelled here are preserved as extras.
    """
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: Optional[str] = Field(default=None, alias="_id", description="Document ID, absent before upload")
    event_type: str = Field(alias="eventType", description="Event type, e.g. 'Meal Bolus'")
    created_at: str = Field(description="Event time as ISO-8601")
    glucose: Optional[float] = Field(default=None, description="Glucose value")
    glucose_type: Optional[str] = Field(default=None, alias="glucoseType", description="Finger, Sensor or Manual")
    carbs: Optional[float] = Field(default=None, description="Carbohydrates in grams")
    insulin: Optional[float] = Field(default=None, description="Insulin in units")
    units: Optional[str] = Field(default=None, description="Glucose units, mg/dl or mmol")
    duration: Optional[float] = Field(default=None, description="Duration in minutes")
    notes: Optional[str] = Field(default=None, description="Free text notes")
    entered_by: Optional[str] = Field(default=None, alias="enteredBy", description="Person or device that logged it")

    @classmethod
    def at(cls, event_type: str, when: Optional[datetime] = None, **fields: Any) -> "Treatment":
        """Build an unsaved treatment stamped with ``when`` (defaults to now, UTC)."""
        when = when or datetime.now(timezone.utc)
        if when.tzinfo is None:
            when = when.replace(tzinfo=timezone.utc)
        return cls(event_type=event_type, created_at=when.astimezone(timezone.utc).isoformat(), **fields)

    def to_wire(self) -> dict[str, Any]:
        """JSON document for upload. Absent fields are omitted, never sent as null."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
