"""
Device status model (pump, loop and uploader state snapshots).
"""
from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class DeviceStatus(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: Optional[str] = Field(default=None, alias="_id", description="Document ID")
    device: Optional[str] = Field(default=None, description="Reporting device")
    created_at: str = Field(description="Snapshot time as ISO-8601")
    pump: Optional[dict[str, Any]] = Field(default=None, description="Pump state")
    openaps: Optional[dict[str, Any]] = Field(default=None, description="OpenAPS state")
    loop: Optional[dict[str, Any]] = Field(default=None, description="Loop state")
    uploader: Optional[dict[str, Any]] = Field(default=None, description="Uploader phone state")
