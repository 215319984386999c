"""Conversion of glucose entries into pandas frames for analysis code."""
from __future__ import annotations

from typing import Iterable

import pandas as pd

from nightscout_models import SgvEntry

FRAME_COLUMNS = ["timestamp", "glucose_mg_dL", "direction", "device"]


def entries_to_frame(entries: Iterable[SgvEntry]) -> pd.DataFrame:
    """Return readings as a frame sorted by UTC timestamp.

    ``direction`` keeps the trend name, or ``None`` when the entry had none.
    """
    rows = [
        {
            "timestamp": entry.date,
            "glucose_mg_dL": entry.sgv,
            "direction": entry.direction.value if entry.direction is not None else None,
            "device": entry.device,
        }
        for entry in entries
    ]
    frame = pd.DataFrame(rows, columns=FRAME_COLUMNS)
    # object dtype keeps None for missing trends instead of NaN
    frame["direction"] = pd.Series([row["direction"] for row in rows], index=frame.index, dtype=object)
    if frame.empty:
        return frame
    frame["timestamp"] = pd.to_datetime(frame["timestamp"], unit="ms", utc=True)
    return frame.sort_values("timestamp").reset_index(drop=True)
