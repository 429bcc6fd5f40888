from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional, Sequence, Union

import numpy as np
import pandas as pd

from .classifier import contains_any
from .config import SEASON_MONTHS
from .utils import safe_copy


RAW_COLUMNS = ("category_name", "component_name", "value", "unit", "measurement_date")

# leading number of a reading such as "0.15 мкЗв/год"
NUMBER_PREFIX = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


@dataclass(frozen=True)
class Measurement:
    """One reading of one component at one facility."""

    category_name: Optional[str]
    component_name: Optional[str]
    value: Union[str, float, int, None]
    unit: Optional[str] = None
    measurement_date: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def season_of_month(month: int) -> str:
    for season, months in SEASON_MONTHS.items():
        if month in months:
            return season
    raise ValueError(f"Invalid month: {month}")


def filter_by_category(frame: pd.DataFrame, keywords: Sequence[str]) -> pd.DataFrame:
    """Rows whose lowercased category contains any of ``keywords``."""
    if frame.empty:
        return frame
    mask = frame["category_lower"].map(lambda name: contains_any(name, keywords))
    return frame.loc[mask.astype(bool)]


def latest_per_component(frame: pd.DataFrame) -> pd.DataFrame:
    """Keep the most recent row of every component.

    NaT dates rank below any real date and ties keep the earliest input row.
    Components come back in order of their first appearance in the input.
    """
    if frame.empty:
        return frame
    first_seen = frame.groupby("component_name", sort=False)["order"].transform("min")
    ranked = frame.assign(_first_seen=first_seen).sort_values(
        ["date", "order"], ascending=[False, True], na_position="last", kind="mergesort"
    )
    latest = ranked.drop_duplicates("component_name", keep="first")
    latest = latest.sort_values("_first_seen", kind="mergesort")
    return latest.drop(columns="_first_seen").reset_index(drop=True)


def leading_number(value):
    """Number a raw reading starts with; strings without one give ``None``.

    Non-string values are returned unchanged for ``pd.to_numeric``.
    """
    if isinstance(value, str):
        m = NUMBER_PREFIX.match(value)
        return m.group(1) if m else None
    return value


def _as_frame(measurements) -> pd.DataFrame:
    if isinstance(measurements, pd.DataFrame):
        return safe_copy(measurements)
    if (
        measurements is None
        or isinstance(measurements, (str, bytes, Mapping))
        or not isinstance(measurements, Iterable)
    ):
        raise TypeError(
            f"measurements must be a sequence of records, got {type(measurements).__name__}"
        )
    rows = [m.to_dict() if isinstance(m, Measurement) else dict(m) for m in measurements]
    return pd.DataFrame(rows)


@dataclass
class MeasurementPreprocessor:
    """Stateless preprocessor that *never* drops rows.

    It turns the loosely-typed records handed over by the measurement store
    into a frame every scorer can filter:
    - canonical column names (missing columns are created empty)
    - lowercased category/component helpers for keyword matching
    - numeric value parsing from the leading number (none or non-finite -> NaN)
    - date parsing (unparsable -> NaT, all dates in UTC)
    - the input row position, used for stable tie-breaks
    """

    category_col: str = "category_name"
    component_col: str = "component_name"
    value_col: str = "value"
    unit_col: str = "unit"
    date_col: str = "measurement_date"

    def transform(self, measurements) -> pd.DataFrame:
        df = _as_frame(measurements)

        # --- canonical columns ---
        renames = {
            self.category_col: "category_name",
            self.component_col: "component_name",
            self.value_col: "value",
            self.unit_col: "unit",
            self.date_col: "measurement_date",
        }
        df = df.rename(columns={k: v for k, v in renames.items() if k != v})
        for c in RAW_COLUMNS:
            if c not in df.columns:
                df[c] = pd.Series([None] * len(df), index=df.index, dtype=object)

        # --- names ---
        df["component_name"] = df["component_name"].astype(object).where(
            df["component_name"].notna(), ""
        ).astype(str)
        df["category_lower"] = (
            df["category_name"].astype(object).where(df["category_name"].notna(), "").astype(str).str.lower()
        )
        df["component_lower"] = df["component_name"].str.lower()

        # --- numeric value ---
        # trailing text is ignored: "0.15 мкЗв/год" reads as 0.15
        raw = df["value"].astype(object).map(leading_number)
        numeric = pd.to_numeric(raw, errors="coerce").astype(float)
        df["numeric_value"] = numeric.where(np.isfinite(numeric))

        # --- dates ---
        df["date"] = pd.to_datetime(
            df["measurement_date"].astype(object), errors="coerce", utc=True, format="mixed"
        )

        df["order"] = np.arange(len(df))
        return df.reset_index(drop=True)
