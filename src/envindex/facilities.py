"""Batch scoring of monitored facilities.

Facilities arrive either in the nested shape served by the measurement
store (one record per facility with a ``measurements`` list) or as a flat
table with one row per measurement, as exported to CSV/Excel.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence

import pandas as pd

from .aggregator import IndicatorAggregator
from .config import DOMAIN_CATEGORY_KEYWORDS
from .preprocessing import RAW_COLUMNS, Measurement
from .utils import ensure_columns

logger = logging.getLogger(__name__)


@dataclass
class Facility:
    id: Any
    name: Optional[str]
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    measurements: List[Measurement] = field(default_factory=list)


def _missing(value) -> bool:
    return value is None or (not isinstance(value, (list, tuple, dict)) and pd.isna(value))


def _coordinate(value) -> Optional[float]:
    # numeric columns often come through as strings
    if _missing(value):
        return None
    number = pd.to_numeric(value, errors="coerce")
    if pd.isna(number):
        logger.warning("Ignoring unreadable coordinate %r", value)
        return None
    return float(number)


def _measurement(record: Dict[str, Any]) -> Optional[Measurement]:
    fields = {c: (None if _missing(record.get(c)) else record.get(c)) for c in RAW_COLUMNS}
    if all(v is None for v in fields.values()):
        # facility without measurements joined in as an empty record
        return None
    return Measurement(**fields)


def facilities_from_records(records: Iterable[Dict[str, Any]]) -> List[Facility]:
    facilities: List[Facility] = []
    for record in records:
        measurements = [
            m for m in (_measurement(r) for r in record.get("measurements") or []) if m is not None
        ]
        facilities.append(
            Facility(
                id=record.get("id"),
                name=record.get("factory_name"),
                latitude=_coordinate(record.get("latitude")),
                longitude=_coordinate(record.get("longitude")),
                measurements=measurements,
            )
        )
    logger.info("Read %s facilities", len(facilities))
    return facilities


def facilities_from_frame(frame: pd.DataFrame) -> List[Facility]:
    """Group a flat measurement table into facilities (input order kept)."""
    ensure_columns(frame, ["factory_id"])
    facilities: List[Facility] = []
    for _, rows in frame.groupby("factory_id", sort=False):
        # records hold native Python scalars, unlike group keys
        records = rows.to_dict(orient="records")
        first = records[0]
        measurements = [m for m in (_measurement(r) for r in records) if m is not None]
        facilities.append(
            Facility(
                id=first["factory_id"],
                name=None if _missing(first.get("factory_name")) else first.get("factory_name"),
                latitude=_coordinate(first.get("latitude")),
                longitude=_coordinate(first.get("longitude")),
                measurements=measurements,
            )
        )
    logger.info("Read %s facilities from %s rows", len(facilities), len(frame))
    return facilities


def load_facilities(path: str | Path) -> List[Facility]:
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix == ".json":
        with path.open(encoding="utf-8") as fh:
            return facilities_from_records(json.load(fh))
    if suffix in [".xlsx", ".xls"]:
        return facilities_from_frame(pd.read_excel(path))
    if suffix == ".csv":
        return facilities_from_frame(pd.read_csv(path))
    raise ValueError(f"Unsupported input format: {path.suffix!r}")


def measurement_domain(category_name: Optional[str]) -> Optional[str]:
    if not category_name:
        return None
    lowered = category_name.lower()
    for domain, keyword in DOMAIN_CATEGORY_KEYWORDS.items():
        if keyword in lowered:
            return domain
    return None


def domains_present(measurements: Iterable[Measurement]) -> List[str]:
    """Domains with at least one measurement, in the canonical domain order."""
    found = {measurement_domain(m.category_name) for m in measurements}
    return [d for d in DOMAIN_CATEGORY_KEYWORDS if d in found]


def filter_facilities(facilities: Iterable[Facility], domains: Sequence[str]) -> List[Facility]:
    unknown = [d for d in domains if d not in DOMAIN_CATEGORY_KEYWORDS]
    if unknown:
        raise ValueError(f"Unknown domains: {unknown}")
    wanted = set(domains)
    return [f for f in facilities if wanted.intersection(domains_present(f.measurements))]


def score_facilities(
    facilities: Iterable[Facility], aggregator: Optional[IndicatorAggregator] = None
) -> Dict[Any, Dict[str, Any]]:
    aggregator = IndicatorAggregator.create_default() if aggregator is None else aggregator
    results: Dict[Any, Dict[str, Any]] = {}
    for facility in facilities:
        logger.debug("Scoring facility %s (%s measurements)", facility.id, len(facility.measurements))
        results[facility.id] = {
            "name": facility.name,
            "latitude": facility.latitude,
            "longitude": facility.longitude,
            "indicators": aggregator.compute_dict(facility.measurements),
        }
    return results
