"""Energy consumption index.

Consumption readings are compared against reference monthly consumption
for a building type, direct efficiency readings (percent) are used as-is.
Besides the index the scorer reports a month-by-month breakdown of the
recognised readings and naive daily averages.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

import pandas as pd

from .classifier import KeywordClassifier
from .config import NEUTRAL_INDEX, WORKING_DAYS_PER_MONTH
from .indicator import Indicator, five_band_scale
from .preprocessing import filter_by_category, latest_per_component
from .scorer import Clock, Scorer
from .utils import clamp, round_half_up, text_or, weighted_mean

logger = logging.getLogger(__name__)

ENERGY_CATEGORY_KEYWORDS = ("енерг", "энерг", "energ", "споживан", "використан")

NO_DATA_TEXT = "Немає даних про енергетичний стан"
INSUFFICIENT_TEXT = "Недостатньо даних для оцінки енергетичного стану"

CONSUMPTION = "consumption"
AVERAGE = "average"
EFFICIENCY = "efficiency"


@dataclass(frozen=True)
class EnergyIndicator:
    kind: str
    weight: float
    short_name: str
    unit: str


ENERGY_INDICATORS: Dict[str, EnergyIndicator] = {
    "обсяги використання води": EnergyIndicator(CONSUMPTION, 1.0, "Використання води", "м³"),
    "обсяги використання електроенергії": EnergyIndicator(
        CONSUMPTION, 1.2, "Використання електроенергії", "кВт·год"
    ),
    "обсяги використання газу": EnergyIndicator(CONSUMPTION, 1.1, "Використання газу", "м³"),
    "обсяги використання теплової енергії": EnergyIndicator(
        CONSUMPTION, 1.1, "Використання теплової енергії", "Гкал"
    ),
    "середні обсяги споживання": EnergyIndicator(AVERAGE, 0.8, "Середнє споживання", ""),
    "енергоефективність будівлі або виробництва": EnergyIndicator(EFFICIENCY, 1.5, "Енергоефективність", "%"),
}

# Keyword table; order matters (first match wins)
ENERGY_KEYWORDS: List[Tuple[str, Tuple[str, ...]]] = [
    ("обсяги використання води", ("вод", "water", "водоспожив", "водопотр")),
    ("обсяги використання електроенергії", ("електро", "electr", "электр", "струм", "ток")),
    ("обсяги використання газу", ("газ", "gas", "газов", "газоспожив", "газопотр")),
    ("обсяги використання теплової енергії", ("тепл", "heat", "отопл", "опал")),
    ("середні обсяги споживання", ("середн", "average", "середньо", "средн")),
    ("енергоефективність будівлі або виробництва", ("ефект", "effic", "эффект")),
]

# Resource type of a component, independent of the indicator it matched
RESOURCE_KEYWORDS: List[Tuple[str, Tuple[str, ...]]] = [
    ("water", ("вод", "water")),
    ("electricity", ("електр", "electr", "электр")),
    ("gas", ("газ", "gas")),
    ("heat", ("тепл", "heat")),
    ("average", ("середн", "average")),
    ("efficiency", ("ефект", "effic")),
]
OTHER_RESOURCE = "other"

# Reference monthly consumption per 1000 m2 (gas and heat: heating season)
AVERAGE_CONSUMPTION: Dict[str, Dict[str, float]] = {
    "water": {"office": 50, "industrial": 250, "residential": 150, "commercial": 100, "default": 120},
    "electricity": {"office": 12000, "industrial": 50000, "residential": 10000, "commercial": 15000, "default": 18000},
    "gas": {"office": 6000, "industrial": 25000, "residential": 8000, "commercial": 7000, "default": 9000},
    "heat": {"office": 100, "industrial": 200, "residential": 120, "commercial": 90, "default": 130},
}
BUILDING_TYPES = ("office", "industrial", "residential", "commercial", "default")

OPTIMIZATION_THRESHOLD = 0.4

OPTIMIZATION_LABELS = {
    "water": "водоспоживання",
    "electricity": "електроспоживання",
    "gas": "газоспоживання",
    "heat": "теплоспоживання",
}
DEFAULT_OPTIMIZATION_LABEL = "енергоспоживання"

ENERGY_SCALE = five_band_scale(
    (
        "Відмінний енергетичний стан",
        "Добрий енергетичний стан",
        "Задовільний енергетичний стан",
        "Незадовільний енергетичний стан",
        "Критичний енергетичний стан",
    )
)

_classifier = KeywordClassifier(ENERGY_KEYWORDS, known_keys=tuple(ENERGY_INDICATORS))
_resource_classifier = KeywordClassifier(RESOURCE_KEYWORDS)


def resource_type(component_name: str) -> str:
    return _resource_classifier.match(component_name) or OTHER_RESOURCE


def month_key(date: pd.Timestamp) -> str:
    """``YYYY-M`` without zero padding."""
    return f"{date.year}-{date.month}"


def monthly_statistics(
    monthly: Dict[str, Dict[str, List[Dict]]]
) -> Tuple[Dict[str, float], Dict[str, float]]:
    """Per-resource mean of monthly means and per-working-day averages."""
    totals: Dict[str, float] = {}
    counts: Dict[str, int] = {}
    for resources in monthly.values():
        for resource, readings in resources.items():
            if readings:
                average = sum(r["value"] for r in readings) / len(readings)
                totals[resource] = totals.get(resource, 0.0) + average
                counts[resource] = counts.get(resource, 0) + 1

    overall = {resource: totals[resource] / counts[resource] for resource in totals}

    total_months = len(monthly)
    daily: Dict[str, float] = {}
    for resource, value in overall.items():
        working_days = WORKING_DAYS_PER_MONTH * counts[resource]
        daily[resource] = value / (working_days / total_months)
    return overall, daily


@dataclass
class EnergyStatusScorer(Scorer):
    building_type: str = "default"

    def __post_init__(self):
        if self.building_type not in BUILDING_TYPES:
            raise ValueError(f"Unknown building type: {self.building_type!r}")

    def efficiency(self, value: float, indicator: EnergyIndicator, resource: str) -> float:
        if indicator.kind == EFFICIENCY:
            return clamp(value / 100)
        if resource in (OTHER_RESOURCE, AVERAGE):
            return 0.5
        # resources without a reference row fall back to 1
        base = AVERAGE_CONSUMPTION.get(resource, {}).get(self.building_type) or 1
        return clamp(1 - value / (base * 2))

    def score(self, frame: pd.DataFrame) -> Indicator:
        energy = filter_by_category(frame, ENERGY_CATEGORY_KEYWORDS)
        if energy.empty:
            return Indicator.no_data(NO_DATA_TEXT)

        indicators: List[Dict] = []
        monthly: Dict[str, Dict[str, List[Dict]]] = {}
        for row in latest_per_component(energy).itertuples(index=False):
            if pd.isna(row.numeric_value):
                logger.debug("Skipping %s: unparsable value %r", row.component_name, row.value)
                continue
            key = _classifier.match(row.component_name)
            if key is None:
                logger.debug("Unrecognised energy component %s", row.component_name)
                continue

            info = ENERGY_INDICATORS[key]
            value = float(row.numeric_value)
            resource = resource_type(row.component_name)
            unit = text_or(row.unit, info.unit)

            if not pd.isna(row.date):
                monthly.setdefault(month_key(row.date), {}).setdefault(resource, []).append(
                    {"name": row.component_name, "value": value, "unit": unit}
                )

            efficiency = self.efficiency(value, info, resource)
            indicators.append(
                {
                    "name": row.component_name,
                    "category": key,
                    "resourceType": resource,
                    "value": value,
                    "unit": unit,
                    "efficiency": efficiency,
                    "weight": info.weight,
                    "weightedEfficiency": efficiency * info.weight,
                    "date": row.measurement_date,
                }
            )
            logger.debug("%s -> %s (%s), efficiency %.2f", row.component_name, key, resource, efficiency)

        if not indicators:
            return Indicator.no_data(INSUFFICIENT_TEXT)

        mean = weighted_mean([i["efficiency"] for i in indicators], [i["weight"] for i in indicators])
        index = NEUTRAL_INDEX if mean is None else mean * 100
        logger.debug("Energy index %.2f over %s indicators", index, len(indicators))

        # first strict extremum wins
        most = max(indicators, key=lambda i: i["efficiency"])
        least = min(indicators, key=lambda i: i["efficiency"])
        overall, daily = monthly_statistics(monthly)

        suffix = ""
        if least["efficiency"] < OPTIMIZATION_THRESHOLD:
            label = OPTIMIZATION_LABELS.get(least["resourceType"], DEFAULT_OPTIMIZATION_LABEL)
            suffix = f" (потребує оптимізації: {label})"

        band = ENERGY_SCALE.classify(index)
        return Indicator.from_band(
            round_half_up(index),
            band,
            suffix,
            indicators=indicators,
            mostEfficientResource=most,
            leastEfficientResource=least,
            monthlyConsumption=monthly,
            overallAverages=overall,
            dailyAverages=daily,
        )


def calculate_energy_status_index(
    measurements, clock: Optional[Clock] = None, building_type: str = "default"
) -> Indicator:
    if clock is None:
        scorer = EnergyStatusScorer(building_type=building_type)
    else:
        scorer = EnergyStatusScorer(clock=clock, building_type=building_type)
    return scorer.compute(measurements)
