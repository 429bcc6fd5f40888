"""Radiation background level.

The highest latest reading (uSv/h) decides the level. An annual dose under
continuous exposure is extrapolated from it and converted into a lifetime
risk estimate, which only adds descriptive detail to the result.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

import pandas as pd

from .classifier import contains_any
from .config import GREEN, RED, TEAL, YELLOW
from .indicator import Indicator
from .preprocessing import latest_per_component
from .scorer import Clock, Scorer

logger = logging.getLogger(__name__)

RADIATION_KEYWORDS = ("радіа", "радиа", "radia", "радио", "фон")

NO_DATA_TEXT = "Немає даних про рівень радіації"
NO_VALID_DATA_TEXT = "Немає коректних даних про рівень радіації"


@dataclass(frozen=True)
class RadiationBand:
    key: str
    max: float
    description: str
    class_: int
    color: str


# uSv/h, checked in order with ``<=``
RADIATION_LEVELS: Tuple[RadiationBand, ...] = (
    RadiationBand("NORMAL", 0.2, "Звичайний рівень", 1, TEAL),
    RadiationBand("ACCEPTABLE", 0.3, "Нормальний рівень", 2, GREEN),
    RadiationBand("ELEVATED", 1.2, "Підвищений рівень", 3, YELLOW),
    RadiationBand("DANGEROUS", float("inf"), "Небезпечний рівень", 4, RED),
)

# risk per year, checked in order with ``<=``
RISK_CATEGORIES: Tuple[RadiationBand, ...] = (
    RadiationBand("NEGLIGIBLE", 1e-6, "Знехтовний ризик", 1, TEAL),
    RadiationBand("SMALL", 1e-5, "Малий ризик", 2, GREEN),
    RadiationBand("OPTIMIZATION_REQUIRED", 5e-5, "Необхідна оптимізація ризику", 3, YELLOW),
    RadiationBand("UNACCEPTABLE", float("inf"), "Недопустимий ризик", 4, RED),
)

# risk / (mSv/year)
GAMMA_DOSE_TO_RISK = 5e-5

# (max uSv/h, coefficient)
DOSE_COEFFICIENTS: List[Tuple[float, float]] = [
    (0.2, 0.8),
    (0.3, 1.0),
    (1.2, 1.5),
    (10.0, 2.0),
    (float("inf"), 3.0),
]

# levels that get the risk description appended to the text
_QUIET_LEVELS = ("NORMAL", "ACCEPTABLE")


def annual_dose(level: float) -> float:
    """mSv/year for continuous exposure at ``level`` uSv/h."""
    return level * 24 * 365 / 1000


def dose_coefficient(level: float) -> float:
    for upper, coefficient in DOSE_COEFFICIENTS:
        if level <= upper:
            return coefficient
    return 1.0


def radiation_level(level: float) -> RadiationBand:
    return next(r for r in RADIATION_LEVELS if level <= r.max)


def risk_category(risk: float) -> RadiationBand:
    return next(r for r in RISK_CATEGORIES if risk <= r.max)


def is_radiation_measurement(category_lower: str, component_lower: str) -> bool:
    if category_lower:
        return contains_any(category_lower, RADIATION_KEYWORDS)
    return contains_any(component_lower, RADIATION_KEYWORDS)


@dataclass
class RadiationLevelScorer(Scorer):
    def score(self, frame: pd.DataFrame) -> Indicator:
        if frame.empty:
            return Indicator.no_data(NO_DATA_TEXT)
        mask = [
            is_radiation_measurement(c, n) for c, n in zip(frame["category_lower"], frame["component_lower"])
        ]
        radiation = frame.loc[mask]
        if radiation.empty:
            return Indicator.no_data(NO_DATA_TEXT)

        latest = latest_per_component(radiation)
        max_level = 0.0
        component: Optional[str] = None
        for name, value in zip(latest["component_name"], latest["numeric_value"]):
            if not pd.isna(value) and value > max_level:
                max_level, component = float(value), name

        if max_level == 0:
            return Indicator.no_data(NO_VALID_DATA_TEXT)

        level = radiation_level(max_level)
        dose = annual_dose(max_level)
        coefficient = dose_coefficient(max_level)
        risk = dose * GAMMA_DOSE_TO_RISK * coefficient
        category = risk_category(risk)
        logger.debug(
            "Radiation max %s (%s): dose %.2f mSv, coefficient %s, risk %.2e",
            max_level, component, dose, coefficient, risk,
        )

        text = f"{level.description} радіаційного фону"
        if level.key not in _QUIET_LEVELS:
            text += f" ({category.description})"

        return Indicator(
            value=f"{max_level:.3f}",
            class_=level.class_,
            text=text,
            color=level.color,
            extras={
                "component": component,
                "risk": {"value": risk, "category": category.key, "description": category.description},
                "details": {"annualDose": dose, "doseCoefficient": coefficient},
            },
        )


def calculate_radiation_level_index(measurements, clock: Optional[Clock] = None) -> Indicator:
    scorer = RadiationLevelScorer() if clock is None else RadiationLevelScorer(clock=clock)
    return scorer.compute(measurements)
