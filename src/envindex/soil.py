"""Soil condition index.

Known soil parameters are normalised against their agronomic optimum and
combined into a weighted 0-100 index. The scorer is permissive: components
it cannot recognise still count with a neutral score, and a facility whose
soil readings are all unusable gets a fixed base estimate rather than
"no data".
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

import pandas as pd

from .classifier import KeywordClassifier, contains_any
from .config import SOIL_FALLBACK_SCORE, SOIL_FALLBACK_WEIGHT, YELLOW
from .indicator import Indicator, five_band_scale
from .scorer import Clock, Scorer
from .preprocessing import latest_per_component
from .utils import round_half_up, weighted_mean

logger = logging.getLogger(__name__)

SOIL_CATEGORY_KEYWORDS = ("ґрунт", "грунт", "почв", "soil")

NO_DATA_TEXT = "Немає даних про стан ґрунтів"
BASE_ESTIMATE_TEXT = "Задовільний стан ґрунтів (базова оцінка)"
BASE_ESTIMATE_VALUE = 50
BASE_ESTIMATE_CLASS = 3

LOWER_BETTER = "lower-better"
HIGHER_BETTER = "higher-better"
OPTIMAL_RANGE = "optimal-range"


@dataclass(frozen=True)
class SoilParameter:
    optimal_range: Tuple[float, float]
    weight: float
    kind: str
    name: str
    unit: str


SOIL_PARAMETERS: Dict[str, SoilParameter] = {
    "солонцюватість": SoilParameter((0, 0.5), 0.9, LOWER_BETTER, "Солонцюватість", "%"),
    "бал бонітету": SoilParameter((80, 100), 1.2, HIGHER_BETTER, "Бал бонітету для складового ґрунту", "бали"),
    "гумус": SoilParameter((3, 6), 1.5, HIGHER_BETTER, "Гумус", "%"),
    "рухомі сполуки калію": SoilParameter((120, 180), 0.8, OPTIMAL_RANGE, "Рухомі сполуки калію (K2O)", "мг/кг"),
    "засоленість": SoilParameter((0, 0.25), 0.9, LOWER_BETTER, "Засоленість", "%"),
    "рухомі сполуки фосфору": SoilParameter((60, 120), 0.8, OPTIMAL_RANGE, "Рухомі сполуки фосфору (P2O5)", "мг/кг"),
    "ph": SoilParameter((6.0, 7.5), 1.1, OPTIMAL_RANGE, "pH", ""),
    "забруднення хімічними речовинами": SoilParameter(
        (0, 1), 1.5, LOWER_BETTER, "Забруднення хімічними речовинами", "відн. од."
    ),
}

# Keyword table; order matters (first match wins)
SOIL_KEYWORDS: List[Tuple[str, Tuple[str, ...]]] = [
    ("солонцюватість", ("солонцюват", "солонцеват", "солонц", "солонеч", "solonetz")),
    ("бал бонітету", ("бонітет", "бонит", "боніт", "бал бонітету", "bonitet")),
    ("гумус", ("гумус", "органич", "organic", "humus")),
    ("рухомі сполуки калію", ("калі", "кали", "к2о", "k2o", "калий", "potassium")),
    ("засоленість", ("засолен", "засоленість", "солен", "salin")),
    ("рухомі сполуки фосфору", ("фосфор", "р2о5", "p2o5", "phosph")),
    ("ph", ("ph", "рн", "кислотні", "кислотн")),
    ("забруднення хімічними речовинами", ("забрудн", "химич", "хіміч", "contamination", "pollution")),
]

SOIL_SCALE = five_band_scale(
    (
        "Дуже добрий стан ґрунтів",
        "Добрий стан ґрунтів",
        "Задовільний стан ґрунтів",
        "Поганий стан ґрунтів",
        "Дуже поганий стан ґрунтів",
    )
)

_classifier = KeywordClassifier(SOIL_KEYWORDS, known_keys=tuple(SOIL_PARAMETERS))


def normalize_soil_value(value: float, parameter: SoilParameter) -> float:
    """Map a reading onto [0, 1] where 1 is the agronomic optimum."""
    lo, hi = parameter.optimal_range
    if parameter.kind == LOWER_BETTER:
        if value <= lo:
            return 1.0
        if value >= hi:
            return 0.0
        return (hi - value) / (hi - lo)
    if parameter.kind == HIGHER_BETTER:
        if value >= hi:
            return 1.0
        if value <= lo:
            return 0.0
        return (value - lo) / (hi - lo)
    # optimal range
    if lo <= value <= hi:
        return 1.0
    if value < lo:
        return value / lo
    return hi / value


def is_soil_measurement(category_lower: str, component_name: str) -> bool:
    return contains_any(category_lower, SOIL_CATEGORY_KEYWORDS) or _classifier.matches_any(component_name)


@dataclass
class SoilQualityScorer(Scorer):
    def score(self, frame: pd.DataFrame) -> Indicator:
        if frame.empty:
            return Indicator.no_data(NO_DATA_TEXT)
        mask = [is_soil_measurement(c, n) for c, n in zip(frame["category_lower"], frame["component_name"])]
        soil = frame.loc[mask]
        if soil.empty:
            return Indicator.no_data(NO_DATA_TEXT)

        latest = latest_per_component(soil)
        indicators: List[Dict] = []
        for row in latest.itertuples(index=False):
            if pd.isna(row.numeric_value):
                logger.debug("Skipping %s: unparsable value %r", row.component_name, row.value)
                continue
            value = float(row.numeric_value)
            key = _classifier.match(row.component_name)
            if key is not None:
                parameter = SOIL_PARAMETERS[key]
                normalized = normalize_soil_value(value, parameter)
                display, unit, weight = parameter.name, parameter.unit, parameter.weight
            else:
                logger.debug("Unrecognised soil component %s, using neutral score", row.component_name)
                normalized, weight = SOIL_FALLBACK_SCORE, SOIL_FALLBACK_WEIGHT
                display, unit = row.component_name, ""
            indicators.append(
                {
                    "name": row.component_name,
                    "displayName": display,
                    "value": value,
                    "unit": unit,
                    "normalizedValue": normalized,
                    "weight": weight,
                    "weightedValue": normalized * weight,
                }
            )

        if not indicators:
            # any data beats no data
            return Indicator(
                value=BASE_ESTIMATE_VALUE,
                class_=BASE_ESTIMATE_CLASS,
                text=BASE_ESTIMATE_TEXT,
                color=YELLOW,
                extras={
                    "indicators": [
                        {"name": r.component_name, "value": r.value, "displayName": r.component_name}
                        for r in latest.itertuples(index=False)
                    ]
                },
            )

        index = weighted_mean(
            [i["normalizedValue"] for i in indicators], [i["weight"] for i in indicators]
        ) * 100
        worst = min(indicators, key=lambda i: i["normalizedValue"])
        logger.debug("Soil index %.2f over %s indicators", index, len(indicators))

        band = SOIL_SCALE.classify(index)
        suffix = f" (проблемний показник: {worst['displayName']})" if worst["normalizedValue"] < 0.5 else ""
        return Indicator.from_band(
            round_half_up(index), band, suffix, indicators=indicators, worstIndicator=worst
        )


def calculate_soil_quality_index(measurements, clock: Optional[Clock] = None) -> Indicator:
    scorer = SoilQualityScorer() if clock is None else SoilQualityScorer(clock=clock)
    return scorer.compute(measurements)
