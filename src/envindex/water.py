"""Drinking-water quality index.

Water components are grouped into regulatory indicator categories; the
worst category present sets the quality percentage. A microbiological or
parasitic reading above 10 overrides everything and marks the water as
contaminated.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

import pandas as pd

from .classifier import KeywordClassifier, contains_any
from .config import GREEN, ORANGE, RED, TEAL, YELLOW
from .indicator import Band, Indicator, ScoreScale
from .preprocessing import filter_by_category, latest_per_component
from .scorer import Clock, Scorer

logger = logging.getLogger(__name__)

WATER_CATEGORY_KEYWORDS = ("водн", "вода", "water", "ресурс")

MICROBIOLOGICAL_KEYWORDS = ("мікробіологічн", "бактер", "паразитар", "епідеміч")
MICROBIOLOGICAL_LIMIT = 10.0

NO_DATA_TEXT = "Немає даних про якість води"
CONTAMINATED_TEXT = "Забруднена вода (перевищення ГДК)"

# Keyword table; order matters (first match wins)
WATER_CATEGORIES: List[Tuple[str, Tuple[str, ...]]] = [
    ("санітарно-токсикологічні", ("токсикологічн", "токсикологическ")),
    ("фізико-хімічні", ("фізико-хімічн", "физико-химическ")),
    ("органолептичні", ("органолептичн", "органолептическ")),
    ("мікробіологічні", ("мікробіологічн", "микробиологическ", "бактер")),
    ("паразитарні", ("паразитарн", "паразитологічн")),
    ("радіаційні", ("радіаційн", "радиационн")),
    ("індекс забрудненості", ("індекс", "індекс забрудненості", "индекс")),
]

# category -> (base quality %, display name)
CATEGORY_QUALITY: Dict[str, Tuple[int, str]] = {
    "санітарно-токсикологічні": (10, "Санітарно-токсикологічні показники"),
    "фізико-хімічні": (30, "Фізико-хімічні показники"),
    "органолептичні": (50, "Органолептичні показники"),
    "мікробіологічні": (0, "Мікробіологічні показники"),
    "паразитарні": (0, "Паразитарні показники"),
    "радіаційні": (20, "Радіаційні показники"),
    "індекс забрудненості": (15, "Індекс забрудненості води"),
}

FULL_QUALITY = 100


class UpperBoundScale(ScoreScale):
    """Bands keyed by an inclusive upper bound (``<=``), worst first."""

    def classify(self, score: float) -> Band:
        for band in self.bands[:-1]:
            if score <= band.bound:
                return band
        return self.bands[-1]


QUALITY_SCALE = UpperBoundScale(
    bands=(
        Band(0, 5, CONTAMINATED_TEXT, RED),
        Band(20, 4, "Близька до забруднення", ORANGE),
        Band(50, 3, "Задовільна якість води", YELLOW),
        Band(80, 2, "Добра якість води", GREEN),
        Band(float("inf"), 1, "Висока якість води", TEAL),
    )
)

_classifier = KeywordClassifier(WATER_CATEGORIES)


@dataclass
class WaterQualityScorer(Scorer):
    def score(self, frame: pd.DataFrame) -> Indicator:
        water = filter_by_category(frame, WATER_CATEGORY_KEYWORDS)
        if water.empty:
            return Indicator.no_data(NO_DATA_TEXT)

        latest = latest_per_component(water).dropna(subset=["numeric_value"])
        if latest.empty:
            return Indicator.no_data(NO_DATA_TEXT)

        # --- contamination override ---
        micro = latest[latest["component_lower"].map(lambda n: contains_any(n, MICROBIOLOGICAL_KEYWORDS))]
        if (micro["numeric_value"] > MICROBIOLOGICAL_LIMIT).any():
            worst = micro.loc[micro["numeric_value"].idxmax()]
            logger.debug("Microbiological override by %s=%s", worst["component_name"], worst["numeric_value"])
            return Indicator(
                value=float(worst["numeric_value"]),
                class_=3,
                text=CONTAMINATED_TEXT,
                color=RED,
                extras={"worstContaminant": worst["component_name"]},
            )

        # --- worst category present ---
        quality = FULL_QUALITY
        worst_category: Optional[str] = None
        for name in latest["component_name"]:
            category = _classifier.match(name)
            if category is None:
                continue
            base, display = CATEGORY_QUALITY[category]
            if base < quality:
                quality, worst_category = base, display
        logger.debug("Water quality %s (worst category: %s)", quality, worst_category)

        band = QUALITY_SCALE.classify(quality)
        suffix = f" (найвищий показник: {worst_category})" if worst_category else ""
        return Indicator.from_band(quality, band, suffix, worstContaminant=worst_category)


def calculate_water_quality_index(measurements, clock: Optional[Clock] = None) -> Indicator:
    scorer = WaterQualityScorer() if clock is None else WaterQualityScorer(clock=clock)
    return scorer.compute(measurements)
