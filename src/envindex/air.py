"""Air pollution index.

Each air component is compared with its own history: the latest reading is
divided by the average of the readings taken in the current season (falling
back to the whole history when the season has none). The mean of these
alpha ratios is mapped onto a four-class pollution scale, where class 1 is
the most polluted. Seasons are taken in UTC, both for the readings and
for the current date.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timezone
from typing import Dict, List, Optional

import pandas as pd

from .config import GREEN, ORANGE, RED, YELLOW
from .indicator import Band, Indicator, ScoreScale
from .preprocessing import filter_by_category, season_of_month
from .scorer import Clock, Scorer

logger = logging.getLogger(__name__)

AIR_CATEGORY_KEYWORDS = ("повітря",)

NO_DATA_TEXT = "Немає даних про якість повітря"

ALPHA_SCALE = ScoreScale(
    bands=(
        Band(1.5, 1, "Високе забруднення", RED),
        Band(1.0, 2, "Підвищене забруднення", ORANGE),
        Band(0.6, 3, "Знижене забруднення", YELLOW),
        Band(float("-inf"), 4, "Слабке забруднення", GREEN),
    )
)


def seasonal_average(history: pd.DataFrame, season: str) -> float:
    """Average of the readings taken in ``season``; all readings when none were."""
    seasons = history["date"].dt.month.map(season_of_month)
    in_season = history.loc[seasons == season, "numeric_value"]
    values = in_season if not in_season.empty else history["numeric_value"]
    return float(values.mean())


@dataclass
class AirQualityScorer(Scorer):
    def score(self, frame: pd.DataFrame) -> Indicator:
        air = filter_by_category(frame, AIR_CATEGORY_KEYWORDS)
        # readings without a value or a date cannot be placed in a season
        usable = air.dropna(subset=["numeric_value", "date"])
        if usable.empty:
            return Indicator.no_data(NO_DATA_TEXT)

        # readings are bucketed in UTC, so the current month is too
        season = season_of_month(self.clock().astimezone(timezone.utc).month)
        components: List[Dict] = []
        for name, history in usable.groupby("component_name", sort=False):
            average = seasonal_average(history, season)
            if not average > 0:
                logger.debug("Skipping %s: seasonal average %s", name, average)
                continue
            latest = history.sort_values(
                ["date", "order"], ascending=[False, True], kind="mergesort"
            ).iloc[0]
            alpha = latest["numeric_value"] / average
            components.append(
                {
                    "name": name,
                    "latestValue": float(latest["numeric_value"]),
                    "seasonalAverage": average,
                    "alpha": float(alpha),
                }
            )

        alphas = [c["alpha"] for c in components]
        alpha_avg = sum(alphas) / len(alphas) if alphas else 0.0
        logger.debug("Air alpha average %.3f over %s components (season=%s)", alpha_avg, len(alphas), season)

        band = ALPHA_SCALE.classify(alpha_avg)
        return Indicator.from_band(f"{alpha_avg:.2f}", band, components=components)


def calculate_air_quality_index(measurements, clock: Optional[Clock] = None) -> Indicator:
    scorer = AirQualityScorer() if clock is None else AirQualityScorer(clock=clock)
    return scorer.compute(measurements)
