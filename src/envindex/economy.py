"""Regional economy index.

Economic indicators are scored relative to each other: within the
higher-better and lower-better groups the observed values are min-max
scaled, so the index describes the balance of a facility's indicators
rather than absolute levels. Exports and imports together also yield an
export/import ratio indicator.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

import pandas as pd

from .classifier import KeywordClassifier
from .config import ECONOMY_SINGLE_INDICATOR_SCORE, NEUTRAL_INDEX
from .indicator import Indicator, five_band_scale
from .preprocessing import filter_by_category, latest_per_component
from .scorer import Clock, Scorer
from .utils import min_max, round_half_up, weighted_mean

logger = logging.getLogger(__name__)

ECONOMY_CATEGORY_KEYWORDS = ("економ", "эконом", "econom")

NO_DATA_TEXT = "Немає даних про економічний стан"
INSUFFICIENT_TEXT = "Недостатньо даних для оцінки економічного стану"

HIGHER_BETTER = "higher-better"
LOWER_BETTER = "lower-better"
# imports only feed the export/import ratio
SPECIAL = "special"

EXPORT = "експорт товарів та послуг"
IMPORT = "імпорт товарів та послуг"


@dataclass(frozen=True)
class EconomicIndicator:
    kind: str
    weight: float
    short_name: str
    unit: str


ECONOMIC_INDICATORS: Dict[str, EconomicIndicator] = {
    "валовий внутрішній продукт": EconomicIndicator(HIGHER_BETTER, 1.5, "ВВП", "млн грн"),
    "вантажообіг": EconomicIndicator(HIGHER_BETTER, 1.0, "Вантажообіг", "млн т-км"),
    "пасажирообіг": EconomicIndicator(HIGHER_BETTER, 1.0, "Пасажирообіг", "млн пас-км"),
    EXPORT: EconomicIndicator(HIGHER_BETTER, 1.2, "Експорт", "млн дол. США"),
    "заробітна плата": EconomicIndicator(HIGHER_BETTER, 1.3, "Зарплата", "грн"),
    "індекс промислової продукції": EconomicIndicator(HIGHER_BETTER, 1.1, "Індекс промисловості", "%"),
    "індекс обсягу сільськогосподарського виробництва": EconomicIndicator(
        HIGHER_BETTER, 1.1, "Індекс сільгосп", "%"
    ),
    "індекс будівельної продукції": EconomicIndicator(HIGHER_BETTER, 1.0, "Індекс будівництва", "%"),
    "індекс споживчих цін": EconomicIndicator(LOWER_BETTER, 1.2, "ІСЦ", "%"),
    "індекс цін виробників промислової продукції": EconomicIndicator(
        LOWER_BETTER, 1.1, "Індекс цін виробників", "%"
    ),
    IMPORT: EconomicIndicator(SPECIAL, 1.0, "Імпорт", "млн дол. США"),
}

# Keyword table; order matters (first match wins)
ECONOMIC_KEYWORDS: List[Tuple[str, Tuple[str, ...]]] = [
    ("валовий внутрішній продукт", ("ввп", "валов", "внутр", "продукт", "gdp")),
    ("вантажообіг", ("вантаж", "грузооб", "freight")),
    ("пасажирообіг", ("пасажир", "пассажир", "passenger")),
    (EXPORT, ("експорт", "экспорт", "export")),
    (IMPORT, ("імпорт", "импорт", "import")),
    ("заробітна плата", ("заробіт", "зарплат", "плата", "salary", "wage")),
    ("індекс промислової продукції", ("промисл", "промышл", "industrial")),
    ("індекс обсягу сільськогосподарського виробництва", ("сільськ", "сельск", "agricultural")),
    ("індекс будівельної продукції", ("будів", "строит", "construction")),
    ("індекс споживчих цін", ("споживч", "потребит", "consumer", "price")),
    ("індекс цін виробників промислової продукції", ("виробник", "производит", "producer")),
]

EXPORT_IMPORT_RATIO_WEIGHT = 1.4

ECONOMY_SCALE = five_band_scale(
    (
        "Відмінний економічний стан",
        "Добрий економічний стан",
        "Задовільний економічний стан",
        "Незадовільний економічний стан",
        "Критичний економічний стан",
    )
)

_classifier = KeywordClassifier(ECONOMIC_KEYWORDS, known_keys=tuple(ECONOMIC_INDICATORS))


def normalize_group(indicators: List[Dict], kind: str) -> List[Dict]:
    """Score indicators of one kind relative to each other (in place)."""
    if not indicators:
        return indicators
    if len(indicators) == 1:
        indicators[0]["score"] = ECONOMY_SINGLE_INDICATOR_SCORE
        return indicators
    low, high = min_max([i["value"] for i in indicators])
    spread = high - low
    for indicator in indicators:
        if spread == 0:
            indicator["score"] = 0.5
        elif kind == HIGHER_BETTER:
            indicator["score"] = (indicator["value"] - low) / spread
        else:
            indicator["score"] = 1 - (indicator["value"] - low) / spread
    return indicators


@dataclass
class EconomyStatusScorer(Scorer):
    def score(self, frame: pd.DataFrame) -> Indicator:
        economy = filter_by_category(frame, ECONOMY_CATEGORY_KEYWORDS)
        if economy.empty:
            return Indicator.no_data(NO_DATA_TEXT)

        recognized: List[Dict] = []
        export_value: Optional[float] = None
        import_value: Optional[float] = None
        for row in latest_per_component(economy).itertuples(index=False):
            if pd.isna(row.numeric_value):
                logger.debug("Skipping %s: unparsable value %r", row.component_name, row.value)
                continue
            key = _classifier.match(row.component_name)
            if key is None:
                logger.debug("Unrecognised economy component %s", row.component_name)
                continue
            value = float(row.numeric_value)
            info = ECONOMIC_INDICATORS[key]
            if key == EXPORT:
                export_value = value
            elif key == IMPORT:
                import_value = value
            recognized.append(
                {
                    "name": row.component_name,
                    "indicator": key,
                    "shortName": info.short_name,
                    "value": value,
                    "unit": info.unit,
                    "weight": info.weight,
                    "type": info.kind,
                    "date": row.measurement_date,
                }
            )

        if not recognized:
            return Indicator.no_data(INSUFFICIENT_TEXT)

        higher = [i for i in recognized if i["type"] == HIGHER_BETTER]
        lower = [i for i in recognized if i["type"] == LOWER_BETTER]

        if export_value is not None and import_value is not None and import_value > 0:
            ratio = {
                "name": "Співвідношення експорт/імпорт",
                "indicator": "export_import_ratio",
                "shortName": "Експорт/Імпорт",
                "value": export_value / import_value,
                "unit": "",
                "weight": EXPORT_IMPORT_RATIO_WEIGHT,
                "type": HIGHER_BETTER,
                "date": self.clock().date().isoformat(),
            }
            recognized.append(ratio)
            higher.append(ratio)
            logger.debug("Export/import ratio %.2f", ratio["value"])

        scored = normalize_group(higher, HIGHER_BETTER) + normalize_group(lower, LOWER_BETTER)
        mean = weighted_mean([i["score"] for i in scored], [i["weight"] for i in scored])
        index = NEUTRAL_INDEX if mean is None else mean * 100
        logger.debug("Economy index %.2f over %s indicators", index, len(scored))

        ranked = sorted(scored, key=lambda i: i["score"])
        worst = ranked[0] if ranked else None
        best = ranked[-1] if ranked else None

        suffix = ""
        if worst is not None and worst["score"] < 0.3:
            suffix = f" (проблемний показник: {worst['shortName']})"
        elif best is not None and best["score"] > 0.7:
            suffix = f" (сильний показник: {best['shortName']})"

        band = ECONOMY_SCALE.classify(index)
        return Indicator.from_band(
            round_half_up(index), band, suffix, indicators=scored, worstIndicator=worst, bestIndicator=best
        )


def calculate_economy_status_index(measurements, clock: Optional[Clock] = None) -> Indicator:
    scorer = EconomyStatusScorer() if clock is None else EconomyStatusScorer(clock=clock)
    return scorer.compute(measurements)
