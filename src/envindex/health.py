"""Population health index.

Health indicators form a two-level taxonomy: seven categories, each with a
handful of subcategories that carry their own normalisation rule
(``lower-better``, ``higher-better`` or ``optimal-range``), baseline and
weight. Indicator scores are rolled up into per-category scores, and the
categories into one index using the categories' own weights.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple, Union

import pandas as pd

from .classifier import KeywordClassifier, KeywordTable
from .config import NEUTRAL_INDEX
from .indicator import Indicator, five_band_scale
from .preprocessing import filter_by_category, latest_per_component
from .scorer import Clock, Scorer
from .utils import round_half_up, text_or, weighted_mean

logger = logging.getLogger(__name__)

HEALTH_CATEGORY_KEYWORDS = ("здоров", "захворюван", "медик", "медиц", "health", "medic")

NO_DATA_TEXT = "Немає даних про стан здоров'я населення"
INSUFFICIENT_TEXT = "Недостатньо даних для оцінки стану здоров'я"

LOWER_BETTER = "lower-better"
HIGHER_BETTER = "higher-better"
OPTIMAL_RANGE = "optimal-range"

Baseline = Union[float, Tuple[float, float], None]


@dataclass(frozen=True)
class HealthSubcategory:
    kind: str
    baseline: Baseline
    weight: float


@dataclass(frozen=True)
class HealthCategory:
    kind: str
    weight: float
    short_name: str
    subcategories: Dict[str, HealthSubcategory]


S = HealthSubcategory

HEALTH_CATEGORIES: Dict[str, HealthCategory] = {
    "медико-демографічні показники": HealthCategory(
        LOWER_BETTER,
        1.5,
        "Медико-демографічні",
        {
            "народжуваність": S(HIGHER_BETTER, 15, 1.2),  # per 1000
            "смертність": S(LOWER_BETTER, 10, 1.3),  # per 1000
            "дитяча смертність": S(LOWER_BETTER, 5, 1.5),  # per 1000 live births
            "природний приріст": S(HIGHER_BETTER, 0, 1.4),
            "смертність від хвороб системи кровообігу": S(LOWER_BETTER, 600, 1.2),  # per 100k
            "смертність від новоутворень": S(LOWER_BETTER, 160, 1.2),  # per 100k
        },
    ),
    "показники захворюваності та поширення хвороб": HealthCategory(
        LOWER_BETTER,
        1.4,
        "Захворюваність",
        {
            "загальна захворюваність": S(LOWER_BETTER, 60000, 1.0),  # per 100k
            "первинна захворюваність": S(LOWER_BETTER, 50000, 1.1),
            "хвороби системи кровообігу": S(LOWER_BETTER, 4000, 1.2),
            "хвороби органів дихання": S(LOWER_BETTER, 15000, 1.1),
            "хвороби органів травлення": S(LOWER_BETTER, 3000, 1.0),
            "інфекційні хвороби": S(LOWER_BETTER, 2000, 1.3),
        },
    ),
    "інвалідності та інвалідизації": HealthCategory(
        LOWER_BETTER,
        1.3,
        "Інвалідність",
        {
            "загальна інвалідність": S(LOWER_BETTER, 60, 1.1),  # per 1000
            "первинна інвалідність": S(LOWER_BETTER, 10, 1.2),
            "інвалідність серед дітей": S(LOWER_BETTER, 20, 1.3),
            "інвалідність внаслідок травм": S(LOWER_BETTER, 3, 1.0),
        },
    ),
    "фізичного розвитку населення": HealthCategory(
        OPTIMAL_RANGE,
        1.1,
        "Фізичний розвиток",
        {
            "частка дітей з нормальним фізичним розвитком": S(HIGHER_BETTER, 80, 1.2),  # %
            "частка осіб з надлишковою вагою": S(LOWER_BETTER, 20, 1.0),
            "частка осіб з дефіцитом ваги": S(LOWER_BETTER, 5, 1.0),
            "середній зріст дітей": S(OPTIMAL_RANGE, (140, 180), 0.9),  # cm
        },
    ),
    "ризики захворювання": HealthCategory(
        LOWER_BETTER,
        1.2,
        "Ризики захворювань",
        {
            "ризик серцево-судинних захворювань": S(LOWER_BETTER, 10, 1.3),  # %
            "ризик онкологічних захворювань": S(LOWER_BETTER, 5, 1.3),
            "ризик інфекційних захворювань": S(LOWER_BETTER, 3, 1.2),
            "ризик цукрового діабету": S(LOWER_BETTER, 5, 1.1),
        },
    ),
    "прогноз захворювання": HealthCategory(
        HIGHER_BETTER,
        1.1,
        "Прогноз захворювань",
        {
            "прогноз одужання": S(HIGHER_BETTER, 80, 1.2),  # %
            "прогноз ускладнень": S(LOWER_BETTER, 20, 1.1),
            "прогноз виживання": S(HIGHER_BETTER, 90, 1.3),
        },
    ),
    "прогноз тривалості життя": HealthCategory(
        HIGHER_BETTER,
        1.6,
        "Тривалість життя",
        {
            "очікувана тривалість життя при народженні": S(HIGHER_BETTER, 75, 1.5),  # years
            "очікувана тривалість здорового життя": S(HIGHER_BETTER, 65, 1.4),
            "очікувана тривалість життя у віці 60 років": S(HIGHER_BETTER, 20, 1.2),
        },
    ),
}

del S

# Categories first, then subcategories; order matters (first match wins)
HEALTH_KEYWORDS: List[Tuple[str, Tuple[str, ...]]] = [
    ("медико-демографічні показники", ("демограф", "народжуван", "смертн", "приріст", "вік", "населення", "демогр", "рожд", "смерт")),
    ("показники захворюваності та поширення хвороб", ("захворюва", "хвороб", "патолог", "заболева", "болезн", "поширен", "распространен")),
    ("інвалідності та інвалідизації", ("інвалід", "непрацездат", "неповносправ", "инвалид", "нетрудоспособ")),
    ("фізичного розвитку населення", ("фізичн", "розвит", "фізик", "развит", "зріст", "рост", "вага", "вес")),
    ("ризики захворювання", ("ризик", "риск", "ймовірн", "вероятн", "фактор")),
    ("прогноз захворювання", ("прогноз", "передбач", "предсказ", "предикт", "предвид")),
    ("прогноз тривалості життя", ("тривал", "продолж", "життя", "жизн", "виживан", "выжива")),

    ("народжуваність", ("народжуван", "рождаем")),
    ("смертність", ("смертн", "смерт", "летальн")),
    ("дитяча смертність", ("дитяч", "детск", "младенч", "немовля")),
    ("природний приріст", ("приріст", "прирост")),
    ("смертність від хвороб системи кровообігу", ("кровообіг", "кровообращ", "серцев", "сердеч")),
    ("смертність від новоутворень", ("новоутвор", "онко", "рак")),

    ("загальна захворюваність", ("загальн", "общ", "всего")),
    ("первинна захворюваність", ("первинн", "первичн", "нові", "новые")),
    ("хвороби системи кровообігу", ("серц", "сердц", "кровообіг", "кровообращ", "інфаркт", "інсульт")),
    ("хвороби органів дихання", ("дихан", "легені", "бронхіт", "пневмоні")),
    ("хвороби органів травлення", ("травл", "шлунк", "желудок", "печінк", "печень")),
    ("інфекційні хвороби", ("інфекц", "вірус", "бактері")),

    ("загальна інвалідність", ("загальн", "общ", "всего")),
    ("первинна інвалідність", ("первинн", "первичн", "нові", "новые")),
    ("інвалідність серед дітей", ("діт", "дет")),
    ("інвалідність внаслідок травм", ("травм", "ушкодж", "поврежд")),

    ("частка дітей з нормальним фізичним розвитком", ("нормальн", "діт", "дет")),
    ("частка осіб з надлишковою вагою", ("надлишк", "избыточ", "ожирін", "ожирен")),
    ("частка осіб з дефіцитом ваги", ("дефіцит", "недостатн", "худ")),
    ("середній зріст дітей", ("зріст", "рост", "діт", "дет")),

    ("ризик серцево-судинних захворювань", ("серц", "сердц", "судин")),
    ("ризик онкологічних захворювань", ("онко", "рак", "злояк", "злокач")),
    ("ризик інфекційних захворювань", ("інфекц", "вірус", "бактері")),
    ("ризик цукрового діабету", ("діабет", "цукр", "сахар")),

    ("прогноз одужання", ("одуж", "выздоров", "ремісі", "ремиссия")),
    ("прогноз ускладнень", ("ускладн", "осложн")),
    ("прогноз виживання", ("вижива", "выжива", "пережива")),

    ("очікувана тривалість життя при народженні", ("народж", "рожден")),
    ("очікувана тривалість здорового життя", ("здоров", "здрав")),
    ("очікувана тривалість життя у віці 60 років", ("60", "стар", "пенсійн", "пенсион", "похил")),
]

HEALTH_SCALE = five_band_scale(
    (
        "Дуже добрий стан здоров'я населення",
        "Добрий стан здоров'я населення",
        "Задовільний стан здоров'я населення",
        "Незадовільний стан здоров'я населення",
        "Критичний стан здоров'я населення",
    )
)


def _subcategory_table(category: HealthCategory) -> KeywordTable:
    return [(key, keywords) for key, keywords in HEALTH_KEYWORDS if key in category.subcategories]


_SUBCATEGORY_KEYS = {sub for info in HEALTH_CATEGORIES.values() for sub in info.subcategories}

# subcategory names must not shadow their categories in the first pass
_category_classifier = KeywordClassifier(
    [(key, keywords) for key, keywords in HEALTH_KEYWORDS if key not in _SUBCATEGORY_KEYS]
)
_subcategory_classifiers: Dict[str, KeywordClassifier] = {
    name: KeywordClassifier(_subcategory_table(info)) for name, info in HEALTH_CATEGORIES.items()
}


def classify_health_component(
    component_name: str, category_name: Optional[str] = None
) -> Tuple[Optional[str], Optional[str]]:
    """Resolve a component to ``(category, subcategory)``.

    1. category by component name, then a subcategory within it;
    2. otherwise any subcategory of any category, categories in table order;
    3. otherwise the category by the measurement's own category name.
    """
    category = _category_classifier.match(component_name)
    if category is not None:
        return category, _subcategory_classifiers[category].match(component_name)

    for name in HEALTH_CATEGORIES:
        subcategory = _subcategory_classifiers[name].match(component_name)
        if subcategory is not None:
            return name, subcategory

    if category_name:
        return _category_classifier.match(category_name), None
    return None, None


def normalize_health_value(value: float, kind: str, baseline: Baseline) -> float:
    """Map a reading onto [0, 1]; a zero baseline counts as no baseline."""
    if kind == LOWER_BETTER:
        if baseline:
            return 1.0 if value <= 0 else max(0.0, 1 - value / (baseline * 2))
        return max(0.0, 1 - value / 100)
    if kind == HIGHER_BETTER:
        if baseline:
            return 1.0 if value >= baseline * 2 else min(1.0, value / baseline)
        return min(1.0, value / 100)
    if kind == OPTIMAL_RANGE and isinstance(baseline, tuple):
        lo, hi = baseline
        if lo <= value <= hi:
            return 1.0
        if value < lo:
            return max(0.0, value / lo)
        return max(0.0, hi / value)
    return 0.5


@dataclass
class HealthStatusScorer(Scorer):
    def score(self, frame: pd.DataFrame) -> Indicator:
        health = filter_by_category(frame, HEALTH_CATEGORY_KEYWORDS)
        if health.empty:
            return Indicator.no_data(NO_DATA_TEXT)

        indicators: List[Dict] = []
        by_category: Dict[str, List[Dict]] = {}
        for row in latest_per_component(health).itertuples(index=False):
            if pd.isna(row.numeric_value):
                logger.debug("Skipping %s: unparsable value %r", row.component_name, row.value)
                continue
            category, subcategory = classify_health_component(row.component_name, row.category_lower)
            if category is None:
                logger.debug("Unrecognised health component %s", row.component_name)
                continue

            info = HEALTH_CATEGORIES[category]
            if subcategory is not None:
                sub = info.subcategories[subcategory]
                kind, baseline, weight = sub.kind, sub.baseline, sub.weight
            else:
                kind, baseline, weight = info.kind, None, info.weight

            value = float(row.numeric_value)
            normalized = normalize_health_value(value, kind, baseline)
            indicator = {
                "name": row.component_name,
                "category": category,
                "subCategory": subcategory,
                "value": value,
                "unit": text_or(row.unit),
                "normalizedValue": normalized,
                "weight": weight,
                "weightedValue": normalized * weight,
                "date": row.measurement_date,
            }
            indicators.append(indicator)
            by_category.setdefault(category, []).append(indicator)
            logger.debug(
                "%s -> %s / %s, normalized %.2f", row.component_name, category, subcategory, normalized
            )

        if not indicators:
            return Indicator.no_data(INSUFFICIENT_TEXT)

        category_scores: Dict[str, float] = {}
        for category, members in by_category.items():
            score = weighted_mean([i["normalizedValue"] for i in members], [i["weight"] for i in members])
            if score is not None:
                category_scores[category] = score

        mean = weighted_mean(
            list(category_scores.values()), [HEALTH_CATEGORIES[c].weight for c in category_scores]
        )
        index = NEUTRAL_INDEX if mean is None else mean * 100
        logger.debug("Health index %.2f over %s categories", index, len(category_scores))

        ranked = sorted(
            ({"category": c, "score": s} for c, s in category_scores.items()), key=lambda c: c["score"]
        )
        worst = ranked[0] if ranked else None
        best = ranked[-1] if ranked else None

        suffix = ""
        if worst is not None and worst["score"] < 0.3:
            suffix = f" (проблемна категорія: {HEALTH_CATEGORIES[worst['category']].short_name})"

        band = HEALTH_SCALE.classify(index)
        return Indicator.from_band(
            round_half_up(index),
            band,
            suffix,
            indicators=indicators,
            categories=by_category,
            categoryScores=category_scores,
            worstCategory=worst,
            bestCategory=best,
        )


def calculate_health_status_index(measurements, clock: Optional[Clock] = None) -> Indicator:
    scorer = HealthStatusScorer() if clock is None else HealthStatusScorer(clock=clock)
    return scorer.compute(measurements)
