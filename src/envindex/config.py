"""Engine configuration.

Edit this file to customize:
- indicator colors and the shared no-data / error placeholders
- season bucketing used by the air index
- the 80/60/40/20 score breakpoints shared by the five-band scorers
- neutral constants used when a component cannot be scored precisely

Domain tables (keywords, weights, baselines) live next to the scorer
that reads them.
"""

from __future__ import annotations

from typing import Dict, Tuple

# -----------------------------
# Colors
# -----------------------------

RED = "#FF5252"
ORANGE = "#FFA726"
YELLOW = "#FFEB3B"
GREEN = "#66BB6A"
TEAL = "#26A69A"
NO_DATA_COLOR = "#999999"

# Text shown when a scorer raised and the aggregator substituted a placeholder
ERROR_TEXT = "Помилка розрахунку"

# -----------------------------
# Seasons (calendar month -> season)
# -----------------------------
SEASON_MONTHS: Dict[str, Tuple[int, ...]] = {
    "winter": (12, 1, 2),
    "spring": (3, 4, 5),
    "summer": (6, 7, 8),
    "autumn": (9, 10, 11),
}

# -----------------------------
# Five-band scale
# -----------------------------
# Lower bounds (inclusive) for classes 1..4; anything below the last one is class 5.
SCORE_BREAKPOINTS: Tuple[float, float, float, float] = (80.0, 60.0, 40.0, 20.0)

# Colors for classes 1..5 of the five-band scale
SCORE_COLORS: Tuple[str, ...] = (TEAL, GREEN, YELLOW, ORANGE, RED)

# -----------------------------
# Neutral constants
# -----------------------------
# Soil components that match no known indicator still count with these.
SOIL_FALLBACK_SCORE = 0.5
SOIL_FALLBACK_WEIGHT = 0.7

# Economy type buckets holding a single indicator get this score.
ECONOMY_SINGLE_INDICATOR_SCORE = 0.7

# Index reported when every recognised indicator carries zero weight.
NEUTRAL_INDEX = 50.0

# Energy daily averages assume this many working days per month.
WORKING_DAYS_PER_MONTH = 22

# -----------------------------
# Aggregation
# -----------------------------
# Result keys, in the order the aggregator evaluates the domains.
DOMAIN_KEYS: Tuple[str, ...] = (
    "airQuality",
    "waterQuality",
    "soilQuality",
    "radiationLevel",
    "economyStatus",
    "healthStatus",
    "energyStatus",
)

# Category keywords used to tell which domains a facility has data for.
DOMAIN_CATEGORY_KEYWORDS: Dict[str, str] = {
    "air": "повітря",
    "water": "водн",
    "ground": "ґрунт",
    "radiation": "радіац",
    "economy": "економічн",
    "health": "здоров",
    "energy": "енергетичн",
}
