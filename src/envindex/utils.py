from __future__ import annotations

import math
from typing import Iterable, Optional, Sequence, Tuple

import numpy as np
import pandas as pd


def clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    """Clamp a scalar into ``[low, high]``."""
    return float(min(high, max(low, value)))


def weighted_mean(scores: Sequence[float], weights: Sequence[float]) -> Optional[float]:
    """Weighted arithmetic mean; ``None`` when the weights sum to zero.

    Sums left to right so results do not depend on vectorised reduction order.
    """
    total = sum(float(w) for w in weights)
    if total == 0:
        return None
    return sum(float(s) * float(w) for s, w in zip(scores, weights)) / total


def round_half_up(value: float) -> int:
    """Round like ``Math.round``: halves go towards +inf."""
    return int(math.floor(value + 0.5))


def text_or(value, default: str = "") -> str:
    """``value`` when it is a non-empty string, else ``default`` (NaN/None safe)."""
    if isinstance(value, str) and value:
        return value
    return default


def min_max(values: Sequence[float]) -> Tuple[float, float]:
    arr = np.asarray(values, dtype=float)
    return float(arr.min()), float(arr.max())


def ensure_columns(df: pd.DataFrame, cols: Iterable[str]) -> None:
    missing = [c for c in cols if c not in df.columns]
    if missing:
        raise ValueError(f"Missing required columns: {missing}")


def safe_copy(df: pd.DataFrame) -> pd.DataFrame:
    # avoid view-related surprises
    return df.copy(deep=True)
