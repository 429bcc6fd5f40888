"""Indicator records and ordinal classification scales.

Every scorer reduces its measurements to an :class:`Indicator`: a display
value, an ordinal class, a label and a color, plus domain-specific extras.
``value is None`` means "insufficient data" and is distinct from any real
score.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Sequence, Tuple, Union

from .config import ERROR_TEXT, NO_DATA_COLOR, SCORE_BREAKPOINTS, SCORE_COLORS


@dataclass(frozen=True)
class Band:
    bound: float
    class_: int
    text: str
    color: str


@dataclass(frozen=True)
class ScoreScale:
    """Ordered bands; a score lands in the first band whose
    bound it reaches (``>=``). The last band catches everything."""

    bands: Tuple[Band, ...]

    def classify(self, score: float) -> Band:
        for band in self.bands[:-1]:
            if score >= band.bound:
                return band
        return self.bands[-1]


def five_band_scale(labels: Sequence[str]) -> ScoreScale:
    """The 80/60/40/20 scale with per-domain labels (class 1 = best)."""
    if len(labels) != 5:
        raise ValueError(f"Expected 5 labels, got {len(labels)}")
    lowers = SCORE_BREAKPOINTS + (float("-inf"),)
    bands = tuple(
        Band(bound=lo, class_=i + 1, text=text, color=color)
        for i, (lo, text, color) in enumerate(zip(lowers, labels, SCORE_COLORS))
    )
    return ScoreScale(bands=bands)


@dataclass
class Indicator:
    value: Union[float, int, str, None]
    class_: Optional[int]
    text: str
    color: str
    extras: Dict[str, Any] = field(default_factory=dict)

    @property
    def has_data(self) -> bool:
        return self.value is not None

    @classmethod
    def no_data(cls, text: str) -> "Indicator":
        return cls(value=None, class_=None, text=text, color=NO_DATA_COLOR)

    @classmethod
    def error(cls) -> "Indicator":
        return cls.no_data(ERROR_TEXT)

    @classmethod
    def from_band(cls, value, band: Band, suffix: str = "", **extras) -> "Indicator":
        return cls(value=value, class_=band.class_, text=band.text + suffix, color=band.color, extras=extras)

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "value": self.value,
            "class": self.class_,
            "text": self.text,
            "color": self.color,
        }
        out.update(self.extras)
        return out
