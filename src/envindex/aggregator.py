from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional

from .air import AirQualityScorer
from .config import DOMAIN_KEYS
from .economy import EconomyStatusScorer
from .energy import EnergyStatusScorer
from .health import HealthStatusScorer
from .indicator import Indicator
from .preprocessing import MeasurementPreprocessor
from .radiation import RadiationLevelScorer
from .scorer import Clock, Scorer
from .soil import SoilQualityScorer
from .water import WaterQualityScorer

logger = logging.getLogger(__name__)

SCORER_TYPES = {
    "airQuality": AirQualityScorer,
    "waterQuality": WaterQualityScorer,
    "soilQuality": SoilQualityScorer,
    "radiationLevel": RadiationLevelScorer,
    "economyStatus": EconomyStatusScorer,
    "healthStatus": HealthStatusScorer,
    "energyStatus": EnergyStatusScorer,
}


@dataclass
class IndicatorAggregator:
    """All seven domain scorers behind one call.

    Measurements are preprocessed once and every scorer runs in isolation:
    a scorer that raises yields an error placeholder for its own domain and
    leaves the other domains untouched.
    """

    scorers: Dict[str, Scorer]
    preprocessor: MeasurementPreprocessor = field(default_factory=MeasurementPreprocessor)

    @classmethod
    def create_default(cls, clock: Optional[Clock] = None) -> "IndicatorAggregator":
        clock = datetime.now if clock is None else clock
        preprocessor = MeasurementPreprocessor()
        scorers = {key: SCORER_TYPES[key](clock=clock, preprocessor=preprocessor) for key in DOMAIN_KEYS}
        return cls(scorers=scorers, preprocessor=preprocessor)

    def compute(self, measurements) -> Dict[str, Indicator]:
        try:
            frame = self.preprocessor.transform(measurements)
        except Exception:
            logger.exception("Could not read measurements")
            return {key: Indicator.error() for key in self.scorers}

        results: Dict[str, Indicator] = {}
        for key, scorer in self.scorers.items():
            try:
                results[key] = scorer.score(frame)
            except Exception:
                logger.exception("Scorer %s failed", key)
                results[key] = Indicator.error()
        return results

    def compute_dict(self, measurements) -> Dict[str, Dict[str, Any]]:
        return {key: indicator.to_dict() for key, indicator in self.compute(measurements).items()}


def calculate_all_indicators(measurements, clock: Optional[Clock] = None) -> Dict[str, Indicator]:
    return IndicatorAggregator.create_default(clock).compute(measurements)
