from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable

import pandas as pd

from .indicator import Indicator
from .preprocessing import MeasurementPreprocessor

Clock = Callable[[], datetime]


@dataclass
class Scorer:
    """Base for the per-domain scorers.

    ``compute`` takes raw measurement records; ``score`` takes a frame that
    already went through :class:`MeasurementPreprocessor`, so callers scoring
    several domains can preprocess once.
    """

    clock: Clock = datetime.now
    preprocessor: MeasurementPreprocessor = field(default_factory=MeasurementPreprocessor)

    def compute(self, measurements) -> Indicator:
        return self.score(self.preprocessor.transform(measurements))

    def score(self, frame: pd.DataFrame) -> Indicator:
        raise NotImplementedError
