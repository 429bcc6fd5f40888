"""envindex — composite environmental indices for monitored facilities

Seven domain scorers (air, water, soil, radiation, economy, health, energy)
turn raw measurement records into classified indicators.

Main entrypoint: :class:`envindex.aggregator.IndicatorAggregator`
"""

from .aggregator import IndicatorAggregator, calculate_all_indicators
from .air import AirQualityScorer, calculate_air_quality_index
from .economy import EconomyStatusScorer, calculate_economy_status_index
from .energy import EnergyStatusScorer, calculate_energy_status_index
from .facilities import Facility, load_facilities, score_facilities
from .health import HealthStatusScorer, calculate_health_status_index
from .indicator import Indicator
from .preprocessing import Measurement, MeasurementPreprocessor
from .radiation import RadiationLevelScorer, calculate_radiation_level_index
from .soil import SoilQualityScorer, calculate_soil_quality_index
from .water import WaterQualityScorer, calculate_water_quality_index

__all__ = [
    "IndicatorAggregator",
    "calculate_all_indicators",
    "Indicator",
    "Measurement",
    "MeasurementPreprocessor",
    "AirQualityScorer",
    "WaterQualityScorer",
    "SoilQualityScorer",
    "RadiationLevelScorer",
    "EconomyStatusScorer",
    "HealthStatusScorer",
    "EnergyStatusScorer",
    "calculate_air_quality_index",
    "calculate_water_quality_index",
    "calculate_soil_quality_index",
    "calculate_radiation_level_index",
    "calculate_economy_status_index",
    "calculate_health_status_index",
    "calculate_energy_status_index",
    "Facility",
    "load_facilities",
    "score_facilities",
]
