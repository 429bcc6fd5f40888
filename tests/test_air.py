from datetime import datetime, timedelta, timezone

from envindex.air import NO_DATA_TEXT, AirQualityScorer, calculate_air_quality_index
from envindex.config import GREEN, ORANGE, RED

JANUARY = lambda: datetime(2025, 1, 15)  # noqa: E731
JULY = lambda: datetime(2025, 7, 15)  # noqa: E731


def _air(component, value, date):
    return {
        "category_name": "Стан повітря",
        "component_name": component,
        "value": value,
        "unit": "мг/м3",
        "measurement_date": date,
    }


def test_latest_against_seasonal_average():
    measurements = [
        _air("Двоокис азоту (NO2)", "10", "2024-01-05"),
        _air("Двоокис азоту (NO2)", "10", "2024-02-05"),
        _air("Двоокис азоту (NO2)", "20", "2024-06-10"),
    ]
    result = calculate_air_quality_index(measurements, clock=JANUARY)

    assert result.value == "2.00"
    assert result.class_ == 1
    assert result.text == "Високе забруднення"
    assert result.color == RED
    (component,) = result.extras["components"]
    assert component["latestValue"] == 20.0
    assert component["seasonalAverage"] == 10.0


def test_seasonal_fallback_uses_whole_history():
    measurements = [
        _air("Двоокис сірки (SO2)", "4", "2024-01-05"),
        _air("Двоокис сірки (SO2)", "6", "2024-01-20"),
    ]
    result = calculate_air_quality_index(measurements, clock=JULY)

    assert result.value == "1.20"
    assert result.class_ == 2
    assert result.color == ORANGE


def test_alpha_is_averaged_over_components():
    measurements = [
        _air("NO2", "5", "2025-01-01"),
        _air("NO2", "5", "2025-01-10"),
        _air("SO2", "2", "2025-01-01"),
        _air("SO2", "1", "2025-01-10"),
    ]
    # NO2: 5/5 = 1.0, SO2: 1/1.5 = 0.667
    result = calculate_air_quality_index(measurements, clock=JANUARY)
    assert result.value == "0.83"
    assert result.class_ == 3


def test_zero_average_components_are_skipped():
    result = calculate_air_quality_index([_air("NO2", "0", "2025-01-01")], clock=JANUARY)
    assert result.value == "0.00"
    assert result.class_ == 4
    assert result.color == GREEN
    assert result.extras["components"] == []


def test_no_data():
    for measurements in (
        [],
        [{"category_name": "Стан ґрунтів", "component_name": "pH", "value": "7", "measurement_date": "2025-01-01"}],
        [_air("NO2", "5", None)],
        [_air("NO2", "n/a", "2025-01-01")],
    ):
        result = calculate_air_quality_index(measurements, clock=JANUARY)
        assert result.value is None
        assert result.class_ is None
        assert result.text == NO_DATA_TEXT


def test_is_deterministic():
    measurements = [_air("NO2", "3", "2024-12-01"), _air("NO2", "4", "2025-01-03")]
    scorer = AirQualityScorer(clock=JANUARY)
    assert scorer.compute(measurements).to_dict() == scorer.compute(measurements).to_dict()


def test_seasons_are_taken_in_utc():
    # 00:30 on 1 March at UTC+2 is still February in UTC, so both the reading
    # and the current date fall in winter
    kyiv = timezone(timedelta(hours=2))
    clock = lambda: datetime(2024, 3, 1, 0, 30, tzinfo=kyiv)  # noqa: E731
    measurements = [
        _air("NO2", "2", "2024-03-01T00:30:00+02:00"),
        _air("NO2", "1", "2024-06-01"),
    ]
    result = calculate_air_quality_index(measurements, clock=clock)

    (component,) = result.extras["components"]
    assert component["seasonalAverage"] == 2.0
    assert result.value == "0.50"
    assert result.class_ == 4
