import pytest

from envindex.config import GREEN, TEAL, YELLOW
from envindex.radiation import (
    NO_DATA_TEXT,
    NO_VALID_DATA_TEXT,
    annual_dose,
    calculate_radiation_level_index,
    dose_coefficient,
    is_radiation_measurement,
    radiation_level,
    risk_category,
)


def _rad(value, component="Рівень радіації", category="Рівень радіації", date="2024-05-01"):
    return {"category_name": category, "component_name": component, "value": value, "measurement_date": date}


def test_levels_and_coefficients():
    assert radiation_level(0.2).key == "NORMAL"
    assert radiation_level(0.3).key == "ACCEPTABLE"
    assert radiation_level(1.2).key == "ELEVATED"
    assert radiation_level(5).key == "DANGEROUS"
    assert dose_coefficient(0.15) == 0.8
    assert dose_coefficient(20) == 3.0
    assert risk_category(1e-6).key == "NEGLIGIBLE"
    assert risk_category(2e-5).key == "OPTIMIZATION_REQUIRED"
    assert annual_dose(1.0) == pytest.approx(8.76)


def test_normal_background():
    result = calculate_radiation_level_index([_rad("0.15")])

    assert result.class_ == 1
    assert result.value == "0.150"
    assert result.text == "Звичайний рівень радіаційного фону"
    assert result.color == TEAL
    # 0.15 uSv/h -> 1.314 mSv/year -> 1.314 * 5e-5 * 0.8
    assert result.extras["risk"]["value"] == pytest.approx(5.256e-5)
    assert result.extras["risk"]["category"] == "UNACCEPTABLE"


def test_value_with_unit_suffix():
    result = calculate_radiation_level_index([_rad("0.15 мкЗв/год")])

    assert result.value == "0.150"
    assert result.class_ == 1


def test_elevated_level_reports_risk():
    result = calculate_radiation_level_index([_rad("0.5")])
    assert result.class_ == 3
    assert result.color == YELLOW
    assert result.text == "Підвищений рівень радіаційного фону (Недопустимий ризик)"
    assert result.extras["details"]["doseCoefficient"] == 1.5


def test_highest_latest_component_decides():
    result = calculate_radiation_level_index(
        [
            _rad("0.1", component="Гамма-фон"),
            _rad("0.25", component="Потужність дози"),
            _rad("0.9", component="Гамма-фон", date="2023-01-01"),
        ]
    )
    assert result.value == "0.250"
    assert result.class_ == 2
    assert result.color == GREEN
    assert result.extras["component"] == "Потужність дози"


def test_category_decides_before_component():
    assert is_radiation_measurement("", "рівень радіації")
    assert not is_radiation_measurement("економічний стан", "пенсійний фонд")
    result = calculate_radiation_level_index([_rad("0.5", component="Радіаційний фон", category="Економічний стан")])
    assert result.text == NO_DATA_TEXT


def test_no_valid_values():
    result = calculate_radiation_level_index([_rad("0"), _rad("н/д", component="Гамма-фон")])
    assert result.value is None
    assert result.class_ is None
    assert result.text == NO_VALID_DATA_TEXT


def test_no_data():
    result = calculate_radiation_level_index([])
    assert result.value is None
    assert result.text == NO_DATA_TEXT
