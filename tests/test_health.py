import pytest

from envindex.health import (
    HIGHER_BETTER,
    INSUFFICIENT_TEXT,
    LOWER_BETTER,
    NO_DATA_TEXT,
    OPTIMAL_RANGE,
    calculate_health_status_index,
    classify_health_component,
    normalize_health_value,
)

DEMOGRAPHY = "медико-демографічні показники"
MORBIDITY = "показники захворюваності та поширення хвороб"
RISKS = "ризики захворювання"
LIFE_EXPECTANCY = "прогноз тривалості життя"


def _health(component, value, category="Стан здоров'я населення", date="2024-01-01"):
    return {"category_name": category, "component_name": component, "value": value, "measurement_date": date}


def test_category_then_subcategory():
    assert classify_health_component("Народжуваність") == (DEMOGRAPHY, "народжуваність")
    assert classify_health_component("Очікувана тривалість життя при народженні") == (
        LIFE_EXPECTANCY,
        "очікувана тривалість життя при народженні",
    )
    # subcategories are scanned in table order, first match wins
    assert classify_health_component("Смертність від новоутворень") == (DEMOGRAPHY, "смертність")


def test_subcategory_fallback_across_categories():
    assert classify_health_component("Інфаркт міокарда") == (MORBIDITY, "хвороби системи кровообігу")


def test_measurement_category_fallback():
    assert classify_health_component("Показник X", "стан здоров'я: ризики") == (RISKS, None)
    assert classify_health_component("Показник X", "стан здоров'я") == (None, None)
    assert classify_health_component("Показник X") == (None, None)


def test_normalize_health_value():
    assert normalize_health_value(5, LOWER_BETTER, 10) == pytest.approx(0.75)
    assert normalize_health_value(0, LOWER_BETTER, 10) == 1.0
    assert normalize_health_value(30, LOWER_BETTER, 10) == 0.0
    assert normalize_health_value(40, LOWER_BETTER, None) == pytest.approx(0.6)
    assert normalize_health_value(30, HIGHER_BETTER, 15) == 1.0
    assert normalize_health_value(7.5, HIGHER_BETTER, 15) == pytest.approx(0.5)
    # a zero baseline behaves like no baseline
    assert normalize_health_value(5, HIGHER_BETTER, 0) == pytest.approx(0.05)
    assert normalize_health_value(160, OPTIMAL_RANGE, (140, 180)) == 1.0
    assert normalize_health_value(70, OPTIMAL_RANGE, (140, 180)) == pytest.approx(0.5)
    assert normalize_health_value(360, OPTIMAL_RANGE, (140, 180)) == pytest.approx(0.5)
    assert normalize_health_value(50, OPTIMAL_RANGE, None) == 0.5


def test_two_stage_rollup():
    measurements = [
        _health("Народжуваність", "15"),
        _health("Смертність", "10"),
        _health("Очікувана тривалість життя при народженні", "75"),
    ]
    result = calculate_health_status_index(measurements)

    scores = result.extras["categoryScores"]
    # (1.0 * 1.2 + 0.5 * 1.3) / 2.5
    assert scores[DEMOGRAPHY] == pytest.approx(0.74)
    assert scores[LIFE_EXPECTANCY] == pytest.approx(1.0)
    # categories weighted 1.5 and 1.6
    assert result.value == 87
    assert result.class_ == 1
    assert result.text == "Дуже добрий стан здоров'я населення"
    assert result.extras["worstCategory"]["category"] == DEMOGRAPHY
    assert result.extras["bestCategory"]["category"] == LIFE_EXPECTANCY
    assert len(result.extras["categories"][DEMOGRAPHY]) == 2


def test_problem_category_suffix():
    result = calculate_health_status_index([_health("Інвалідність внаслідок травм", "6")])
    assert result.value == 0
    assert result.class_ == 5
    assert result.text == "Критичний стан здоров'я населення (проблемна категорія: Інвалідність)"


def test_category_level_rule_without_subcategory():
    result = calculate_health_status_index([_health("Показник X", "40", category="Стан здоров'я: ризики")])
    (indicator,) = result.extras["indicators"]
    assert indicator["subCategory"] is None
    assert indicator["weight"] == 1.2
    assert indicator["normalizedValue"] == pytest.approx(0.6)
    assert result.value == 60


def test_insufficient_and_no_data():
    result = calculate_health_status_index([_health("Показник X", "1", category="Стан здоров'я")])
    assert result.value is None
    assert result.text == INSUFFICIENT_TEXT

    for measurements in ([], [_health("Народжуваність", "15", category="Економічний стан")]):
        result = calculate_health_status_index(measurements)
        assert result.value is None
        assert result.class_ is None
        assert result.text == NO_DATA_TEXT
