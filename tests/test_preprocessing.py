import math

import pandas as pd
import pytest

from envindex.preprocessing import (
    Measurement,
    MeasurementPreprocessor,
    filter_by_category,
    latest_per_component,
    season_of_month,
)


def _frame(records):
    return MeasurementPreprocessor().transform(records)


def test_transform_never_drops_rows():
    records = [
        {"category_name": "Якість повітря", "component_name": "NO2", "value": "1.5", "measurement_date": "2024-01-05"},
        {"category_name": "Якість повітря", "component_name": "NO2", "value": " 2 ", "measurement_date": "not a date"},
        {"category_name": None, "component_name": None, "value": "abc", "measurement_date": None},
        {"category_name": "Якість повітря", "component_name": "SO2", "value": None},
        {"category_name": "Якість повітря", "component_name": "SO2", "value": "inf"},
    ]
    df = _frame(records)

    assert len(df) == 5
    assert df["numeric_value"].iloc[0] == 1.5
    assert df["numeric_value"].iloc[1] == 2.0
    # unparsable, missing and non-finite values become NaN
    assert df["numeric_value"].iloc[2:].isna().all()
    assert df["date"].iloc[0] == pd.Timestamp("2024-01-05", tz="UTC")
    assert pd.isna(df["date"].iloc[1])
    assert df["component_name"].iloc[2] == ""
    assert df["category_lower"].iloc[0] == "якість повітря"
    assert list(df["order"]) == [0, 1, 2, 3, 4]


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("0.15 мкЗв/год", 0.15),
        ("12.5 мг/л", 12.5),
        ("  -3e2kg", -300.0),
        (".5", 0.5),
        ("1.2.3", 1.2),
        ("12,5", 12.0),
    ],
)
def test_transform_reads_leading_number(raw, expected):
    df = _frame([{"category_name": "Рівень радіації", "component_name": "x", "value": raw}])
    assert df["numeric_value"].iloc[0] == pytest.approx(expected)
    # the raw value is kept as given
    assert df["value"].iloc[0] == raw


@pytest.mark.parametrize("raw", ["мг/л 12", "", "-", "Infinity", "nan"])
def test_transform_without_leading_number_is_nan(raw):
    df = _frame([{"component_name": "x", "value": raw}])
    assert math.isnan(df["numeric_value"].iloc[0])


def test_transform_accepts_measurement_objects_and_missing_columns():
    df = _frame([Measurement("Стан ґрунтів", "Гумус", 4)])
    assert df["numeric_value"].iloc[0] == 4.0
    assert df["unit"].isna().all()

    df = _frame([{"component_name": "Гумус"}])
    assert df["category_lower"].iloc[0] == ""
    assert math.isnan(df["numeric_value"].iloc[0])


def test_transform_empty_input():
    df = _frame([])
    assert df.empty
    assert "numeric_value" in df.columns


@pytest.mark.parametrize("bad", [None, "text", {"value": 1}, 42])
def test_transform_rejects_non_sequences(bad):
    with pytest.raises(TypeError):
        MeasurementPreprocessor().transform(bad)


def test_custom_column_names():
    pre = MeasurementPreprocessor(category_col="cat", component_col="comp", value_col="v", date_col="d")
    df = pre.transform([{"cat": "Стан ґрунтів", "comp": "pH", "v": "6.5", "d": "2024-03-01"}])
    assert df["component_name"].iloc[0] == "pH"
    assert df["numeric_value"].iloc[0] == 6.5


def test_latest_per_component_picks_newest_and_keeps_first_on_ties():
    records = [
        {"component_name": "A", "value": 1, "measurement_date": "2024-01-01"},
        {"component_name": "B", "value": 2, "measurement_date": "2024-02-01"},
        {"component_name": "A", "value": 3, "measurement_date": "2024-03-01"},
        {"component_name": "A", "value": 4, "measurement_date": None},
        {"component_name": "B", "value": 5, "measurement_date": "2024-02-01"},
    ]
    latest = latest_per_component(_frame(records))

    assert list(latest["component_name"]) == ["A", "B"]
    assert list(latest["numeric_value"]) == [3.0, 2.0]


def test_latest_per_component_undated_only():
    records = [
        {"component_name": "A", "value": 1},
        {"component_name": "A", "value": 2},
    ]
    latest = latest_per_component(_frame(records))
    assert list(latest["numeric_value"]) == [1.0]


def test_filter_by_category():
    df = _frame(
        [
            {"category_name": "Стан повітря", "component_name": "NO2", "value": 1},
            {"category_name": "Стан ґрунтів", "component_name": "pH", "value": 7},
            {"category_name": None, "component_name": "x", "value": 7},
        ]
    )
    air = filter_by_category(df, ("повітря",))
    assert list(air["component_name"]) == ["NO2"]


def test_season_of_month():
    assert season_of_month(1) == "winter"
    assert season_of_month(6) == "summer"
    assert season_of_month(11) == "autumn"
    with pytest.raises(ValueError):
        season_of_month(13)
