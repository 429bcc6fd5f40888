import pytest

from envindex.air import ALPHA_SCALE
from envindex.classifier import KeywordClassifier, contains_any
from envindex.economy import ECONOMY_SCALE
from envindex.energy import ENERGY_SCALE
from envindex.health import HEALTH_SCALE
from envindex.soil import SOIL_SCALE

TABLE = [
    ("first", ("ab", "xy")),
    ("second", ("b",)),
]


def test_contains_any():
    assert contains_any("Двоокис АЗОТУ", ("азот",))
    assert not contains_any(None, ("азот",))
    assert not contains_any("", ("азот",))


def test_first_match_wins():
    clf = KeywordClassifier(TABLE)
    # "ab" also contains "b", but the earlier entry wins
    assert clf.match("AB") == "first"
    assert clf.match("b") == "second"
    assert clf.match("zzz") is None
    assert clf.match(None) is None


def test_known_keys_take_precedence():
    clf = KeywordClassifier(TABLE, known_keys=("second xy",))
    assert clf.match("Second XY") == "second xy"


def test_matches_any():
    clf = KeywordClassifier(TABLE)
    assert clf.matches_any("abc")
    assert not clf.matches_any("zzz")


@pytest.mark.parametrize("scale", [SOIL_SCALE, ECONOMY_SCALE, HEALTH_SCALE, ENERGY_SCALE])
def test_five_band_boundaries_are_inclusive(scale):
    assert scale.classify(80.0).class_ == 1
    assert scale.classify(79.999).class_ == 2
    assert scale.classify(60.0).class_ == 2
    assert scale.classify(40.0).class_ == 3
    assert scale.classify(20.0).class_ == 4
    assert scale.classify(19.999).class_ == 5
    assert scale.classify(0).class_ == 5


def test_alpha_scale_boundaries():
    assert ALPHA_SCALE.classify(1.5).class_ == 1
    assert ALPHA_SCALE.classify(1.0).class_ == 2
    assert ALPHA_SCALE.classify(0.6).class_ == 3
    assert ALPHA_SCALE.classify(0.59).class_ == 4
