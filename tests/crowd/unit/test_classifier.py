import pytest
from crowdsense.crowd.domain.entities import HistoricalSample, Trend
from crowdsense.crowd.domain.levels import CrowdLevel, TriadLevel, quad_of, severity, to_quad
from crowdsense.crowd.application.classifier import CrowdClassifier
from crowdsense.crowd.infrastructure.catalogue import ALTERNATES
from datetime import datetime, timedelta


@pytest.fixture
def classifier():
    return CrowdClassifier.from_breakpoints("quad", [60, 80, 90], [50, 80], alternates=ALTERNATES)


@pytest.fixture
def triad_classifier():
    return CrowdClassifier.from_breakpoints("triad", [60, 80, 90], [50, 80], alternates=ALTERNATES)


@pytest.mark.parametrize("score,level", [
    (0, "LOW"), (60, "LOW"), (61, "MEDIUM"), (80, "MEDIUM"),
    (81, "HIGH"), (90, "HIGH"), (91, "CRITICAL"), (100, "CRITICAL"),
])
def test_quad_breakpoints(classifier, score, level):
    assert classifier.classify(score) == level


@pytest.mark.parametrize("score,level", [
    (0, "SAFE"), (49, "SAFE"), (50, "MEDIUM"), (79, "MEDIUM"), (80, "OVERFLOW"), (100, "OVERFLOW"),
])
def test_triad_breakpoints(triad_classifier, score, level):
    assert triad_classifier.classify(score) == level


@pytest.mark.parametrize("fixture_name", ["classifier", "triad_classifier"])
def test_classification_is_monotonic(request, fixture_name):
    c = request.getfixturevalue(fixture_name)
    severities = [severity(quad_of(c.classify(score))) for score in range(101)]
    assert severities == sorted(severities)


def test_classification_is_deterministic(classifier):
    assert [classifier.classify(s) for s in range(101)] == [classifier.classify(s) for s in range(101)]


def test_triad_maps_onto_quad():
    assert quad_of("SAFE") is CrowdLevel.LOW
    assert quad_of("MEDIUM") is CrowdLevel.MEDIUM
    assert to_quad(TriadLevel.OVERFLOW) is CrowdLevel.CRITICAL


@pytest.mark.parametrize("score,parking,minutes", [
    (30, 80, 0), (40, 100, 0), (50, 40, 7), (70, 50, 20), (90, 50, 40),
])
def test_waiting_estimate(classifier, score, parking, minutes):
    assert classifier.waiting_estimate(score, parking) == minutes


def test_parking_chance(classifier):
    assert classifier.parking_chance(30) == 70
    assert classifier.parking_chance(100) == 0
    assert classifier.parking_chance(120) == 0


def test_best_alternate_below_threshold_is_none(classifier):
    for score in range(70):
        assert classifier.best_alternate("Ooty Lake", score) is None


def test_best_alternate_returns_first_entry(classifier):
    assert classifier.best_alternate("Ooty Lake", 70) == "Emerald Lake"
    assert classifier.best_alternate("Tea Factory", 95) == "Chocolate Factory"


def test_best_alternate_unregistered_spot(classifier):
    assert classifier.best_alternate("Pykara Falls", 95) is None


def test_trend_needs_two_samples(classifier):
    assert classifier.trend([]) is Trend.STABLE
    assert classifier.trend([HistoricalSample(datetime(2024, 1, 1), 900)]) is Trend.STABLE


def test_trend_uses_configured_window(classifier):
    base = datetime(2024, 1, 1, 12)
    counts = [300, 290, 280, 100, 110, 120]
    samples = [HistoricalSample(base - timedelta(hours=i), c) for i, c in enumerate(counts)]
    assert classifier.trend(samples) is Trend.RISING
