import pytest
import numpy as np
from crowdsense.crowd.domain.entities import AdminOverride, ScoringWeights, SignalSnapshot
from crowdsense.crowd.application.scorer import CongestionScorer

DEFAULT_WEIGHTS = ScoringWeights(permits=0.35, parking=0.40, history=0.15, weather=0.10)
MANUAL_SCORES = {"CRITICAL": 95, "OVERFLOW": 95, "HIGH": 75, "MEDIUM": 55, "LOW": 20, "SAFE": 20}


@pytest.fixture
def scorer():
    return CongestionScorer(DEFAULT_WEIGHTS, MANUAL_SCORES)


def snapshot(value):
    return SignalSnapshot(value, value, value, value)


def test_score_is_weighted_sum(scorer):
    s = SignalSnapshot(permit_load=0, parking_occupancy=40, historical_factor=55, weather_factor=90)
    # 0 + 16 + 8.25 + 9 = 33.25
    assert scorer.score(s) == 33


def test_score_rounds_half_up():
    scorer = CongestionScorer(ScoringWeights(0.5, 0.5, 0.0, 0.0), MANUAL_SCORES)
    # 1 * 0.5 + 4 * 0.5 = 2.5
    assert scorer.score(SignalSnapshot(1, 4, 0, 0)) == 3


def test_score_stays_in_range_for_random_inputs(scorer):
    rng = np.random.default_rng(0)
    for values in rng.uniform(0, 100, size=(200, 4)):
        score = scorer.score(SignalSnapshot(*values))
        assert 0 <= score <= 100


def test_out_of_range_factors_are_clamped(scorer):
    assert scorer.score(SignalSnapshot(250, 180, 400, 120)) == 100
    assert scorer.score(SignalSnapshot(-20, -5, -1, -100)) == 0


def test_festival_mode_raises_low_score_to_floor(scorer):
    assert scorer.score(snapshot(40), AdminOverride(festival_mode=True)) == 75


def test_festival_mode_keeps_busy_score(scorer):
    assert scorer.score(snapshot(70), AdminOverride(festival_mode=True)) == 70


def test_manual_critical_wins_over_factors(scorer):
    override = AdminOverride(manual_level="CRITICAL")
    assert scorer.score(snapshot(0), override) == 95
    assert scorer.score(snapshot(100), override) == 95


def test_manual_override_short_circuits_festival(scorer):
    override = AdminOverride(manual_level="LOW", festival_mode=True)
    assert scorer.score(snapshot(40), override) == 20


def test_manual_triad_level(scorer):
    assert scorer.score(snapshot(10), AdminOverride(manual_level="overflow")) == 95


def test_weight_override_is_used(scorer):
    weights = ScoringWeights(permits=0.0, parking=1.0, history=0.0, weather=0.0)
    s = SignalSnapshot(permit_load=0, parking_occupancy=80, historical_factor=0, weather_factor=0)
    assert scorer.score(s, AdminOverride(weights=weights)) == 80
    assert scorer.resolve_weights(AdminOverride()) is DEFAULT_WEIGHTS


def test_weights_validity():
    assert DEFAULT_WEIGHTS.is_valid()
    assert not ScoringWeights(0.5, 0.5, 0.5, 0.0).is_valid()
    assert not ScoringWeights(1.2, -0.2, 0.0, 0.0).is_valid()
