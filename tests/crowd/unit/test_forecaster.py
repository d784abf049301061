import pytest
import numpy as np
from concurrent.futures import ThreadPoolExecutor
from datetime import date, datetime
from crowdsense.crowd.domain.entities import Trend
from crowdsense.crowd.domain.levels import quad_scale
from crowdsense.crowd.application.forecaster import Forecaster, time_of_day_adjustment

NOW = datetime(2024, 3, 6, 9, 0)
CANONICAL = quad_scale([60, 80, 90])


def classify(score):
    return CANONICAL.level_for(score).value


@pytest.fixture
def quiet_forecaster():
    return Forecaster(rng=np.random.default_rng(0), jitter=0, hourly_jitter=0, classify=classify)


def test_time_of_day_curve():
    assert time_of_day_adjustment(9) == 0
    assert time_of_day_adjustment(10) == 3
    assert time_of_day_adjustment(14) == 3
    assert time_of_day_adjustment(15) == 0
    assert time_of_day_adjustment(17.5) == -4


def test_forecast_length_and_range():
    forecaster = Forecaster(rng=np.random.default_rng(1))
    for current, trend in [(99, Trend.RISING), (1, Trend.FALLING), (50, Trend.STABLE)]:
        predictions = forecaster.forecast(current, trend, NOW)
        assert len(predictions) == 5
        assert predictions[0] == current
        assert all(0 <= p <= 100 for p in predictions)


def test_forecast_follows_curve_without_jitter(quiet_forecaster):
    # 09:30 flat, then +3 from 10:00
    assert quiet_forecaster.forecast(50, Trend.STABLE, NOW) == [50, 50, 53, 56, 59]
    assert quiet_forecaster.forecast(50, Trend.RISING, NOW) == [50, 55, 63, 71, 79]


def test_seeded_forecasts_are_reproducible():
    first = Forecaster(rng=np.random.default_rng(7)).forecast(60, Trend.STABLE, NOW)
    second = Forecaster(rng=np.random.default_rng(7)).forecast(60, Trend.STABLE, NOW)
    assert first == second


def test_forecast_hours_wrap_past_midnight(quiet_forecaster):
    late = datetime(2024, 3, 6, 23, 0)
    predictions = quiet_forecaster.forecast(50, Trend.STABLE, late)
    assert predictions == [50, 46, 46, 46, 46]


def test_best_visit_time(quiet_forecaster):
    assert quiet_forecaster.best_visit_time([50, 50, 53, 56, 59], NOW) == "Now"
    assert quiet_forecaster.best_visit_time([60, 55, 50, 58, 62], NOW) == "10:00"
    assert quiet_forecaster.best_visit_time([60, 40, 50, 58, 62], NOW) == "09:30"


def test_predict_hours(quiet_forecaster):
    predictions = quiet_forecaster.predict_hours(100, NOW)
    assert len(predictions) == 24
    # weekday pattern 0.9 at 09:00, March seasonal factor 0.9
    assert predictions[0].hour == "09:00"
    assert predictions[0].predicted_score == 81
    assert predictions[0].level == "HIGH"
    assert predictions[0].confidence == 95
    assert predictions[-1].hour == "08:00"
    assert predictions[-1].confidence == 50
    assert all(0 <= p.predicted_score <= 100 for p in predictions)


def test_predict_day(quiet_forecaster):
    day = quiet_forecaster.predict_day(100, date(2024, 3, 6))
    assert day.day_of_week == "Wednesday"
    assert day.date == "2024-03-06"
    assert day.predictions[0].hour == "00:00"
    assert day.peak_hour == "10:00"
    assert day.expected_max_crowd == 90
    assert day.best_visit_window == "01:00 - 03:00"


def test_festival_pattern_is_busier(quiet_forecaster):
    normal = quiet_forecaster.predict_hours(50, datetime(2024, 3, 6, 0, 0))
    festival = quiet_forecaster.predict_hours(50, datetime(2024, 3, 6, 0, 0), festival=True)
    assert sum(p.predicted_score for p in festival) > sum(p.predicted_score for p in normal)


def test_concurrent_draws_consume_the_seeded_stream():
    forecaster = Forecaster(rng=np.random.default_rng(11))
    with ThreadPoolExecutor(max_workers=8) as pool:
        drawn = list(pool.map(lambda _: forecaster._noise(5.0), range(400)))
    serial = np.random.default_rng(11)
    expected = [float(serial.uniform(-5.0, 5.0)) for _ in range(400)]
    assert sorted(drawn) == sorted(expected)
