from datetime import datetime, timedelta
from crowdsense.crowd.domain.entities import HistoricalSample, Trend, TrendDirection
from crowdsense.crowd.application.trend import analyze_trend, detect_trend

NOW = datetime(2024, 3, 6, 9, 0)


def samples(*counts):
    """Newest first, one hour apart."""
    return [HistoricalSample(NOW - timedelta(hours=i), c) for i, c in enumerate(counts)]


def test_fewer_than_two_samples_is_stable():
    assert detect_trend([]) is Trend.STABLE
    assert detect_trend(samples(5000)) is Trend.STABLE


def test_two_samples_compare_one_against_one():
    assert detect_trend(samples(200, 100)) is Trend.RISING
    assert detect_trend(samples(100, 200)) is Trend.FALLING
    assert detect_trend(samples(140, 100)) is Trend.STABLE


def test_threshold_is_exclusive():
    assert detect_trend(samples(150, 100)) is Trend.STABLE
    assert detect_trend(samples(151, 100)) is Trend.RISING


def test_window_splits_recent_and_older():
    assert detect_trend(samples(300, 290, 280, 100, 110, 120), window=3) is Trend.RISING
    assert detect_trend(samples(100, 110, 120, 300, 290, 280), window=3) is Trend.FALLING


def test_analyze_trend_needs_three_samples():
    result = analyze_trend(samples(900, 100), NOW)
    assert result.direction is TrendDirection.FLAT
    assert result.velocity == 0
    assert not result.spike_detected
    assert not result.congestion_alert
    assert result.decongestion_time is None


def test_analyze_trend_rising_with_alert():
    result = analyze_trend(samples(900, 850, 820, 700, 600, 500, 450, 400), NOW)
    # recent mean 817.5, older mean 487.5, velocity 82.5
    assert result.direction is TrendDirection.UP
    assert result.velocity == 83
    assert result.congestion_alert
    assert not result.spike_detected
    assert result.decongestion_time is None


def test_analyze_trend_falling_estimates_decongestion():
    result = analyze_trend(samples(300, 400, 500, 600, 700, 800, 900, 1000), NOW)
    assert result.direction is TrendDirection.DOWN
    assert result.velocity == -100
    assert result.decongestion_time == "10:00"


def test_analyze_trend_detects_spike():
    result = analyze_trend(samples(400, 200, 210, 205), NOW)
    assert result.spike_detected


def test_analyze_trend_recent_window_is_fixed_for_short_history():
    # recent mean 160 over four samples, older mean 100, (160 - 100) / 4
    result = analyze_trend(samples(160, 160, 160, 160, 100, 100), NOW)
    assert result.velocity == 15
    assert result.direction is TrendDirection.UP


def test_analyze_trend_five_samples_falling():
    result = analyze_trend(samples(100, 100, 100, 100, 400), NOW)
    assert result.velocity == -75
    assert result.direction is TrendDirection.DOWN
    # |100 - 500| / (75 * 6) rounds up to one hour
    assert result.decongestion_time == "10:00"


def test_analyze_trend_without_older_samples_is_flat():
    result = analyze_trend(samples(900, 900, 900), NOW)
    assert result.direction is TrendDirection.FLAT
    assert result.velocity == 0
    assert result.congestion_alert
