"""
Trend detection over historical visit-count samples (newest first).
"""
import math
from datetime import datetime
from typing import List, Sequence, Tuple

from ..domain.entities import HistoricalSample, Trend, TrendAnalysis, TrendDirection
from ...common.utils import round_half_up


def _split_means(samples: Sequence[HistoricalSample], window: int) -> Tuple[float, float]:
    split = min(window, len(samples) // 2)
    recent = [s.count for s in samples[:split]]
    older = [s.count for s in samples[split:]]
    return sum(recent) / len(recent), sum(older) / len(older)


def detect_trend(samples: List[HistoricalSample], window: int = 3, threshold: float = 50.0) -> Trend:
    """
    RISING/FALLING when the recent mean moves more than `threshold` visits
    away from the older mean. Fewer than two samples is STABLE.
    """
    if len(samples) < 2:
        return Trend.STABLE

    recent, older = _split_means(samples, window)
    delta = recent - older
    if delta > threshold:
        return Trend.RISING
    if delta < -threshold:
        return Trend.FALLING
    return Trend.STABLE


def analyze_trend(samples: List[HistoricalSample], now: datetime,
                  window: int = 4, alert_count: int = 800, normal_count: int = 500) -> TrendAnalysis:
    """
    Compares the newest `window` samples against everything older. Velocity
    is the mean difference spread over the recent window.
    """
    if len(samples) < 3:
        return TrendAnalysis(
            direction=TrendDirection.FLAT,
            velocity=0,
            spike_detected=False,
            congestion_alert=False,
        )

    recent_counts = [s.count for s in samples[:window]]
    older_counts = [s.count for s in samples[window:]]
    recent = sum(recent_counts) / len(recent_counts)
    # No older window to compare against yet
    older = sum(older_counts) / len(older_counts) if older_counts else recent
    velocity = (recent - older) / window
    if velocity > 10:
        direction = TrendDirection.UP
    elif velocity < -10:
        direction = TrendDirection.DOWN
    else:
        direction = TrendDirection.FLAT

    # Sudden 50%+ jump between the two newest readings
    spike = samples[0].count > samples[1].count * 1.5
    alert = all(s.count > alert_count for s in samples[:3])

    decongestion = None
    if direction is TrendDirection.DOWN and velocity < -5:
        hours = math.ceil(abs(recent - normal_count) / (abs(velocity) * 6))
        decongestion = f"{(now.hour + hours) % 24:02d}:00"

    return TrendAnalysis(
        direction=direction,
        velocity=round_half_up(velocity),
        spike_detected=spike,
        congestion_alert=alert,
        decongestion_time=decongestion,
    )
