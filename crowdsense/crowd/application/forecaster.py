"""
Short-horizon crowd forecasts.

Jitter comes from an injected numpy Generator so that a seeded forecaster
is reproducible.
"""
import math
import threading
from datetime import date, datetime, time
from typing import Callable, List, Optional

import numpy as np

from ..domain.entities import DayPrediction, HourlyPrediction, Trend
from ...common.utils import clamp, round_half_up

# Hour index 0-23, multiplier for the base crowd
HOURLY_PATTERNS = {
    "weekday": [0.2, 0.1, 0.1, 0.1, 0.1, 0.2, 0.3, 0.5, 0.7, 0.9, 1.0, 1.0,
                0.9, 0.8, 0.9, 1.0, 0.9, 0.7, 0.5, 0.4, 0.3, 0.3, 0.2, 0.2],
    "weekend": [0.3, 0.2, 0.1, 0.1, 0.1, 0.2, 0.4, 0.6, 0.8, 1.0, 1.0, 1.0,
                1.0, 0.9, 1.0, 1.0, 1.0, 0.8, 0.6, 0.5, 0.4, 0.3, 0.3, 0.3],
    "festival": [0.4, 0.3, 0.2, 0.2, 0.2, 0.3, 0.5, 0.7, 0.9, 1.0, 1.0, 1.0,
                 1.0, 1.0, 1.0, 1.0, 1.0, 0.9, 0.7, 0.6, 0.5, 0.4, 0.4, 0.4],
}

# Keyed by calendar month (1 = January)
SEASONAL_FACTORS = {
    1: 0.8, 2: 0.7, 3: 0.9,
    4: 1.3, 5: 1.5, 6: 1.4,    # summer
    7: 0.6, 8: 0.5, 9: 0.7,    # monsoon
    10: 1.2, 11: 1.3, 12: 1.4,  # winter tourism, holidays
}

DAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]


def time_of_day_adjustment(hour: float) -> float:
    """Crowds build 10am-2pm, hold until 4pm and thin out afterwards."""
    if 10 <= hour <= 14:
        return 3.0
    if 14 < hour <= 16:
        return 0.0
    if hour > 16:
        return -4.0
    return 0.0


class Forecaster:
    def __init__(self, rng: Optional[np.random.Generator] = None,
                 steps: int = 4, step_minutes: int = 30,
                 trend_delta: float = 5.0, jitter: float = 2.0,
                 hourly_jitter: float = 5.0,
                 classify: Optional[Callable[[float], str]] = None):
        self.rng = rng if rng is not None else np.random.default_rng()
        # Generator draws are not thread-safe; routes run in a threadpool
        self._rng_lock = threading.Lock()
        self.steps = steps
        self.step_minutes = step_minutes
        self.trend_delta = trend_delta
        self.jitter = jitter
        self.hourly_jitter = hourly_jitter
        self.classify = classify

    def _noise(self, amplitude: float) -> float:
        if amplitude <= 0:
            return 0.0
        with self._rng_lock:
            return float(self.rng.uniform(-amplitude, amplitude))

    def forecast(self, current_score: int, trend: Trend, now: datetime) -> List[int]:
        """
        Current score followed by `steps` projected scores, one per
        `step_minutes`, each clamped to [0, 100].
        """
        delta = {Trend.RISING: self.trend_delta, Trend.FALLING: -self.trend_delta}.get(trend, 0.0)
        predictions = [int(clamp(current_score))]

        for i in range(1, self.steps + 1):
            future_hour = (now.hour + i * self.step_minutes / 60) % 24
            value = predictions[-1] + delta + time_of_day_adjustment(future_hour) + self._noise(self.jitter)
            predictions.append(round_half_up(clamp(value)))

        return predictions

    def best_visit_time(self, predictions: List[int], now: datetime) -> str:
        best_index = predictions.index(min(predictions))
        if best_index == 0:
            return "Now"
        best_hour = now.hour + best_index * self.step_minutes / 60
        hour = int(math.floor(best_hour)) % 24
        minute = int(round((best_hour % 1) * 60))
        return f"{hour:02d}:{minute:02d}"

    def predict_hours(self, base_score: float, start: datetime, festival: bool = False,
                      hours: int = 24) -> List[HourlyPrediction]:
        if festival:
            pattern = HOURLY_PATTERNS["festival"]
        elif start.weekday() >= 5:
            pattern = HOURLY_PATTERNS["weekend"]
        else:
            pattern = HOURLY_PATTERNS["weekday"]
        seasonal = SEASONAL_FACTORS[start.month]

        predictions = []
        for i in range(hours):
            hour = (start.hour + i) % 24
            predicted = round_half_up(clamp(base_score * pattern[hour] * seasonal + self._noise(self.hourly_jitter)))
            predictions.append(HourlyPrediction(
                hour=f"{hour:02d}:00",
                predicted_score=predicted,
                # Confidence decays with the horizon
                confidence=max(50, 95 - i * 2),
                level=self.classify(predicted) if self.classify else "",
            ))
        return predictions

    def predict_day(self, base_score: float, target: date, festival: bool = False) -> DayPrediction:
        predictions = self.predict_hours(base_score, datetime.combine(target, time(0)), festival)

        peak = max(predictions, key=lambda p: p.predicted_score)

        best_start = 0
        min_sum = math.inf
        for i in range(len(predictions) - 2):
            window = sum(p.predicted_score for p in predictions[i:i + 3])
            if window < min_sum:
                min_sum = window
                best_start = i

        return DayPrediction(
            date=target.isoformat(),
            day_of_week=DAY_NAMES[target.weekday()],
            predictions=predictions,
            peak_hour=peak.hour,
            best_visit_window=f"{predictions[best_start].hour} - {predictions[best_start + 2].hour}",
            expected_max_crowd=peak.predicted_score,
        )
