"""
Signal collectors: thin adapters over the external stores that turn raw
records into 0-100 factors.

Every collector returns a documented neutral default when its source is
unavailable; the failure is logged and counted, never propagated.
"""
import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Dict, List, Optional, Sequence

from ..domain.entities import HistoricalSample, SignalSnapshot
from ..domain.protocols import HistoryStore, ParkingStore, PermitStore, WeatherClient
from ...common.exceptions import DataSourceError
from ...common.metrics import MetricsCollector
from ...common.utils import clamp, round_half_up

PEAK_SEASON_MONTHS = (4, 5, 6, 10, 11, 12)


class SignalCollector:
    signal = "unknown"

    def __init__(self, default: float, metrics: Optional[MetricsCollector] = None):
        self.default = default
        self.metrics = metrics
        self.logger = logging.getLogger(f"{__name__}.{self.signal}")

    def _fallback(self, error: Exception, value: Optional[float] = None) -> float:
        value = self.default if value is None else value
        self.logger.warning(f"{self.signal} source unavailable ({error}), using {value:.1f}")
        if self.metrics:
            self.metrics.record_fallback(self.signal)
        return value


class PermitLoadCollector(SignalCollector):
    """
    Active permits for a destination today, weighted by occupants and
    vehicle class, normalized against a saturation constant.
    """
    signal = "permits"

    def __init__(self, store: PermitStore, saturation: float = 2000.0,
                 vehicle_weights: Optional[Dict[str, float]] = None,
                 default: float = 50.0, metrics: Optional[MetricsCollector] = None):
        super().__init__(default, metrics)
        self.store = store
        self.saturation = saturation
        self.vehicle_weights = {k.upper(): v for k, v in (vehicle_weights or {"BUS": 3.0, "CAR": 1.5}).items()}

    def collect(self, destination: str, day: date) -> float:
        try:
            permits = self.store.active_permits(destination, day)
        except DataSourceError as e:
            return self._fallback(e)

        impact = 0.0
        for permit in permits:
            members = permit.members_count or 1
            weight = self.vehicle_weights.get((permit.vehicle_type or "").upper(), 1.0)
            impact += members * weight
        return min(100.0, impact / self.saturation * 100)

    def gate_load(self, gates: Sequence[str], since: date) -> Dict[str, int]:
        """Share of today's active permits per entry gate, busiest gate = 100."""
        load = {gate: 0 for gate in gates}
        try:
            counts = self.store.active_counts_by_origin(since)
        except DataSourceError as e:
            self._fallback(e, 0.0)
            return load

        if not counts:
            return load
        busiest = max(max(counts.values()), 1)
        for origin, count in counts.items():
            for gate in gates:
                if origin and gate.lower() in origin.lower():
                    load[gate] = round_half_up(count / busiest * 100)
        return load


class ParkingOccupancyCollector(SignalCollector):
    signal = "parking"

    def __init__(self, store: ParkingStore, default: float = 40.0,
                 metrics: Optional[MetricsCollector] = None):
        super().__init__(default, metrics)
        self.store = store

    def collect(self, location: str, day: date) -> float:
        try:
            usage = self.store.facility_usage(location, day)
        except DataSourceError as e:
            return self._fallback(e)

        if not usage:
            return self.default
        total = sum(f.total_slots for f in usage)
        booked = sum(f.booked_slots for f in usage)
        if total <= 0:
            return self.default
        return min(100.0, booked / total * 100)


class HistoricalFactorCollector(SignalCollector):
    """
    Average of the busiest samples over the lookback window, scaled by
    weekend, hour-of-day and season multipliers. Without samples the
    baseline is scaled by the same multipliers.
    """
    signal = "history"

    def __init__(self, store: HistoryStore, baseline: float = 50.0,
                 sample_saturation: float = 1000.0, sample_limit: int = 10,
                 lookback_days: int = 365, metrics: Optional[MetricsCollector] = None):
        super().__init__(baseline, metrics)
        self.store = store
        self.sample_saturation = sample_saturation
        self.sample_limit = sample_limit
        self.lookback_days = lookback_days

    @staticmethod
    def multiplier(now: datetime) -> float:
        weekend = 1.3 if now.weekday() >= 5 else 1.0
        if 10 <= now.hour <= 16:
            hour = 1.4
        elif 8 <= now.hour <= 18:
            hour = 1.1
        else:
            hour = 0.7
        season = 1.5 if now.month in PEAK_SEASON_MONTHS else 1.0
        return weekend * hour * season

    def collect(self, spot: str, now: datetime) -> float:
        factor = self.multiplier(now)
        baseline = min(100.0, self.default * factor)
        try:
            samples = self.store.busiest_samples(spot, now - timedelta(days=self.lookback_days), self.sample_limit)
        except DataSourceError as e:
            return self._fallback(e, baseline)

        if not samples:
            return baseline
        avg = sum(s.count for s in samples) / len(samples)
        return min(100.0, avg / self.sample_saturation * 100 * factor)

    def recent(self, spot: str, limit: int) -> List[HistoricalSample]:
        try:
            return self.store.recent_samples(spot, limit)
        except DataSourceError as e:
            self._fallback(e, 0.0)
            return []

    def same_day_average(self, spot: str, target: date, now: datetime, neutral: float = 50.0) -> float:
        """Normalized average of past samples on the same weekday and month as `target`."""
        try:
            samples = self.store.samples_since(spot, now - timedelta(days=self.lookback_days), 100)
        except DataSourceError as e:
            return self._fallback(e, neutral)

        matching = [
            s.count for s in samples
            if s.timestamp.weekday() == target.weekday() and s.timestamp.month == target.month
        ]
        if not matching:
            return neutral
        return min(100.0, sum(matching) / len(matching) / self.sample_saturation * 100)


def weather_code_factor(code: int) -> float:
    """WMO weather code -> crowd potential. Clear skies draw crowds, rain keeps them away."""
    if 0 <= code <= 3:
        return 90.0
    if 45 <= code <= 48:
        return 70.0
    if code >= 51:
        return 30.0
    return 60.0


class WeatherFactorCollector(SignalCollector):
    signal = "weather"

    def __init__(self, client: WeatherClient, default: float = 60.0,
                 metrics: Optional[MetricsCollector] = None):
        super().__init__(default, metrics)
        self.client = client

    def collect(self, region: str) -> float:
        try:
            code = self.client.current_code(region)
        except DataSourceError as e:
            return self._fallback(e)
        return weather_code_factor(code)


@dataclass
class SignalCollectors:
    permits: PermitLoadCollector
    parking: ParkingOccupancyCollector
    history: HistoricalFactorCollector
    weather: WeatherFactorCollector

    def snapshot(self, spot: str, region: str, now: datetime) -> SignalSnapshot:
        day = now.date()
        return SignalSnapshot(
            permit_load=clamp(self.permits.collect(spot, day)),
            parking_occupancy=clamp(self.parking.collect(spot, day)),
            historical_factor=clamp(self.history.collect(spot, now)),
            weather_factor=clamp(self.weather.collect(region)),
        )
