"""
Crowd analysis service: the inbound boundary of the scoring core.

Wires collectors, scorer, classifier, forecaster and redirect engine together.
Holds no per-request state.
"""
import logging
import time
from datetime import date, datetime
from typing import Callable, Dict, List, Optional, Sequence

from ..domain.entities import (
    AdminOverride, CongestionScore, CrowdMetrics, DayPrediction, HourlyPrediction,
    RedirectDecision, SpotAnalysis, Trend, TrendAnalysis,
)
from ..domain.levels import CrowdLevel, quad_of
from ..domain.protocols import LocationStore, SettingsStore
from ..infrastructure.catalogue import ENTRY_GATES, SpotCatalogue
from ..infrastructure.collectors import SignalCollectors
from .classifier import CrowdClassifier
from .decision import RedirectEngine
from .forecaster import Forecaster
from .overrides import parse_admin_override
from .scorer import CongestionScorer
from .trend import analyze_trend
from ...common.exceptions import DataSourceError
from ...common.logging import log_execution_time, setup_logger
from ...common.metrics import MetricsCollector
from ...common.utils import slugify

logger = logging.getLogger(__name__)


class CrowdAnalysisService:
    def __init__(self, collectors: SignalCollectors, scorer: CongestionScorer,
                 classifier: CrowdClassifier, forecaster: Forecaster,
                 engine: RedirectEngine, settings_store: SettingsStore,
                 location_store: LocationStore, catalogue: SpotCatalogue,
                 default_spots: Sequence[str] = (),
                 weather_region: str = "Ooty",
                 redirection_needed_above: float = 75.0,
                 trend_sample_limit: int = 6,
                 velocity_sample_limit: int = 12,
                 gates: Sequence[str] = ENTRY_GATES,
                 clock: Callable[[], datetime] = datetime.now,
                 metrics: Optional[MetricsCollector] = None):
        self.collectors = collectors
        self.scorer = scorer
        self.classifier = classifier
        self.forecaster = forecaster
        self.engine = engine
        self.settings_store = settings_store
        self.location_store = location_store
        self.catalogue = catalogue
        self.default_spots = list(default_spots)
        self.weather_region = weather_region
        self.redirection_needed_above = redirection_needed_above
        self.trend_sample_limit = trend_sample_limit
        self.velocity_sample_limit = velocity_sample_limit
        self.gates = list(gates)
        self.clock = clock
        self.metrics = metrics or MetricsCollector()
        self.logger = setup_logger(__name__)

    # --- settings ---

    def _settings(self) -> Dict[str, str]:
        try:
            return self.settings_store.all()
        except DataSourceError as e:
            self.logger.warning(f"Settings unavailable ({e}), scoring without admin overrides")
            self.metrics.record_fallback("settings")
            return {}

    def admin_override(self, location: Optional[str] = None) -> AdminOverride:
        return parse_admin_override(self._settings(), location, self.scorer.weights)

    # --- scoring ---

    def congestion(self, spot_name: str, now: Optional[datetime] = None) -> CongestionScore:
        now = now or self.clock()
        snapshot = self.collectors.snapshot(spot_name, self.weather_region, now)
        score = self.scorer.score(snapshot, self.admin_override(spot_name))
        trend = self.classifier.trend(self.collectors.history.recent(spot_name, self.trend_sample_limit))
        return CongestionScore(
            score=score,
            level=self.classifier.classify(score),
            trend=trend,
            factors=snapshot,
        )

    def gate_load(self, now: Optional[datetime] = None) -> Dict[str, int]:
        now = now or self.clock()
        return self.collectors.permits.gate_load(self.gates, now.date())

    @log_execution_time(logger)
    def analyze_spot(self, spot_name: str) -> SpotAnalysis:
        start = time.perf_counter()
        now = self.clock()

        congestion = self.congestion(spot_name, now)
        factors = congestion.factors
        prediction = self.forecaster.forecast(congestion.score, congestion.trend, now)

        metrics = CrowdMetrics(
            crowd_level=congestion.level,
            crowd_score=congestion.score,
            waiting_estimate=self.classifier.waiting_estimate(congestion.score, factors.parking_occupancy),
            parking_chance=self.classifier.parking_chance(factors.parking_occupancy),
            best_alternate=self.classifier.best_alternate(spot_name, congestion.score),
            trend=congestion.trend,
            factors=factors,
            gate_load=self.gate_load(now),
            prediction_2h=prediction,
        )

        analysis = SpotAnalysis(
            spot_id=slugify(spot_name),
            spot_name=spot_name,
            metrics=metrics,
            recommendation=recommendation_for(metrics, spot_name),
            best_visit_time=self.forecaster.best_visit_time(prediction, now),
            redirection_needed=congestion.score > self.redirection_needed_above,
        )
        self.metrics.record_analysis((time.perf_counter() - start) * 1000)
        self.logger.info(f"{spot_name}: score={congestion.score} level={congestion.level} trend={congestion.trend.value}")
        return analysis

    def spot_names(self) -> List[str]:
        try:
            names = self.location_store.names()
        except DataSourceError as e:
            self.logger.warning(f"Locations unavailable ({e}), using default spots")
            self.metrics.record_fallback("locations")
            names = []
        return names or list(self.default_spots)

    def analyze_all(self) -> List[SpotAnalysis]:
        return [self.analyze_spot(name) for name in self.spot_names()]

    # --- forecasting ---

    def predict_next_24_hours(self, spot_name: str, base_score: Optional[float] = None) -> List[HourlyPrediction]:
        now = self.clock()
        if base_score is None:
            base_score = self.congestion(spot_name, now).score
        festival = self.admin_override(spot_name).festival_mode
        return self.forecaster.predict_hours(base_score, now, festival)

    def predict_day(self, spot_name: str, target: date) -> DayPrediction:
        base = self.collectors.history.same_day_average(spot_name, target, self.clock())
        festival = self.admin_override(spot_name).festival_mode
        return self.forecaster.predict_day(base, target, festival)

    def analyze_trend(self, spot_name: str) -> TrendAnalysis:
        samples = self.collectors.history.recent(spot_name, self.velocity_sample_limit)
        return analyze_trend(samples, self.clock())

    # --- redirection ---

    def validate_destination(self, spot_id: str) -> RedirectDecision:
        spot_name = self.catalogue.name_for(spot_id)
        score = self.congestion(spot_name).score
        decision = self.engine.decide(spot_id, score)
        self.metrics.record_decision(decision.action.value)
        if not decision.allowed:
            self.logger.info(f"{spot_id}: {decision.action.value} at score {score}")
        return decision


def recommendation_for(metrics: CrowdMetrics, spot_name: str) -> str:
    level = quad_of(metrics.crowd_level)
    if level is CrowdLevel.CRITICAL:
        return f"{spot_name} is extremely crowded. Consider {metrics.best_alternate or 'visiting later'}."
    if level is CrowdLevel.HIGH:
        return f"High crowd expected. Parking may take {metrics.waiting_estimate} mins."
    if metrics.trend is Trend.RISING:
        return "Crowd is rising. Best to visit now before peak."
    if metrics.trend is Trend.FALLING:
        return "Crowd is decreasing. Good time to visit!"
    if metrics.parking_chance > 70:
        return "Good parking availability. Low wait time expected."
    return "Normal crowd levels. Enjoy your visit!"
