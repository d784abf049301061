from typing import Optional

import numpy as np
from sqlalchemy.orm import sessionmaker

from ..domain import (
    HistoryStore, LocationStore, ParkingStore, PermitStore, ScoringWeights,
    SettingsStore, WeatherClient,
)
from ..domain.levels import quad_scale
from ..infrastructure.alternates import CatalogueAlternateFinder
from ..infrastructure.catalogue import ALTERNATES, ENTRY_GATES, SpotCatalogue
from ..infrastructure.collectors import (
    HistoricalFactorCollector, ParkingOccupancyCollector, PermitLoadCollector,
    SignalCollectors, WeatherFactorCollector,
)
from ..infrastructure.memory import (
    InMemoryHistoryStore, InMemoryLocationStore, InMemoryParkingStore,
    InMemoryPermitStore, InMemorySettingsStore,
)
from ..infrastructure.repositories import (
    SqlHistoryStore, SqlLocationStore, SqlParkingStore, SqlPermitStore, SqlSettingsStore,
)
from ..infrastructure.weather import OpenMeteoWeatherClient
from .analyzer import CrowdAnalysisService
from .classifier import CrowdClassifier
from .decision import RedirectEngine
from .forecaster import Forecaster
from .scorer import CongestionScorer
from .traffic import TrafficEstimator
from ...common.config import CrowdConfig
from ...common.database import engine, init_db, make_engine
from ...common.logging import setup_logger
from ...common.metrics import MetricsCollector

logger = setup_logger(__name__)


class CrowdApplicationBuilder:
    """
    Builder pattern for constructing the crowd analysis service.
    Centralizes store selection and component wiring.
    """

    def __init__(self, config: CrowdConfig, session_factory: Optional[sessionmaker] = None,
                 weather_client: Optional[WeatherClient] = None):
        self.config = config
        self.session_factory = session_factory
        self.metrics_collector = MetricsCollector()
        self.catalogue = SpotCatalogue()

        # Components
        self.permit_store: Optional[PermitStore] = None
        self.parking_store: Optional[ParkingStore] = None
        self.history_store: Optional[HistoryStore] = None
        self.settings_store: Optional[SettingsStore] = None
        self.location_store: Optional[LocationStore] = None
        self.weather_client: Optional[WeatherClient] = weather_client
        self.collectors: Optional[SignalCollectors] = None
        self.engine: Optional[RedirectEngine] = None
        self.service: Optional[CrowdAnalysisService] = None
        self.traffic: Optional[TrafficEstimator] = None

    def build_stores(self) -> 'CrowdApplicationBuilder':
        storage = self.config.storage
        if storage.type == "memory":
            logger.info("Using in-memory stores")
            self.permit_store = InMemoryPermitStore()
            self.parking_store = InMemoryParkingStore()
            self.history_store = InMemoryHistoryStore()
            self.settings_store = InMemorySettingsStore()
            self.location_store = InMemoryLocationStore()
            return self

        if self.session_factory is None:
            bind = make_engine(storage.database_url) if storage.database_url else engine
            init_db(bind)
            self.session_factory = sessionmaker(autocommit=False, autoflush=False, bind=bind)
        logger.info("Using SQL stores")
        self.permit_store = SqlPermitStore(self.session_factory)
        self.parking_store = SqlParkingStore(self.session_factory)
        self.history_store = SqlHistoryStore(self.session_factory)
        self.settings_store = SqlSettingsStore(self.session_factory)
        self.location_store = SqlLocationStore(self.session_factory)
        return self

    def build_collectors(self) -> 'CrowdApplicationBuilder':
        if self.permit_store is None:
            self.build_stores()
        if self.weather_client is None:
            weather = self.config.weather
            self.weather_client = OpenMeteoWeatherClient(
                base_url=weather.base_url,
                timeout=weather.timeout_seconds,
                cache_ttl=weather.cache_ttl_seconds,
            )

        cfg = self.config.collectors
        self.collectors = SignalCollectors(
            permits=PermitLoadCollector(
                self.permit_store,
                saturation=cfg.permits.saturation,
                vehicle_weights=dict(cfg.permits.vehicle_weights),
                default=cfg.permits.default,
                metrics=self.metrics_collector,
            ),
            parking=ParkingOccupancyCollector(
                self.parking_store, default=cfg.parking.default, metrics=self.metrics_collector,
            ),
            history=HistoricalFactorCollector(
                self.history_store,
                baseline=cfg.history.baseline,
                sample_saturation=cfg.history.sample_saturation,
                sample_limit=cfg.history.sample_limit,
                lookback_days=cfg.history.lookback_days,
                metrics=self.metrics_collector,
            ),
            weather=WeatherFactorCollector(
                self.weather_client, default=cfg.weather.default, metrics=self.metrics_collector,
            ),
        )
        return self

    def build_engine(self) -> 'CrowdApplicationBuilder':
        decision = self.config.decision
        # Alternate scores need the service, which is wired in build_service
        finder = CatalogueAlternateFinder(
            self.catalogue,
            score_of=lambda spot: self.service.congestion(spot.name).score,
            max_candidate_score=self.config.alternates.max_candidate_score,
            region_center=list(self.config.alternates.region_center),
        )
        self.engine = RedirectEngine(
            alternate_finder=finder,
            warn=decision.warn,
            block=decision.block,
            redirect=decision.redirect,
        )
        return self

    def build_service(self) -> CrowdAnalysisService:
        if self.collectors is None:
            self.build_collectors()
        if self.engine is None:
            self.build_engine()

        cfg = self.config
        classification = cfg.classification
        classifier = CrowdClassifier.from_breakpoints(
            classification.scale,
            list(classification.quad_breakpoints),
            list(classification.triad_breakpoints),
            alternates=ALTERNATES,
            alternate_min_score=classification.alternate_min_score,
            trend_window=cfg.trend.window,
            trend_threshold=cfg.trend.delta_threshold,
        )
        # Hourly predictions are always labelled on the canonical scale
        canonical = quad_scale(list(classification.quad_breakpoints))
        forecaster = Forecaster(
            rng=np.random.default_rng(cfg.forecast.seed),
            steps=cfg.forecast.steps,
            step_minutes=cfg.forecast.step_minutes,
            trend_delta=cfg.forecast.trend_delta,
            jitter=cfg.forecast.jitter,
            hourly_jitter=cfg.forecast.hourly_jitter,
            classify=lambda score: canonical.level_for(score).value,
        )
        scorer = CongestionScorer(
            weights=ScoringWeights(
                permits=cfg.weights.permits,
                parking=cfg.weights.parking,
                history=cfg.weights.history,
                weather=cfg.weights.weather,
            ),
            manual_scores=dict(cfg.manual_override_scores),
            festival_trigger=cfg.festival.trigger_below,
            festival_floor=cfg.festival.floor,
        )

        self.service = CrowdAnalysisService(
            collectors=self.collectors,
            scorer=scorer,
            classifier=classifier,
            forecaster=forecaster,
            engine=self.engine,
            settings_store=self.settings_store,
            location_store=self.location_store,
            catalogue=self.catalogue,
            default_spots=list(cfg.default_spots),
            weather_region=cfg.collectors.weather.region,
            redirection_needed_above=cfg.decision.redirection_needed_above,
            trend_sample_limit=cfg.trend.sample_limit,
            velocity_sample_limit=cfg.trend.velocity_sample_limit,
            gates=ENTRY_GATES,
            metrics=self.metrics_collector,
        )
        self.traffic = TrafficEstimator(self.permit_store, self.parking_store, self.settings_store)
        logger.info("Crowd analysis service ready")
        return self.service

    def get_components(self):
        """Returns the built service and its collaborators."""
        if self.service is None:
            self.build_service()
        return {
            "service": self.service,
            "traffic": self.traffic,
            "settings_store": self.settings_store,
            "metrics": self.metrics_collector,
        }
