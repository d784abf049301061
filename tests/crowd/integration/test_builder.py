import pytest
from crowdsense.common.config import CrowdConfig
from crowdsense.crowd.application.analyzer import CrowdAnalysisService
from crowdsense.crowd.application.builder import CrowdApplicationBuilder
from crowdsense.crowd.infrastructure.memory import InMemorySettingsStore, StaticWeatherClient
from crowdsense.crowd.infrastructure.repositories import SqlSettingsStore


def test_builder_constructs_memory_service():
    cfg = CrowdConfig()
    cfg.storage.type = "memory"
    builder = CrowdApplicationBuilder(cfg, weather_client=StaticWeatherClient({"Ooty": 0}))
    service = (
        builder
        .build_stores()
        .build_collectors()
        .build_engine()
        .build_service()
    )

    assert isinstance(service, CrowdAnalysisService)
    assert isinstance(builder.settings_store, InMemorySettingsStore)
    assert builder.traffic is not None
    assert service.metrics is builder.metrics_collector
    assert service.engine.alternate_finder is not None


def test_builder_uses_sql_stores(session_factory):
    builder = CrowdApplicationBuilder(
        CrowdConfig(), session_factory=session_factory, weather_client=StaticWeatherClient({"Ooty": 0}),
    )
    components = builder.get_components()
    assert isinstance(components["settings_store"], SqlSettingsStore)

    service = components["service"]
    analysis = service.analyze_spot("Ooty Lake")
    assert 0 <= analysis.metrics.crowd_score <= 100


def test_triad_scale_is_selectable():
    cfg = CrowdConfig()
    cfg.storage.type = "memory"
    cfg.classification.scale = "triad"
    service = CrowdApplicationBuilder(cfg, weather_client=StaticWeatherClient({})).build_service()
    assert service.classifier.classify(85) == "OVERFLOW"
    # Hourly predictions stay on the canonical scale
    assert all(p.level in ("LOW", "MEDIUM", "HIGH", "CRITICAL") for p in service.predict_next_24_hours("Ooty Lake", 90))
