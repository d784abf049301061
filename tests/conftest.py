import pytest
from datetime import datetime
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from crowdsense.common.config import CrowdConfig
from crowdsense.common.database import init_db
from crowdsense.crowd.application.builder import CrowdApplicationBuilder
from crowdsense.crowd.infrastructure.memory import StaticWeatherClient

# Wednesday, outside peak season, hour multiplier 1.1
FIXED_NOW = datetime(2024, 3, 6, 9, 0)


@pytest.fixture
def fixed_now():
    return FIXED_NOW


@pytest.fixture
def crowd_config():
    cfg = CrowdConfig()
    cfg.storage.type = "memory"
    cfg.forecast.seed = 7
    return cfg


@pytest.fixture
def builder(crowd_config, fixed_now):
    """
    Memory-backed service with clear weather in Ooty and a fixed clock.
    With empty stores every spot scores 33 (permits 0, parking 40, history 55, weather 90).
    """
    builder = CrowdApplicationBuilder(crowd_config, weather_client=StaticWeatherClient({"Ooty": 0}))
    builder.build_service()
    builder.service.clock = lambda: fixed_now
    builder.traffic.clock = lambda: fixed_now
    return builder


@pytest.fixture
def service(builder):
    return builder.service


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)
