import pytest
from pathlib import Path
from omegaconf import OmegaConf
from crowdsense.common.config import ConfigManager, CrowdConfig
from crowdsense.common.exceptions import ConfigurationError

CONF_DIR = Path(__file__).resolve().parents[2] / "conf"


def test_load_default_profile():
    cfg = ConfigManager(CONF_DIR).load_crowd_config()
    assert isinstance(cfg, CrowdConfig)
    assert cfg.weights.parking == 0.40
    assert cfg.classification.scale == "quad"
    assert list(cfg.classification.quad_breakpoints) == [60, 80, 90]
    assert cfg.decision.redirect == 95
    assert cfg.manual_override_scores["CRITICAL"] == 95


def test_dotlist_overrides():
    cfg = ConfigManager(CONF_DIR).load_crowd_config(
        overrides=["storage.type=memory", "forecast.seed=3", "classification.scale=triad"]
    )
    assert cfg.storage.type == "memory"
    assert cfg.forecast.seed == 3
    assert cfg.classification.scale == "triad"


def test_missing_profile():
    with pytest.raises(FileNotFoundError):
        ConfigManager(CONF_DIR).load_crowd_config("does-not-exist")


def test_from_raw_uses_schema_defaults():
    cfg = ConfigManager.from_raw(OmegaConf.create({"decision": {"warn": 70}}))
    assert cfg.decision.warn == 70
    assert cfg.decision.block == 90
    assert cfg.collectors.permits.vehicle_weights == {"BUS": 3.0, "CAR": 1.5}


@pytest.mark.parametrize("overrides", [
    ["weights.parking=0.9"],
    ["weights.parking=-0.1", "weights.permits=0.85"],
    ["classification.scale=octal"],
    ["classification.quad_breakpoints=[90,80,60]"],
    ["classification.triad_breakpoints=[50]"],
    ["decision.warn=96"],
    ["storage.type=mongo"],
    ["forecast.steps=0"],
])
def test_invalid_config_is_rejected(overrides):
    with pytest.raises(ConfigurationError):
        ConfigManager.from_raw({}, overrides)


def test_type_mismatch_is_rejected():
    with pytest.raises(ConfigurationError):
        ConfigManager.from_raw({"forecast": {"steps": "many"}})
