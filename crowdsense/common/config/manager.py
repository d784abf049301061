import math
from pathlib import Path
from typing import List, Optional, Union

from omegaconf import DictConfig, OmegaConf
from omegaconf.errors import OmegaConfBaseException

from .models import CrowdConfig
from ..exceptions import ConfigurationError

SCALES = ("quad", "triad")
STORAGE_TYPES = ("sql", "memory")


class ConfigManager:
    """Centraliza la carga y validación de configuración"""

    def __init__(self, config_dir: Path = Path("conf")):
        self.config_dir = Path(config_dir)

    def load_crowd_config(self, profile: str = "default", overrides: Optional[List[str]] = None) -> CrowdConfig:
        """
        Loads conf/crowd/<profile>.yaml onto the typed schema, applies
        dot-list overrides (e.g. ``weights.parking=0.5``) and validates.
        """
        config_path = self.config_dir / "crowd" / f"{profile}.yaml"
        if not config_path.exists():
            raise FileNotFoundError(f"Config not found: {config_path}")

        return self.from_raw(OmegaConf.load(config_path), overrides)

    @staticmethod
    def from_raw(raw: Union[DictConfig, dict], overrides: Optional[List[str]] = None) -> CrowdConfig:
        """Merges a raw mapping (e.g. a hydra node) onto the schema and validates."""
        schema = OmegaConf.structured(CrowdConfig)
        try:
            merged = OmegaConf.merge(schema, raw, OmegaConf.from_dotlist(overrides or []))
            cfg = OmegaConf.to_object(merged)
        except OmegaConfBaseException as e:
            raise ConfigurationError(f"Invalid crowd configuration: {e}") from e

        validate(cfg)
        return cfg


def validate(cfg: CrowdConfig):
    w = cfg.weights
    total = w.permits + w.parking + w.history + w.weather
    if not math.isclose(total, 1.0, abs_tol=1e-6):
        raise ConfigurationError(f"Scoring weights must sum to 1.0, got {total:.4f}")
    if min(w.permits, w.parking, w.history, w.weather) < 0:
        raise ConfigurationError("Scoring weights must be non-negative")

    if cfg.classification.scale not in SCALES:
        raise ConfigurationError(f"Unknown level scale: {cfg.classification.scale}")
    for name in ("quad_breakpoints", "triad_breakpoints"):
        bps = getattr(cfg.classification, name)
        if list(bps) != sorted(bps):
            raise ConfigurationError(f"{name} must be ascending: {bps}")
    if len(cfg.classification.quad_breakpoints) != 3:
        raise ConfigurationError("quad_breakpoints needs exactly 3 values")
    if len(cfg.classification.triad_breakpoints) != 2:
        raise ConfigurationError("triad_breakpoints needs exactly 2 values")

    d = cfg.decision
    if not (d.warn <= d.block <= d.redirect):
        raise ConfigurationError("Decision thresholds must satisfy warn <= block <= redirect")

    if cfg.storage.type not in STORAGE_TYPES:
        raise ConfigurationError(f"Unknown storage type: {cfg.storage.type}")
    if cfg.forecast.steps < 1:
        raise ConfigurationError("forecast.steps must be >= 1")
