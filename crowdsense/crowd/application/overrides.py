"""
Parsing and validation of admin settings (key/value strings) into AdminOverride.
"""
import logging
from typing import Dict, Optional

from ..domain.entities import AdminOverride, ScoringWeights, TrafficStatus
from ..domain.levels import KNOWN_LEVEL_NAMES
from ...common.exceptions import InvalidSettingError
from ...common.utils import settings_key

logger = logging.getLogger(__name__)

WEIGHT_KEYS = {
    "WEIGHT_PASSES": "permits",
    "WEIGHT_PARKING": "parking",
    "WEIGHT_HISTORY": "history",
    "WEIGHT_WEATHER": "weather",
}
FESTIVAL_MODE = "FESTIVAL_MODE"
BLOCKED_ROADS = "BLOCKED_ROADS"
CROWD_STATUS_PREFIX = "CROWD_STATUS_"
TRAFFIC_STATUS_PREFIX = "TRAFFIC_STATUS_"
CLOSURE_REASON_PREFIX = "CLOSURE_REASON_"
CLOSURE_REASONS = {"NATURAL_DISASTER", "ACCIDENT", "ROAD_ISSUE"}


def parse_admin_override(settings: Dict[str, str], location: Optional[str],
                         default_weights: Optional[ScoringWeights] = None) -> AdminOverride:
    """
    Builds the override record for `location` from the raw settings map.
    Weight overrides are ignored (with a warning) unless they sum to 1.0.
    """
    override = AdminOverride(
        festival_mode=settings.get(FESTIVAL_MODE, "").strip().lower() == "true",
        blocked_roads=[r.strip() for r in settings.get(BLOCKED_ROADS, "").split(",") if r.strip()],
        weights=_parse_weights(settings, default_weights) if default_weights is not None else None,
    )

    if location:
        key = settings_key(location)
        manual = settings.get(f"{CROWD_STATUS_PREFIX}{key}")
        if manual:
            manual = manual.strip().upper()
            if manual in KNOWN_LEVEL_NAMES:
                override.manual_level = manual
            else:
                logger.warning(f"Ignoring unknown manual crowd level '{manual}' for {location}")
        override.traffic_status = settings.get(f"{TRAFFIC_STATUS_PREFIX}{key}") or None
        override.closure_reason = settings.get(f"{CLOSURE_REASON_PREFIX}{key}") or None

    return override


def _parse_weights(settings: Dict[str, str], defaults: ScoringWeights) -> Optional[ScoringWeights]:
    present = {k: v for k, v in settings.items() if k in WEIGHT_KEYS}
    if not present:
        return None

    values = {
        "permits": defaults.permits,
        "parking": defaults.parking,
        "history": defaults.history,
        "weather": defaults.weather,
    }
    for key, raw in present.items():
        try:
            values[WEIGHT_KEYS[key]] = float(raw)
        except ValueError:
            logger.warning(f"Ignoring weight overrides: {key}={raw!r} is not a number")
            return None

    weights = ScoringWeights(**values)
    if not weights.is_valid():
        logger.warning(f"Ignoring weight overrides: they sum to {weights.total:.3f}, expected 1.0")
        return None
    return weights


def validate_setting(key: str, value: str) -> str:
    """
    Validates one admin setting and returns its normalized string value.
    Raises InvalidSettingError for unknown keys or malformed values.
    """
    if not key:
        raise InvalidSettingError("Setting key is required")
    value = str(value).strip()

    if key in WEIGHT_KEYS:
        try:
            weight = float(value)
        except ValueError as e:
            raise InvalidSettingError(f"{key} must be a number, got {value!r}") from e
        if not 0.0 <= weight <= 1.0:
            raise InvalidSettingError(f"{key} must be between 0 and 1, got {weight}")
        return str(weight)

    if key == FESTIVAL_MODE:
        if value.lower() not in ("true", "false"):
            raise InvalidSettingError(f"{key} must be 'true' or 'false'")
        return value.lower()

    if key == BLOCKED_ROADS:
        return ",".join(r.strip() for r in value.split(",") if r.strip())

    if key.startswith(CROWD_STATUS_PREFIX):
        if value.upper() not in KNOWN_LEVEL_NAMES:
            raise InvalidSettingError(f"Unknown crowd level {value!r}")
        return value.upper()

    if key.startswith(TRAFFIC_STATUS_PREFIX):
        if value.upper() not in TrafficStatus.__members__:
            raise InvalidSettingError(f"Unknown traffic status {value!r}")
        return value.upper()

    if key.startswith(CLOSURE_REASON_PREFIX):
        if value.upper() not in CLOSURE_REASONS:
            raise InvalidSettingError(f"Unknown closure reason {value!r}")
        return value.upper()

    raise InvalidSettingError(f"Unknown setting key {key!r}")
