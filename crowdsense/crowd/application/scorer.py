"""
Blends the four crowd signals into a single 0-100 congestion score.
"""
import logging
from typing import Dict, Optional

from ..domain.entities import AdminOverride, ScoringWeights, SignalSnapshot
from ...common.utils import clamp, round_half_up

logger = logging.getLogger(__name__)


class CongestionScorer:
    """
    score = sum(factor_i * weight_i), rounded and clamped to [0, 100].

    A manual level override replaces the blend entirely. Festival mode raises
    any blended score below `festival_trigger` to `festival_floor`.
    """

    def __init__(self, weights: ScoringWeights, manual_scores: Dict[str, int],
                 festival_trigger: float = 60.0, festival_floor: int = 75):
        self.weights = weights
        self.manual_scores = {k.upper(): v for k, v in manual_scores.items()}
        self.festival_trigger = festival_trigger
        self.festival_floor = festival_floor

    def resolve_weights(self, override: Optional[AdminOverride] = None) -> ScoringWeights:
        if override is not None and override.weights is not None:
            return override.weights
        return self.weights

    def blend(self, snapshot: SignalSnapshot, weights: ScoringWeights) -> float:
        return (
            clamp(snapshot.permit_load) * weights.permits
            + clamp(snapshot.parking_occupancy) * weights.parking
            + clamp(snapshot.historical_factor) * weights.history
            + clamp(snapshot.weather_factor) * weights.weather
        )

    def score(self, snapshot: SignalSnapshot, override: Optional[AdminOverride] = None) -> int:
        if override is not None and override.manual_level:
            manual = self.manual_scores.get(override.manual_level.upper())
            if manual is not None:
                logger.debug(f"Manual level {override.manual_level} overrides blended score")
                return int(clamp(manual))

        raw = self.blend(snapshot, self.resolve_weights(override))
        if override is not None and override.festival_mode and raw < self.festival_trigger:
            raw = self.festival_floor

        return int(clamp(round_half_up(raw)))
