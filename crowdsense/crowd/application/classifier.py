"""
Maps congestion scores to levels and derives the ancillary values shown to
visitors (wait time, parking chance, trend, best alternate).
"""
from typing import Dict, List, Optional, Sequence

from ..domain.entities import HistoricalSample, Trend
from ..domain.levels import LevelScale, ScaleDefinition, quad_scale, triad_scale
from .trend import detect_trend
from ...common.utils import clamp, round_half_up


class CrowdClassifier:
    """
    Pure functions of their inputs; no state beyond configuration.
    """

    def __init__(self, scale: ScaleDefinition,
                 alternates: Optional[Dict[str, Sequence[str]]] = None,
                 alternate_min_score: int = 70,
                 trend_window: int = 3,
                 trend_threshold: float = 50.0):
        self.scale = scale
        self.alternates = alternates or {}
        self.alternate_min_score = alternate_min_score
        self.trend_window = trend_window
        self.trend_threshold = trend_threshold

    @classmethod
    def from_breakpoints(cls, scale: str, quad_breakpoints: Sequence[float],
                         triad_breakpoints: Sequence[float], **kwargs) -> "CrowdClassifier":
        if LevelScale(scale) is LevelScale.TRIAD:
            definition = triad_scale(triad_breakpoints)
        else:
            definition = quad_scale(quad_breakpoints)
        return cls(definition, **kwargs)

    def classify(self, score: float) -> str:
        return self.scale.level_for(score).value

    def waiting_estimate(self, score: float, parking_factor: float) -> int:
        """Minutes, stepped by score band and scaled by parking pressure."""
        if score <= 40:
            return 0
        if score <= 60:
            return 5 + round_half_up(parking_factor / 20)
        if score <= 80:
            return 15 + round_half_up(parking_factor / 10)
        return 30 + round_half_up(parking_factor / 5)

    def parking_chance(self, parking_factor: float) -> int:
        return round_half_up(clamp(100 - parking_factor))

    def trend(self, samples: List[HistoricalSample]) -> Trend:
        return detect_trend(samples, self.trend_window, self.trend_threshold)

    def best_alternate(self, spot_name: str, score: float) -> Optional[str]:
        if score < self.alternate_min_score:
            return None
        options = self.alternates.get(spot_name, ())
        return options[0] if options else None
