"""
Domain entities for the Crowd module.
"""
import math
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional


class Trend(Enum):
    RISING = "RISING"
    STABLE = "STABLE"
    FALLING = "FALLING"


class TrendDirection(Enum):
    UP = "UP"
    DOWN = "DOWN"
    FLAT = "FLAT"


class Action(Enum):
    PROCEED = "PROCEED"
    WARN = "WARN"
    BLOCK = "BLOCK"
    REDIRECT = "REDIRECT"


class AlertLevel(Enum):
    GREEN = "GREEN"
    ORANGE = "ORANGE"
    RED = "RED"
    DARK_RED = "DARK_RED"


class TrafficStatus(Enum):
    SMOOTH = "SMOOTH"
    MODERATE = "MODERATE"
    HEAVY = "HEAVY"
    BLOCKED = "BLOCKED"


@dataclass(frozen=True)
class SignalSnapshot:
    """
    The four normalized (0-100) inputs of one scoring call.
    Recomputed per request, never persisted.
    """
    permit_load: float
    parking_occupancy: float
    historical_factor: float
    weather_factor: float


@dataclass(frozen=True)
class ScoringWeights:
    permits: float
    parking: float
    history: float
    weather: float

    @property
    def total(self) -> float:
        return self.permits + self.parking + self.history + self.weather

    def is_valid(self) -> bool:
        return (
            min(self.permits, self.parking, self.history, self.weather) >= 0
            and math.isclose(self.total, 1.0, abs_tol=1e-6)
        )


@dataclass(frozen=True)
class CongestionScore:
    score: int  # 0 to 100
    level: str
    trend: Trend
    factors: SignalSnapshot


@dataclass
class AdminOverride:
    """
    Admin settings relevant to one location, parsed from the settings store.
    Read-only input for the scorer.
    """
    manual_level: Optional[str] = None
    weights: Optional[ScoringWeights] = None
    festival_mode: bool = False
    blocked_roads: List[str] = field(default_factory=list)
    traffic_status: Optional[str] = None
    closure_reason: Optional[str] = None


@dataclass(frozen=True)
class PermitRecord:
    """An active entry permit (E-Pass) as seen by the permit store."""
    members_count: Optional[int]
    vehicle_type: Optional[str]
    from_location: Optional[str] = None


@dataclass(frozen=True)
class ParkingUsage:
    """Booked vs total slots of one parking facility for one day."""
    facility_id: str
    total_slots: int
    booked_slots: int


@dataclass(frozen=True)
class HistoricalSample:
    timestamp: datetime
    count: int


@dataclass
class Spot:
    id: str
    name: str
    category: str
    latitude: float
    longitude: float
    indoor: bool = False


@dataclass
class Suggestion:
    """
    An alternate spot offered when a destination is congested.
    """
    original_spot_id: str
    spot_id: str
    spot_name: str
    category: str
    crowd_score: int
    parking_available: int
    reason: str
    distance_diff: str  # e.g. "+2.1 km"


@dataclass
class RedirectDecision:
    allowed: bool
    action: Action
    level: AlertLevel
    score: int
    message: Optional[str] = None
    suggestion: Optional[Suggestion] = None


@dataclass
class CrowdMetrics:
    crowd_level: str
    crowd_score: int
    waiting_estimate: int  # minutes
    parking_chance: int  # percentage
    best_alternate: Optional[str]
    trend: Trend
    factors: SignalSnapshot
    gate_load: Dict[str, int]
    prediction_2h: List[int]


@dataclass
class SpotAnalysis:
    spot_id: str
    spot_name: str
    metrics: CrowdMetrics
    recommendation: str
    best_visit_time: str
    redirection_needed: bool


@dataclass
class HourlyPrediction:
    hour: str  # "HH:00"
    predicted_score: int
    confidence: int
    level: str


@dataclass
class DayPrediction:
    date: str
    day_of_week: str
    predictions: List[HourlyPrediction]
    peak_hour: str
    best_visit_window: str
    expected_max_crowd: int


@dataclass
class TrendAnalysis:
    direction: TrendDirection
    velocity: int
    spike_detected: bool
    congestion_alert: bool
    decongestion_time: Optional[str] = None


@dataclass
class TrafficInfo:
    speed_kmph: float
    delay_minutes: int
    status: TrafficStatus
    best_time: str
    flow_opacity: float
    closure_reason: Optional[str] = None
