from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Serializes with camelCase keys, accepts either casing on input."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SignalSnapshotSchema(CamelModel):
    """
    The four normalized inputs of one scoring call.
    """
    permit_load: float = Field(..., ge=0, le=100, description="Active permit pressure on the destination")
    parking_occupancy: float = Field(..., ge=0, le=100, description="Booked share of parking slots today")
    historical_factor: float = Field(..., ge=0, le=100, description="Adjusted historical visit level")
    weather_factor: float = Field(..., ge=0, le=100, description="Crowd potential of current weather")

    @classmethod
    def from_domain(cls, snapshot) -> "SignalSnapshotSchema":
        return cls(
            permit_load=snapshot.permit_load,
            parking_occupancy=snapshot.parking_occupancy,
            historical_factor=snapshot.historical_factor,
            weather_factor=snapshot.weather_factor,
        )


class CrowdMetricsSchema(CamelModel):
    crowd_level: str = Field(..., description="Level on the configured scale")
    crowd_score: int = Field(..., ge=0, le=100, description="Blended congestion score")
    waiting_estimate: int = Field(..., ge=0, description="Expected parking wait in minutes")
    parking_chance: int = Field(..., ge=0, le=100, description="Chance of finding parking (%)")
    best_alternate: Optional[str] = Field(None, description="Suggested alternate spot name")
    trend: str = Field(..., description="RISING, STABLE or FALLING")
    factors: SignalSnapshotSchema
    gate_load: Dict[str, int] = Field(default_factory=dict, description="Relative load per entry gate")
    prediction_2h: List[int] = Field(..., alias="prediction2h", description="Current score followed by 30 minute steps")

    @classmethod
    def from_domain(cls, metrics) -> "CrowdMetricsSchema":
        return cls(
            crowd_level=metrics.crowd_level,
            crowd_score=metrics.crowd_score,
            waiting_estimate=metrics.waiting_estimate,
            parking_chance=metrics.parking_chance,
            best_alternate=metrics.best_alternate,
            trend=metrics.trend.value,
            factors=SignalSnapshotSchema.from_domain(metrics.factors),
            gate_load=dict(metrics.gate_load),
            prediction_2h=list(metrics.prediction_2h),
        )


class SpotAnalysisSchema(CamelModel):
    """
    Full crowd analysis of one spot.
    """
    spot_id: str
    spot_name: str
    metrics: CrowdMetricsSchema
    recommendation: str
    best_visit_time: str = Field(..., description="'Now' or HH:MM")
    redirection_needed: bool

    @classmethod
    def from_domain(cls, analysis) -> "SpotAnalysisSchema":
        return cls(
            spot_id=analysis.spot_id,
            spot_name=analysis.spot_name,
            metrics=CrowdMetricsSchema.from_domain(analysis.metrics),
            recommendation=analysis.recommendation,
            best_visit_time=analysis.best_visit_time,
            redirection_needed=analysis.redirection_needed,
        )


class HourlyPredictionSchema(CamelModel):
    hour: str = Field(..., description="HH:00")
    predicted_score: int = Field(..., ge=0, le=100)
    confidence: int = Field(..., ge=0, le=100)
    level: str

    @classmethod
    def from_domain(cls, prediction) -> "HourlyPredictionSchema":
        return cls(
            hour=prediction.hour,
            predicted_score=prediction.predicted_score,
            confidence=prediction.confidence,
            level=prediction.level,
        )


class DayPredictionSchema(CamelModel):
    date: str
    day_of_week: str
    predictions: List[HourlyPredictionSchema]
    peak_hour: str
    best_visit_window: str
    expected_max_crowd: int

    @classmethod
    def from_domain(cls, day) -> "DayPredictionSchema":
        return cls(
            date=day.date,
            day_of_week=day.day_of_week,
            predictions=[HourlyPredictionSchema.from_domain(p) for p in day.predictions],
            peak_hour=day.peak_hour,
            best_visit_window=day.best_visit_window,
            expected_max_crowd=day.expected_max_crowd,
        )


class TrendAnalysisSchema(CamelModel):
    direction: str = Field(..., description="UP, DOWN or FLAT")
    velocity: int
    spike_detected: bool
    congestion_alert: bool
    decongestion_time: Optional[str] = None

    @classmethod
    def from_domain(cls, trend) -> "TrendAnalysisSchema":
        return cls(
            direction=trend.direction.value,
            velocity=trend.velocity,
            spike_detected=trend.spike_detected,
            congestion_alert=trend.congestion_alert,
            decongestion_time=trend.decongestion_time,
        )


class SuggestionSchema(CamelModel):
    original_spot_id: str
    spot_id: str
    spot_name: str
    category: str
    crowd_score: int
    parking_available: int
    reason: str
    distance_diff: str

    @classmethod
    def from_domain(cls, suggestion) -> "SuggestionSchema":
        return cls(
            original_spot_id=suggestion.original_spot_id,
            spot_id=suggestion.spot_id,
            spot_name=suggestion.spot_name,
            category=suggestion.category,
            crowd_score=suggestion.crowd_score,
            parking_available=suggestion.parking_available,
            reason=suggestion.reason,
            distance_diff=suggestion.distance_diff,
        )


class ValidateRequest(CamelModel):
    spot_id: Optional[str] = Field(None, description="Destination spot id, e.g. 'ooty-lake'")


class RedirectDecisionSchema(CamelModel):
    """
    Result of validating a destination before a permit is issued.
    """
    allowed: bool
    action: str = Field(..., description="PROCEED, WARN, BLOCK or REDIRECT")
    level: str = Field(..., description="GREEN, ORANGE, RED or DARK_RED")
    score: int = Field(..., ge=0, le=100)
    message: Optional[str] = None
    suggestion: Optional[SuggestionSchema] = None

    @classmethod
    def from_domain(cls, decision) -> "RedirectDecisionSchema":
        return cls(
            allowed=decision.allowed,
            action=decision.action.value,
            level=decision.level.value,
            score=decision.score,
            message=decision.message,
            suggestion=SuggestionSchema.from_domain(decision.suggestion) if decision.suggestion else None,
        )


class TrafficInfoSchema(CamelModel):
    speed_kmph: float = Field(..., ge=0)
    delay_minutes: int = Field(..., ge=0)
    status: str
    best_time: str
    flow_opacity: float = Field(..., ge=0, le=1)
    closure_reason: Optional[str] = None

    @classmethod
    def from_domain(cls, info) -> "TrafficInfoSchema":
        return cls(
            speed_kmph=info.speed_kmph,
            delay_minutes=info.delay_minutes,
            status=info.status.value,
            best_time=info.best_time,
            flow_opacity=info.flow_opacity,
            closure_reason=info.closure_reason,
        )


class SettingUpdate(BaseModel):
    key: str = Field(..., min_length=1, description="Setting key, e.g. FESTIVAL_MODE")
    value: str = Field(..., description="Raw setting value")
