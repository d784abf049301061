from .crowd import (
    SignalSnapshotSchema,
    CrowdMetricsSchema,
    SpotAnalysisSchema,
    HourlyPredictionSchema,
    DayPredictionSchema,
    TrendAnalysisSchema,
    SuggestionSchema,
    ValidateRequest,
    RedirectDecisionSchema,
    TrafficInfoSchema,
    SettingUpdate,
)

__all__ = [
    "SignalSnapshotSchema",
    "CrowdMetricsSchema",
    "SpotAnalysisSchema",
    "HourlyPredictionSchema",
    "DayPredictionSchema",
    "TrendAnalysisSchema",
    "SuggestionSchema",
    "ValidateRequest",
    "RedirectDecisionSchema",
    "TrafficInfoSchema",
    "SettingUpdate",
]
