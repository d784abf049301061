"""
Domain module initialization.
"""
from .entities import (
    Trend,
    TrendDirection,
    Action,
    AlertLevel,
    TrafficStatus,
    SignalSnapshot,
    ScoringWeights,
    CongestionScore,
    AdminOverride,
    PermitRecord,
    ParkingUsage,
    HistoricalSample,
    Spot,
    Suggestion,
    RedirectDecision,
    CrowdMetrics,
    SpotAnalysis,
    HourlyPrediction,
    DayPrediction,
    TrendAnalysis,
    TrafficInfo,
)
from .levels import LevelScale, CrowdLevel, TriadLevel, ScaleDefinition
from .protocols import (
    PermitStore,
    ParkingStore,
    HistoryStore,
    WeatherClient,
    SettingsStore,
    LocationStore,
    AlternateFinder,
)
