from dataclasses import dataclass, field
from typing import Optional, Dict, List


@dataclass
class WeightsConfig:
    permits: float = 0.35
    parking: float = 0.40
    history: float = 0.15
    weather: float = 0.10


@dataclass
class FestivalConfig:
    trigger_below: float = 60.0
    floor: int = 75


@dataclass
class ClassificationConfig:
    scale: str = "quad"  # quad | triad
    quad_breakpoints: List[int] = field(default_factory=lambda: [60, 80, 90])
    triad_breakpoints: List[int] = field(default_factory=lambda: [50, 80])
    alternate_min_score: int = 70


@dataclass
class TrendConfig:
    window: int = 3
    sample_limit: int = 6
    delta_threshold: float = 50.0
    velocity_sample_limit: int = 12


@dataclass
class ForecastConfig:
    steps: int = 4
    step_minutes: int = 30
    trend_delta: float = 5.0
    jitter: float = 2.0
    hourly_jitter: float = 5.0
    seed: Optional[int] = None


@dataclass
class DecisionConfig:
    warn: float = 80.0
    block: float = 90.0
    redirect: float = 95.0
    redirection_needed_above: float = 75.0


@dataclass
class PermitCollectorConfig:
    saturation: float = 2000.0
    vehicle_weights: Dict[str, float] = field(default_factory=lambda: {"BUS": 3.0, "CAR": 1.5})
    default: float = 50.0


@dataclass
class ParkingCollectorConfig:
    default: float = 40.0


@dataclass
class HistoryCollectorConfig:
    baseline: float = 50.0
    sample_saturation: float = 1000.0
    sample_limit: int = 10
    lookback_days: int = 365


@dataclass
class WeatherCollectorConfig:
    default: float = 60.0
    region: str = "Ooty"


@dataclass
class CollectorsConfig:
    permits: PermitCollectorConfig = field(default_factory=PermitCollectorConfig)
    parking: ParkingCollectorConfig = field(default_factory=ParkingCollectorConfig)
    history: HistoryCollectorConfig = field(default_factory=HistoryCollectorConfig)
    weather: WeatherCollectorConfig = field(default_factory=WeatherCollectorConfig)


@dataclass
class AlternatesConfig:
    max_candidate_score: int = 50
    region_center: List[float] = field(default_factory=lambda: [11.41, 76.69])


@dataclass
class WeatherClientConfig:
    base_url: str = "https://api.open-meteo.com/v1/forecast"
    timeout_seconds: float = 5.0
    cache_ttl_seconds: int = 600


@dataclass
class StorageConfig:
    type: str = "sql"  # sql | memory
    database_url: Optional[str] = None


@dataclass
class ServerConfig:
    host: str = "0.0.0.0"
    port: int = 8000


@dataclass
class CrowdConfig:
    weights: WeightsConfig = field(default_factory=WeightsConfig)
    festival: FestivalConfig = field(default_factory=FestivalConfig)
    manual_override_scores: Dict[str, int] = field(default_factory=lambda: {
        "CRITICAL": 95, "OVERFLOW": 95, "HIGH": 75, "MEDIUM": 55, "LOW": 20, "SAFE": 20,
    })
    classification: ClassificationConfig = field(default_factory=ClassificationConfig)
    trend: TrendConfig = field(default_factory=TrendConfig)
    forecast: ForecastConfig = field(default_factory=ForecastConfig)
    decision: DecisionConfig = field(default_factory=DecisionConfig)
    collectors: CollectorsConfig = field(default_factory=CollectorsConfig)
    alternates: AlternatesConfig = field(default_factory=AlternatesConfig)
    weather: WeatherClientConfig = field(default_factory=WeatherClientConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    default_spots: List[str] = field(default_factory=lambda: [
        "Ooty Lake", "Botanical Garden", "Doddabetta Peak", "Rose Garden", "Tea Factory",
    ])
    log_level: str = "INFO"
