"""
Road traffic estimate around a location, honouring admin road closures.
"""
import logging
from datetime import datetime, timedelta
from typing import Callable, Dict

from ..domain.entities import AdminOverride, TrafficInfo, TrafficStatus
from ..domain.protocols import ParkingStore, PermitStore, SettingsStore
from .overrides import parse_admin_override
from ...common.exceptions import DataSourceError

logger = logging.getLogger(__name__)

# status -> (speed km/h, delay minutes, map opacity)
STATUS_PROFILE = {
    TrafficStatus.SMOOTH: (40.0, 0, 0.3),
    TrafficStatus.MODERATE: (22.0, 12, 0.6),
    TrafficStatus.HEAVY: (10.0, 25, 0.9),
}


class TrafficEstimator:
    """
    Vehicle flow = parking bookings starting within +-30 minutes plus a fifth
    of today's active permits, compared against the road capacity.
    """

    def __init__(self, permit_store: PermitStore, parking_store: ParkingStore,
                 settings_store: SettingsStore, road_capacity: int = 500,
                 permit_share: float = 0.2,
                 clock: Callable[[], datetime] = datetime.now):
        self.permit_store = permit_store
        self.parking_store = parking_store
        self.settings_store = settings_store
        self.road_capacity = road_capacity
        self.permit_share = permit_share
        self.clock = clock

    def _override(self, location: str) -> AdminOverride:
        try:
            settings: Dict[str, str] = self.settings_store.all()
        except DataSourceError as e:
            logger.warning(f"Settings unavailable ({e}), ignoring road closures")
            settings = {}
        return parse_admin_override(settings, location)

    def _vehicle_count(self, location: str, now: datetime) -> float:
        window = timedelta(minutes=30)
        try:
            bookings = self.parking_store.bookings_between(location, now - window, now + window)
        except DataSourceError as e:
            logger.warning(f"Parking bookings unavailable for {location}: {e}")
            bookings = 0
        try:
            permits = len(self.permit_store.active_permits(location, now.date()))
        except DataSourceError as e:
            logger.warning(f"Permits unavailable for {location}: {e}")
            permits = 0
        return bookings + permits * self.permit_share

    def estimate(self, location: str) -> TrafficInfo:
        now = self.clock()
        override = self._override(location)
        manual = override.traffic_status.upper() if override.traffic_status else None

        if location in override.blocked_roads or manual == TrafficStatus.BLOCKED.value:
            return TrafficInfo(
                speed_kmph=0.0,
                delay_minutes=999,
                status=TrafficStatus.BLOCKED,
                best_time="Road is currently blocked",
                flow_opacity=1.0,
                closure_reason=override.closure_reason or "ROAD_ISSUE",
            )

        if manual in TrafficStatus.__members__:
            status = TrafficStatus[manual]
        else:
            vehicles = self._vehicle_count(location, now)
            if vehicles > self.road_capacity:
                status = TrafficStatus.HEAVY
            elif vehicles > self.road_capacity * 0.6:
                status = TrafficStatus.MODERATE
            else:
                status = TrafficStatus.SMOOTH

        speed, delay, opacity = STATUS_PROFILE[status]
        return TrafficInfo(
            speed_kmph=speed,
            delay_minutes=delay,
            status=status,
            best_time=suggest_best_time(now.hour),
            flow_opacity=opacity,
        )


def suggest_best_time(hour: int) -> str:
    if 10 <= hour <= 16:
        return "After 5:00 PM"
    if hour < 9:
        return "Right Now (Early Morning)"
    return "Early Morning (7:00 AM)"
