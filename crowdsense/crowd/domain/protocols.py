"""
Domain protocols for the Crowd module.

These are the outbound capabilities the scoring core consumes. Implementations
raise DataSourceError when the backing source is unavailable.
"""
from datetime import date, datetime
from typing import Dict, List, Optional, Protocol

from .entities import HistoricalSample, ParkingUsage, PermitRecord, Suggestion


class PermitStore(Protocol):
    def active_permits(self, destination: str, day: date) -> List[PermitRecord]:
        ...

    def active_counts_by_origin(self, since: date) -> Dict[str, int]:
        ...


class ParkingStore(Protocol):
    def facility_usage(self, location: str, day: date) -> Optional[List[ParkingUsage]]:
        """None when the location is unknown."""
        ...

    def bookings_between(self, location: str, start: datetime, end: datetime) -> int:
        ...


class HistoryStore(Protocol):
    def busiest_samples(self, spot: str, since: datetime, limit: int) -> List[HistoricalSample]:
        """Samples since `since`, highest count first."""
        ...

    def recent_samples(self, spot: str, limit: int) -> List[HistoricalSample]:
        """Newest first."""
        ...

    def samples_since(self, spot: str, since: datetime, limit: int) -> List[HistoricalSample]:
        ...


class WeatherClient(Protocol):
    def current_code(self, region: str) -> int:
        """WMO weather code for the region."""
        ...


class SettingsStore(Protocol):
    def all(self) -> Dict[str, str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...


class LocationStore(Protocol):
    def names(self) -> List[str]:
        ...


class AlternateFinder(Protocol):
    def find_alternate(self, spot_id: str) -> Optional[Suggestion]:
        ...
