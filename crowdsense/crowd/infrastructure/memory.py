"""
In-memory store implementations, used for local development and tests.
"""
from collections import Counter
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, List, Optional, Tuple

from ..domain.entities import HistoricalSample, ParkingUsage, PermitRecord
from ..domain.protocols import (
    HistoryStore, LocationStore, ParkingStore, PermitStore, SettingsStore, WeatherClient,
)
from ...common.exceptions import DataSourceError

ACTIVE_BOOKING_STATUSES = ("BOOKED", "ARRIVED")


@dataclass
class StoredPermit:
    destination: str
    visit_date: date
    record: PermitRecord
    status: str = "ACTIVE"


class InMemoryPermitStore(PermitStore):
    def __init__(self):
        self.permits: List[StoredPermit] = []

    def add(self, destination: str, visit_date: date, members_count: Optional[int] = 1,
            vehicle_type: Optional[str] = "CAR", from_location: Optional[str] = None,
            status: str = "ACTIVE"):
        self.permits.append(StoredPermit(
            destination, visit_date, PermitRecord(members_count, vehicle_type, from_location), status,
        ))

    def active_permits(self, destination: str, day: date) -> List[PermitRecord]:
        needle = destination.lower()
        return [
            p.record for p in self.permits
            if p.status == "ACTIVE" and p.visit_date == day and needle in p.destination.lower()
        ]

    def active_counts_by_origin(self, since: date) -> Dict[str, int]:
        counts = Counter(
            p.record.from_location for p in self.permits
            if p.status == "ACTIVE" and p.visit_date >= since and p.record.from_location
        )
        return dict(counts)


@dataclass
class StoredFacility:
    facility_id: str
    location: str
    total_slots: int
    # (booking start, status)
    bookings: List[Tuple[datetime, str]] = field(default_factory=list)


class InMemoryParkingStore(ParkingStore):
    def __init__(self):
        self.facilities: Dict[str, StoredFacility] = {}
        self.locations: set = set()

    def add_location(self, location: str):
        self.locations.add(location)

    def add_facility(self, facility_id: str, location: str, total_slots: int):
        self.locations.add(location)
        self.facilities[facility_id] = StoredFacility(facility_id, location, total_slots)

    def book(self, facility_id: str, start: datetime, status: str = "BOOKED"):
        self.facilities[facility_id].bookings.append((start, status))

    def _location_match(self, location: str) -> Optional[str]:
        needle = location.lower()
        return next((name for name in self.locations if needle in name.lower()), None)

    def facility_usage(self, location: str, day: date) -> Optional[List[ParkingUsage]]:
        match = self._location_match(location)
        if match is None:
            return None
        return [
            ParkingUsage(
                facility_id=f.facility_id,
                total_slots=f.total_slots,
                booked_slots=sum(
                    1 for start, status in f.bookings
                    if start.date() == day and status in ACTIVE_BOOKING_STATUSES
                ),
            )
            for f in self.facilities.values() if f.location == match
        ]

    def bookings_between(self, location: str, start: datetime, end: datetime) -> int:
        return sum(
            1
            for f in self.facilities.values() if f.location == location
            for when, status in f.bookings
            if start <= when <= end and status in ACTIVE_BOOKING_STATUSES
        )


class InMemoryHistoryStore(HistoryStore):
    def __init__(self):
        self.samples: Dict[str, List[HistoricalSample]] = {}

    def add(self, spot: str, timestamp: datetime, count: int):
        self.samples.setdefault(spot, []).append(HistoricalSample(timestamp, count))

    def _for(self, spot: str) -> List[HistoricalSample]:
        needle = spot.lower()
        return [s for name, rows in self.samples.items() if needle in name.lower() for s in rows]

    def busiest_samples(self, spot: str, since: datetime, limit: int) -> List[HistoricalSample]:
        rows = [s for s in self._for(spot) if s.timestamp >= since]
        return sorted(rows, key=lambda s: s.count, reverse=True)[:limit]

    def recent_samples(self, spot: str, limit: int) -> List[HistoricalSample]:
        return sorted(self._for(spot), key=lambda s: s.timestamp, reverse=True)[:limit]

    def samples_since(self, spot: str, since: datetime, limit: int) -> List[HistoricalSample]:
        return [s for s in self._for(spot) if s.timestamp >= since][:limit]


class InMemorySettingsStore(SettingsStore):
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.values: Dict[str, str] = dict(initial or {})

    def all(self) -> Dict[str, str]:
        return dict(self.values)

    def set(self, key: str, value: str) -> None:
        self.values[key] = str(value)


class InMemoryLocationStore(LocationStore):
    def __init__(self, names: Optional[List[str]] = None):
        self._names = list(names or [])

    def names(self) -> List[str]:
        return list(self._names)


class StaticWeatherClient(WeatherClient):
    """Fixed weather codes per region; unknown regions behave like an outage."""

    def __init__(self, codes: Optional[Dict[str, int]] = None):
        self.codes = dict(codes or {})

    def current_code(self, region: str) -> int:
        if region not in self.codes:
            raise DataSourceError(f"No weather data for {region}")
        return self.codes[region]
