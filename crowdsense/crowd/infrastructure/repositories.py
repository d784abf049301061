"""
SQLAlchemy-backed stores. Every database failure surfaces as DataSourceError.
"""
import logging
from datetime import date, datetime, time
from functools import wraps
from typing import Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from ..domain.entities import HistoricalSample, ParkingUsage, PermitRecord
from ..domain.protocols import (
    HistoryStore, LocationStore, ParkingStore, PermitStore, SettingsStore,
)
from .memory import ACTIVE_BOOKING_STATUSES
from ...common.database.models import (
    CrowdStatDB, LocationDB, ParkingBookingDB, ParkingFacilityDB, PassDB, SystemSettingDB,
)
from ...common.exceptions import DataSourceError

logger = logging.getLogger(__name__)


def _day_bounds(day: date):
    return datetime.combine(day, time.min), datetime.combine(day, time.max)


def wraps_db_errors(func_):
    @wraps(func_)
    def wrapper(*args, **kwargs):
        try:
            return func_(*args, **kwargs)
        except SQLAlchemyError as e:
            logger.error(f"{func_.__qualname__} failed: {e}")
            raise DataSourceError(f"Database query failed: {e}") from e
    return wrapper


class SqlRepository:
    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory


class SqlPermitStore(SqlRepository, PermitStore):
    @wraps_db_errors
    def active_permits(self, destination: str, day: date) -> List[PermitRecord]:
        start, end = _day_bounds(day)
        with self.session_factory() as session:
            rows = session.execute(
                select(PassDB.members_count, PassDB.vehicle_type, PassDB.from_location)
                .where(PassDB.status == "ACTIVE")
                .where(PassDB.visit_date.between(start, end))
                .where(PassDB.to_location.ilike(f"%{destination}%"))
            ).all()
        return [PermitRecord(r.members_count, r.vehicle_type, r.from_location) for r in rows]

    @wraps_db_errors
    def active_counts_by_origin(self, since: date) -> Dict[str, int]:
        start, _ = _day_bounds(since)
        with self.session_factory() as session:
            rows = session.execute(
                select(PassDB.from_location, func.count(PassDB.id))
                .where(PassDB.status == "ACTIVE")
                .where(PassDB.visit_date >= start)
                .group_by(PassDB.from_location)
            ).all()
        return {origin: count for origin, count in rows if origin}


class SqlParkingStore(SqlRepository, ParkingStore):
    @wraps_db_errors
    def facility_usage(self, location: str, day: date) -> Optional[List[ParkingUsage]]:
        start, end = _day_bounds(day)
        with self.session_factory() as session:
            loc = session.execute(
                select(LocationDB).where(LocationDB.name.ilike(f"%{location}%")).limit(1)
            ).scalar_one_or_none()
            if loc is None:
                return None

            booked = (
                select(ParkingBookingDB.facility_id, func.count(ParkingBookingDB.id).label("booked"))
                .where(ParkingBookingDB.status.in_(ACTIVE_BOOKING_STATUSES))
                .where(ParkingBookingDB.booking_date.between(start, end))
                .group_by(ParkingBookingDB.facility_id)
                .subquery()
            )
            rows = session.execute(
                select(ParkingFacilityDB.id, ParkingFacilityDB.total_slots, func.coalesce(booked.c.booked, 0))
                .outerjoin(booked, booked.c.facility_id == ParkingFacilityDB.id)
                .where(ParkingFacilityDB.location_id == loc.id)
            ).all()
        return [ParkingUsage(facility_id, total, count) for facility_id, total, count in rows]

    @wraps_db_errors
    def bookings_between(self, location: str, start: datetime, end: datetime) -> int:
        with self.session_factory() as session:
            return session.execute(
                select(func.count(ParkingBookingDB.id))
                .join(ParkingFacilityDB, ParkingBookingDB.facility_id == ParkingFacilityDB.id)
                .join(LocationDB, ParkingFacilityDB.location_id == LocationDB.id)
                .where(LocationDB.name == location)
                .where(ParkingBookingDB.start_time.between(start, end))
                .where(ParkingBookingDB.status.in_(ACTIVE_BOOKING_STATUSES))
            ).scalar_one()


class SqlHistoryStore(SqlRepository, HistoryStore):
    def _query(self, spot: str):
        return (
            select(CrowdStatDB.timestamp, CrowdStatDB.count)
            .join(LocationDB, CrowdStatDB.location_id == LocationDB.id)
            .where(LocationDB.name.ilike(f"%{spot}%"))
        )

    def _fetch(self, stmt) -> List[HistoricalSample]:
        with self.session_factory() as session:
            return [HistoricalSample(ts, count) for ts, count in session.execute(stmt).all()]

    @wraps_db_errors
    def busiest_samples(self, spot: str, since: datetime, limit: int) -> List[HistoricalSample]:
        return self._fetch(
            self._query(spot).where(CrowdStatDB.timestamp >= since)
            .order_by(CrowdStatDB.count.desc()).limit(limit)
        )

    @wraps_db_errors
    def recent_samples(self, spot: str, limit: int) -> List[HistoricalSample]:
        return self._fetch(self._query(spot).order_by(CrowdStatDB.timestamp.desc()).limit(limit))

    @wraps_db_errors
    def samples_since(self, spot: str, since: datetime, limit: int) -> List[HistoricalSample]:
        return self._fetch(self._query(spot).where(CrowdStatDB.timestamp >= since).limit(limit))


class SqlSettingsStore(SqlRepository, SettingsStore):
    @wraps_db_errors
    def all(self) -> Dict[str, str]:
        with self.session_factory() as session:
            return {s.key: s.value for s in session.execute(select(SystemSettingDB)).scalars()}

    @wraps_db_errors
    def set(self, key: str, value: str) -> None:
        with self.session_factory() as session:
            session.merge(SystemSettingDB(key=key, value=str(value)))
            session.commit()


class SqlLocationStore(SqlRepository, LocationStore):
    @wraps_db_errors
    def names(self) -> List[str]:
        with self.session_factory() as session:
            return list(session.execute(select(LocationDB.name).order_by(LocationDB.name)).scalars())
