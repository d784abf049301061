from .database import engine, SessionLocal, Base, init_db, make_engine
from .models import (
    LocationDB, ParkingFacilityDB, ParkingBookingDB,
    PassDB, CrowdStatDB, SystemSettingDB
)

__all__ = [
    "engine", "SessionLocal", "Base", "init_db", "make_engine",
    "LocationDB", "ParkingFacilityDB", "ParkingBookingDB",
    "PassDB", "CrowdStatDB", "SystemSettingDB"
]
