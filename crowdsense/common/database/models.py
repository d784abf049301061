from sqlalchemy import Column, Integer, String, Float, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from .database import Base

# --- Places ---

class LocationDB(Base):
    __tablename__ = "locations"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, unique=True, nullable=False, index=True)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)

    parking_facilities = relationship("ParkingFacilityDB", back_populates="location")
    crowd_stats = relationship("CrowdStatDB", back_populates="location")

class ParkingFacilityDB(Base):
    __tablename__ = "parking_facilities"

    id = Column(String, primary_key=True, index=True)
    location_id = Column(Integer, ForeignKey("locations.id"), nullable=False)
    name = Column(String, nullable=False)
    total_slots = Column(Integer, nullable=False)

    location = relationship("LocationDB", back_populates="parking_facilities")
    bookings = relationship("ParkingBookingDB", back_populates="facility")

class ParkingBookingDB(Base):
    __tablename__ = "parking_bookings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    facility_id = Column(String, ForeignKey("parking_facilities.id"), nullable=False, index=True)
    booking_date = Column(DateTime, nullable=False, index=True)
    start_time = Column(DateTime, nullable=False)
    status = Column(String, nullable=False, default="BOOKED")  # BOOKED, ARRIVED, CANCELLED, COMPLETED

    facility = relationship("ParkingFacilityDB", back_populates="bookings")

# --- Entry permits (E-Pass) ---

class PassDB(Base):
    __tablename__ = "passes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    from_location = Column(String, nullable=True)
    to_location = Column(String, nullable=False, index=True)
    visit_date = Column(DateTime, nullable=False, index=True)
    status = Column(String, nullable=False, default="ACTIVE")
    members_count = Column(Integer, nullable=True)
    vehicle_type = Column(String, nullable=True)  # BUS, CAR, BIKE, ...

# --- Visit-count time series ---

class CrowdStatDB(Base):
    __tablename__ = "crowd_stats"

    id = Column(Integer, primary_key=True, autoincrement=True)
    location_id = Column(Integer, ForeignKey("locations.id"), nullable=False)
    timestamp = Column(DateTime, nullable=False, index=True)
    count = Column(Integer, nullable=False)

    location = relationship("LocationDB", back_populates="crowd_stats")

# --- Admin settings ---

class SystemSettingDB(Base):
    __tablename__ = "system_settings"

    key = Column(String, primary_key=True)
    value = Column(String, nullable=False)
