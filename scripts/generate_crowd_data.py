import datetime
import os
import sys

import numpy as np

# Add project root to path
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
from crowdsense.common.database import (
    CrowdStatDB, LocationDB, ParkingBookingDB, ParkingFacilityDB, PassDB,
    SessionLocal, init_db,
)
from crowdsense.crowd.infrastructure.catalogue import ENTRY_GATES, PARKING_SLOTS, SPOTS

# Simulation Configuration
DAYS_OF_HISTORY = 60
PASSES_PER_DAY = 300
VEHICLE_TYPES = ["CAR", "BUS", "BIKE", "VAN"]
VEHICLE_PROBS = [0.6, 0.1, 0.2, 0.1]


def generate_data(days=DAYS_OF_HISTORY, seed=42):
    """
    Fills the configured database (DATABASE_URL) with synthetic locations,
    parking bookings, passes and hourly visit counts.
    """
    print(f"Generating {days} days of synthetic crowd data...")
    rng = np.random.default_rng(seed)
    init_db()

    now = datetime.datetime.now().replace(minute=0, second=0, microsecond=0)
    today = now.replace(hour=0)

    with SessionLocal() as session:
        for spot in SPOTS:
            location = LocationDB(name=spot.name, latitude=spot.latitude, longitude=spot.longitude)
            session.add(location)
            session.flush()

            # 1. Hourly visit counts, busier midday and on weekends
            for day in range(days, 0, -1):
                current = today - datetime.timedelta(days=day)
                weekend = 1.3 if current.weekday() >= 5 else 1.0
                for hour in range(7, 20):
                    peak = 1.0 - abs(hour - 13) / 8
                    count = int(rng.normal(600 * peak * weekend, 80))
                    session.add(CrowdStatDB(
                        location_id=location.id,
                        timestamp=current.replace(hour=hour),
                        count=max(count, 0),
                    ))

            # 2. Parking facility and today's bookings
            slots = PARKING_SLOTS.get(spot.id)
            if slots:
                facility = ParkingFacilityDB(
                    id=f"{spot.id}-p1", location_id=location.id,
                    name=f"{spot.name} Parking", total_slots=slots,
                )
                session.add(facility)
                booked = int(rng.integers(slots // 4, slots))
                for _ in range(booked):
                    start = today + datetime.timedelta(hours=int(rng.integers(7, 19)))
                    session.add(ParkingBookingDB(
                        facility_id=facility.id, booking_date=today, start_time=start,
                        status=str(rng.choice(["BOOKED", "ARRIVED", "CANCELLED"], p=[0.6, 0.3, 0.1])),
                    ))

        # 3. Entry passes for today
        names = [s.name for s in SPOTS]
        for _ in range(PASSES_PER_DAY):
            session.add(PassDB(
                from_location=f"{rng.choice(list(ENTRY_GATES))} Check Post",
                to_location=str(rng.choice(names)),
                visit_date=today,
                status="ACTIVE",
                members_count=int(rng.integers(1, 8)),
                vehicle_type=str(rng.choice(VEHICLE_TYPES, p=VEHICLE_PROBS)),
            ))

        session.commit()

    print(f"Seeded {len(SPOTS)} locations and {PASSES_PER_DAY} passes")


if __name__ == "__main__":
    generate_data()
