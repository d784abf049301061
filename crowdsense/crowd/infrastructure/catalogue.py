"""
Static spot catalogue: tourist spots, their parking capacity, the hand-curated
alternate table and the weather regions.
"""
import math
from typing import Dict, List, Optional, Sequence, Tuple

from ..domain.entities import Spot
from ...common.utils import slugify

SPOTS: List[Spot] = [
    Spot("ooty-lake", "Ooty Lake", "Lakes", 11.4102, 76.6950),
    Spot("botanical-garden", "Botanical Garden", "Gardens", 11.4150, 76.7100),
    Spot("doddabetta-peak", "Doddabetta Peak", "View Points", 11.4012, 76.7348),
    Spot("rose-garden", "Rose Garden", "Gardens", 11.4000, 76.7100),
    Spot("tea-factory", "Tea Factory", "Heritage", 11.4050, 76.7150, indoor=True),
    Spot("pykara-falls", "Pykara Falls", "Waterfalls", 11.4780, 76.6020),
    Spot("9th-mile", "9th Mile Shooting Point", "View Points", 11.4500, 76.6500),
    Spot("emerald-lake", "Emerald Lake", "Lakes", 11.3750, 76.5800),
]

# spot id -> total parking slots
PARKING_SLOTS: Dict[str, int] = {
    "ooty-lake": 150,
    "botanical-garden": 200,
    "doddabetta-peak": 80,
    "rose-garden": 100,
    "emerald-lake": 60,
}

# spot name -> alternates, best first
ALTERNATES: Dict[str, List[str]] = {
    "Ooty Lake": ["Emerald Lake", "Pykara Lake"],
    "Botanical Garden": ["Rose Garden", "Government Museum"],
    "Doddabetta Peak": ["Nilgiri Mountain Railway", "Dolphin's Nose"],
    "Rose Garden": ["Thread Garden", "Botanical Garden"],
    "Tea Factory": ["Chocolate Factory", "Wax World"],
}

WEATHER_REGIONS: Dict[str, Tuple[float, float]] = {
    "Ooty": (11.4102, 76.6950),
    "Coonoor": (11.3530, 76.7959),
    "Kotagiri": (11.4216, 76.8616),
    "Doddabetta": (11.4012, 76.7348),
    "Pykara": (11.4500, 76.6000),
    "Avalanche": (11.2900, 76.5700),
    "Botanical Garden": (11.4150, 76.7100),
    "Tea Factory": (11.4050, 76.7150),
    "Rose Garden": (11.4000, 76.7100),
    "Tribal Museum": (11.4200, 76.7000),
}

ENTRY_GATES: Sequence[str] = ("Mettupalayam", "Coonoor", "Kotagiri", "Gudalur")


def haversine_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Return distance in kilometres between two (lat, lng) points."""
    r = 6371.0
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    a = (math.sin(math.radians(lat2 - lat1) / 2) ** 2
         + math.cos(phi1) * math.cos(phi2)
         * math.sin(math.radians(lng2 - lng1) / 2) ** 2)
    return 2 * r * math.asin(math.sqrt(a))


class SpotCatalogue:
    def __init__(self, spots: Sequence[Spot] = SPOTS, parking_slots: Optional[Dict[str, int]] = None):
        self.spots = list(spots)
        self.parking_slots = dict(PARKING_SLOTS if parking_slots is None else parking_slots)
        self._by_id = {s.id: s for s in self.spots}

    def get(self, spot_id: str) -> Optional[Spot]:
        return self._by_id.get(spot_id)

    def find_by_name(self, name: str) -> Optional[Spot]:
        needle = name.strip().lower()
        for spot in self.spots:
            if spot.name.lower() == needle:
                return spot
        for spot in self.spots:
            if needle in spot.name.lower() or spot.name.lower() in needle:
                return spot
        return None

    def name_for(self, spot_id: str) -> str:
        """Display name for an id; unknown ids are de-slugged ('foo-bar' -> 'Foo Bar')."""
        spot = self.get(spot_id)
        if spot is not None:
            return spot.name
        return spot_id.replace("-", " ").title()

    def id_for(self, name: str) -> str:
        spot = self.find_by_name(name)
        return spot.id if spot is not None else slugify(name)

    def same_category(self, spot: Spot) -> List[Spot]:
        return [s for s in self.spots if s.id != spot.id and s.category == spot.category]

    def parking_for(self, spot_id: str) -> Optional[int]:
        return self.parking_slots.get(spot_id)
