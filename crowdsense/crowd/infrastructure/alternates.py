import logging
import math
from typing import Callable, List, Optional

from ..domain.entities import Spot, Suggestion
from ..domain.protocols import AlternateFinder
from .catalogue import SpotCatalogue, haversine_km

logger = logging.getLogger(__name__)


class CatalogueAlternateFinder(AlternateFinder):
    """
    Suggests the least crowded spot of the same category, provided it is
    clearly quieter (score below `max_candidate_score`).
    """

    def __init__(self, catalogue: SpotCatalogue, score_of: Callable[[Spot], int],
                 max_candidate_score: int = 50, region_center: Optional[List[float]] = None):
        self.catalogue = catalogue
        self.score_of = score_of
        self.max_candidate_score = max_candidate_score
        self.region_center = list(region_center) if region_center else [11.41, 76.69]

    def find_alternate(self, spot_id: str) -> Optional[Suggestion]:
        original = self.catalogue.get(spot_id)
        if original is None:
            logger.debug(f"No catalogue entry for {spot_id}, cannot suggest an alternate")
            return None

        best: Optional[Spot] = None
        lowest = self.max_candidate_score
        for candidate in self.catalogue.same_category(original):
            score = self.score_of(candidate)
            if score < lowest:
                lowest = score
                best = candidate

        if best is None:
            return None

        total = self.catalogue.parking_for(best.id) or 0
        free_slots = math.floor(total - total * (lowest / 100))

        lat, lng = self.region_center
        dist_original = haversine_km(lat, lng, original.latitude, original.longitude)
        dist_new = haversine_km(lat, lng, best.latitude, best.longitude)
        diff = dist_new - dist_original

        return Suggestion(
            original_spot_id=spot_id,
            spot_id=best.id,
            spot_name=best.name,
            category=best.category,
            crowd_score=lowest,
            parking_available=free_slots,
            reason=f"{original.name} is crowded",
            distance_diff=f"+{diff:.1f} km" if diff > 0 else f"{diff:.1f} km",
        )
