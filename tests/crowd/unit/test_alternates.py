import pytest
from crowdsense.crowd.domain.entities import Spot
from crowdsense.crowd.infrastructure.alternates import CatalogueAlternateFinder
from crowdsense.common.config import CrowdConfig
from crowdsense.crowd.infrastructure.catalogue import ALTERNATES, SpotCatalogue, haversine_km


@pytest.fixture
def catalogue():
    return SpotCatalogue()


def finder_with(catalogue, scores):
    return CatalogueAlternateFinder(catalogue, score_of=lambda spot: scores.get(spot.id, 100))


def test_suggests_quiet_spot_of_same_category(catalogue):
    suggestion = finder_with(catalogue, {"emerald-lake": 30}).find_alternate("ooty-lake")
    assert suggestion.spot_id == "emerald-lake"
    assert suggestion.spot_name == "Emerald Lake"
    assert suggestion.category == "Lakes"
    assert suggestion.crowd_score == 30
    # 60 slots, 30% taken
    assert suggestion.parking_available == 42
    assert suggestion.reason == "Ooty Lake is crowded"
    assert suggestion.distance_diff.startswith("+")
    assert suggestion.distance_diff.endswith(" km")


def test_lowest_score_wins():
    catalogue = SpotCatalogue(spots=[
        Spot("a", "Falls A", "Waterfalls", 11.40, 76.60),
        Spot("b", "Falls B", "Waterfalls", 11.41, 76.61),
        Spot("c", "Falls C", "Waterfalls", 11.42, 76.62),
    ], parking_slots={"b": 10})
    suggestion = finder_with(catalogue, {"b": 45, "c": 20}).find_alternate("a")
    assert suggestion.spot_id == "c"
    # No parking registered for c
    assert suggestion.parking_available == 0


def test_no_candidate_below_threshold(catalogue):
    assert finder_with(catalogue, {"emerald-lake": 50}).find_alternate("ooty-lake") is None


def test_spot_without_same_category_peers(catalogue):
    assert finder_with(catalogue, {}).find_alternate("tea-factory") is None


def test_unknown_spot(catalogue):
    assert finder_with(catalogue, {}).find_alternate("atlantis") is None


def test_catalogue_lookups(catalogue):
    assert catalogue.name_for("rose-garden") == "Rose Garden"
    assert catalogue.name_for("government-museum") == "Government Museum"
    assert catalogue.id_for("Tea Factory") == "tea-factory"
    assert catalogue.id_for("Wax World") == "wax-world"
    assert catalogue.find_by_name("ooty lake").id == "ooty-lake"


def test_configured_spot_names_match_catalogue_names():
    catalogue = SpotCatalogue()
    for name in list(CrowdConfig().default_spots) + list(ALTERNATES):
        assert catalogue.name_for(catalogue.id_for(name)) == name


def test_haversine():
    assert haversine_km(11.41, 76.69, 11.41, 76.69) == 0
    # One degree of latitude is about 111 km
    assert haversine_km(11.0, 76.0, 12.0, 76.0) == pytest.approx(111.2, abs=0.5)
