import pytest
from crowdsense.common.exceptions import InvalidSettingError
from crowdsense.crowd.domain.entities import ScoringWeights
from crowdsense.crowd.application.overrides import parse_admin_override, validate_setting

DEFAULTS = ScoringWeights(permits=0.35, parking=0.40, history=0.15, weather=0.10)


def test_empty_settings():
    override = parse_admin_override({}, "Ooty Lake", DEFAULTS)
    assert override.manual_level is None
    assert override.weights is None
    assert not override.festival_mode
    assert override.blocked_roads == []


def test_festival_and_blocked_roads():
    settings = {"FESTIVAL_MODE": "TRUE", "BLOCKED_ROADS": "Ooty Lake, Coonoor ,,"}
    override = parse_admin_override(settings, None, DEFAULTS)
    assert override.festival_mode
    assert override.blocked_roads == ["Ooty Lake", "Coonoor"]


def test_manual_level_for_location():
    settings = {"CROWD_STATUS_OOTY_LAKE": "high", "CROWD_STATUS_ROSE_GARDEN": "LOW"}
    assert parse_admin_override(settings, "Ooty Lake", DEFAULTS).manual_level == "HIGH"
    assert parse_admin_override(settings, "Rose Garden", DEFAULTS).manual_level == "LOW"
    assert parse_admin_override(settings, "Pykara Falls", DEFAULTS).manual_level is None


def test_unknown_manual_level_is_ignored():
    override = parse_admin_override({"CROWD_STATUS_OOTY_LAKE": "PANIC"}, "Ooty Lake", DEFAULTS)
    assert override.manual_level is None


def test_partial_weight_override_summing_to_one():
    settings = {"WEIGHT_PARKING": "0.5", "WEIGHT_PASSES": "0.25"}
    weights = parse_admin_override(settings, None, DEFAULTS).weights
    assert weights == ScoringWeights(permits=0.25, parking=0.5, history=0.15, weather=0.10)


def test_weight_override_not_summing_to_one_is_ignored():
    override = parse_admin_override({"WEIGHT_PARKING": "0.9"}, None, DEFAULTS)
    assert override.weights is None


def test_non_numeric_weight_is_ignored():
    override = parse_admin_override({"WEIGHT_PARKING": "lots"}, None, DEFAULTS)
    assert override.weights is None


def test_weights_skipped_without_defaults():
    override = parse_admin_override({"WEIGHT_PARKING": "0.5", "FESTIVAL_MODE": "true"}, None)
    assert override.weights is None
    assert override.festival_mode


def test_traffic_settings_for_location():
    settings = {"TRAFFIC_STATUS_OOTY_LAKE": "HEAVY", "CLOSURE_REASON_OOTY_LAKE": "ACCIDENT"}
    override = parse_admin_override(settings, "Ooty Lake")
    assert override.traffic_status == "HEAVY"
    assert override.closure_reason == "ACCIDENT"


@pytest.mark.parametrize("key,value,expected", [
    ("WEIGHT_PARKING", "0.5", "0.5"),
    ("WEIGHT_WEATHER", " 0 ", "0.0"),
    ("FESTIVAL_MODE", "True", "true"),
    ("BLOCKED_ROADS", " Ooty Lake, Coonoor ,", "Ooty Lake,Coonoor"),
    ("CROWD_STATUS_OOTY_LAKE", "critical", "CRITICAL"),
    ("CROWD_STATUS_OOTY_LAKE", "overflow", "OVERFLOW"),
    ("TRAFFIC_STATUS_OOTY_LAKE", "heavy", "HEAVY"),
    ("CLOSURE_REASON_OOTY_LAKE", "natural_disaster", "NATURAL_DISASTER"),
])
def test_validate_setting_normalizes(key, value, expected):
    assert validate_setting(key, value) == expected


@pytest.mark.parametrize("key,value", [
    ("WEIGHT_PARKING", "1.5"),
    ("WEIGHT_PARKING", "-0.1"),
    ("WEIGHT_PARKING", "abc"),
    ("FESTIVAL_MODE", "yes"),
    ("CROWD_STATUS_OOTY_LAKE", "PANIC"),
    ("TRAFFIC_STATUS_OOTY_LAKE", "GRIDLOCK"),
    ("CLOSURE_REASON_OOTY_LAKE", "ALIENS"),
    ("SOMETHING_ELSE", "1"),
    ("", "1"),
])
def test_validate_setting_rejects(key, value):
    with pytest.raises(InvalidSettingError):
        validate_setting(key, value)
