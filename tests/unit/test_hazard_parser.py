import pytest

from app.services.hazard_parser import UNKNOWN_LOCATION, parse_hazard_report


def test_flood_near_marina_beach():
    parsed = parse_hazard_report("Flooding near Marina Beach, urgent help needed")
    assert parsed.hazard_type == "flood"
    assert parsed.urgency == "urgent"
    assert parsed.location == "Marina Beach"


def test_storm_at_port():
    parsed = parse_hazard_report("storm warning at Port X")
    assert parsed.hazard_type == "storm"
    assert parsed.urgency == "medium"
    assert parsed.location == "Port X"


@pytest.mark.parametrize("text", ["", None, "hello there", "all calm today"])
def test_no_keywords_defaults(text):
    parsed = parse_hazard_report(text)
    assert parsed.hazard_type == "other"
    assert parsed.urgency == "medium"


def test_none_body_is_empty_message():
    parsed = parse_hazard_report(None)
    assert parsed.original_message == ""
    assert parsed.location == UNKNOWN_LOCATION


# ── category priority ────────────────────────────────────────────────

def test_first_category_wins():
    # "surge" is tsunami, "wave" is waves; tsunami is checked first.
    assert parse_hazard_report("big wave surge").hazard_type == "tsunami"
    # flood outranks storm
    assert parse_hazard_report("storm and flood").hazard_type == "flood"


def test_wind_is_storm():
    assert parse_hazard_report("strong WIND gusts").hazard_type == "storm"


def test_high_waves():
    parsed = parse_hazard_report("high waves hitting the pier")
    assert parsed.hazard_type == "waves"
    assert parsed.urgency == "medium"


def test_urgency_priority():
    assert parse_hazard_report("minor flooding, need help").urgency == "urgent"
    assert parse_hazard_report("dangerous but minor").urgency == "medium"
    assert parse_hazard_report("small puddle").urgency == "low"


def test_keywords_are_case_insensitive():
    parsed = parse_hazard_report("TSUNAMI EMERGENCY")
    assert parsed.hazard_type == "tsunami"
    assert parsed.urgency == "urgent"


# ── location extraction ──────────────────────────────────────────────

def test_location_stops_at_period():
    assert parse_hazard_report("Surge near Puri. Stay away").location == "Puri"


def test_location_stops_at_newline():
    assert parse_hazard_report("waves in Kovalam\nsent from phone").location == "Kovalam"


def test_location_missing():
    assert parse_hazard_report("flood!!!").location == UNKNOWN_LOCATION


def test_deterministic():
    text = "Cyclone approaching near Chennai coast, serious"
    assert parse_hazard_report(text) == parse_hazard_report(text)
