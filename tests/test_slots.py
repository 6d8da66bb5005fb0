"""Tests for city/state slot disambiguation."""

from weather_bridge.schemas import HistorySlot, ScalarSlot
from weather_bridge.slots import parse_slot, resolve_city, resolve_state


def test_parse_slot_distinguishes_scalars_from_histories() -> None:
    assert parse_slot("Austin") == ScalarSlot(value="Austin")
    assert parse_slot(None) == ScalarSlot(value=None)

    history = parse_slot([{"value": "Austin", "location": [0, 6]}, {"value": "Dallas"}])
    assert isinstance(history, HistorySlot)
    assert [match.value for match in history.matches] == ["Austin", "Dallas"]


def test_last_city_match_wins() -> None:
    slot = parse_slot([{"value": "Austin"}, {"value": "Dallas"}])

    assert resolve_city(slot) == "Dallas"


def test_scalar_city_passes_through() -> None:
    assert resolve_city(parse_slot("Austin")) == "Austin"
    assert resolve_city(parse_slot(None)) is None
    assert resolve_city(parse_slot([])) is None


def test_last_state_that_differs_from_city_wins() -> None:
    slot = parse_slot([{"value": "Texas"}, {"value": "Austin"}])

    assert resolve_state(slot, "Austin") == "Texas"


def test_latest_of_several_mismatches_wins() -> None:
    slot = parse_slot([{"value": "Illinois"}, {"value": "Springfield"}, {"value": "Missouri"}])

    assert resolve_state(slot, "Springfield") == "Missouri"


def test_duplicate_city_state_match_returns_raw_match() -> None:
    slot = parse_slot([{"value": "Georgia", "location": [0, 7]}, {"value": "Georgia", "location": [12, 19]}])

    assert resolve_state(slot, "Georgia") == {"value": "Georgia", "location": [12, 19]}


def test_duplicate_city_state_match_value_when_raw_disabled() -> None:
    slot = parse_slot([{"value": "Georgia"}, {"value": "Georgia"}])

    assert resolve_state(slot, "Georgia", raw_duplicate_match=False) == "Georgia"


def test_single_match_equal_to_city_is_dropped() -> None:
    slot = parse_slot([{"value": "Georgia"}])

    assert resolve_state(slot, "Georgia") is None


def test_scalar_state_passes_through() -> None:
    assert resolve_state(parse_slot("Texas"), "Austin") == "Texas"
    assert resolve_state(parse_slot(None), "Austin") is None
