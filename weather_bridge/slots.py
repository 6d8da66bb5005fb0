"""
Resolve multi-valued city/state slots to a single value.

The conversation service keeps every entity match made during the dialog, so a
slot is either a plain value or the ordered history of recognizer matches.
"""

from typing import Any

from .schemas import HistorySlot, ScalarSlot, SlotMatch


def parse_slot(raw: Any) -> ScalarSlot | HistorySlot:
    if isinstance(raw, list):
        matches = [item if isinstance(item, dict) else {"value": item} for item in raw]
        return HistorySlot(matches=[SlotMatch.model_validate(item) for item in matches])
    return ScalarSlot(value=raw)


def resolve_city(slot: ScalarSlot | HistorySlot) -> Any:
    if isinstance(slot, ScalarSlot):
        return slot.value
    if not slot.matches:
        return None
    return slot.matches[-1].value


def resolve_state(
    slot: ScalarSlot | HistorySlot,
    resolved_city: Any,
    raw_duplicate_match: bool = True,
) -> Any:
    """
    Pick the state that disambiguates ``resolved_city``.

    The last match that differs from the city wins. When every match equals the
    city and there are at least two of them (e.g. "Georgia" recognized as both a
    city and a state), the last one wins. With ``raw_duplicate_match`` the whole
    match object is returned for that case, as existing clients receive it.
    """
    if isinstance(slot, ScalarSlot):
        return slot.value

    mismatches = [match for match in slot.matches if match.value != resolved_city]
    if mismatches:
        return mismatches[-1].value

    matches = [match for match in slot.matches if match.value == resolved_city]
    if len(matches) >= 2:
        if raw_duplicate_match:
            return matches[-1].model_dump()
        return matches[-1].value
    return None
