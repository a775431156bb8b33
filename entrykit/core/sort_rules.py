"""
sort_rules.py - Sorting Rules Module

Orders the full record set by a column. All sorts are stable, so sorting an
already sorted listing again leaves it unchanged.
"""

from dataclasses import replace
from typing import Callable, List, Sequence
import locale
import logging

from .models import NamePreference, Record, SessionState, SortDirection, SortKey
from .text_match import normalize

logger = logging.getLogger(__name__)


def _reason_key(record: Record) -> tuple:
    # Absent reason is the minimal sentinel; numeric reasons order before text
    reason = record.reason
    if reason is None or reason == "":
        return (0, 0, "")
    try:
        return (1, int(reason), "")
    except ValueError:
        return (2, 0, reason.casefold())


def get_sort_key(
    sort_by: SortKey,
    preference: NamePreference = NamePreference.ROMAJI
) -> Callable[[Record], object]:
    """
    Get sort key function

    Args:
        sort_by: Sorting column
        preference: Display name preference (name sorting uses the shown label)

    Returns:
        Sort key function
    """
    if sort_by == SortKey.SIZE:
        return lambda r: r.size
    elif sort_by == SortKey.MODIFIED:
        return lambda r: r.modified_timestamp
    elif sort_by == SortKey.REASON:
        return _reason_key
    else:
        return lambda r: _name_key(r.display_name(preference))


def _name_key(name: str) -> tuple:
    # Accents only break ties, so "élan" sorts beside "elan" even in the C locale
    folded = name.casefold()
    return (locale.strxfrm(normalize(folded)), locale.strxfrm(folded))


def use_user_collation() -> None:
    """Collate names with the user's locale instead of the C default"""
    try:
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error as e:
        logger.warning("Locale collation unavailable, using codepoint order: %s", e)


def sort_records(
    records: Sequence[Record],
    sort_by: SortKey = SortKey.NAME,
    direction: SortDirection = SortDirection.ASCENDING,
    preference: NamePreference = NamePreference.ROMAJI
) -> List[Record]:
    """
    Sort record list

    Args:
        records: Record list
        sort_by: Sorting column
        direction: Sort direction
        preference: Display name preference

    Returns:
        Sorted record list (new list)
    """
    key_func = get_sort_key(sort_by, preference)
    return sorted(records, key=key_func, reverse=direction == SortDirection.DESCENDING)


def toggle_header(state: SessionState, sort_by: SortKey) -> SessionState:
    """
    Apply a column header click to the session state

    Clicking the active column flips its direction; any other column starts
    ascending.
    """
    if state.sort_key == sort_by:
        return replace(state, direction=state.direction.flipped())
    return replace(state, sort_key=sort_by, direction=SortDirection.ASCENDING)


def sort_with_state(records: Sequence[Record], state: SessionState) -> tuple:
    """
    Sort by the state's column and, while a filter is active, make the new
    order the one restored when the filter is cleared

    Returns:
        (sorted records, new session state)
    """
    ordered = sort_records(records, state.sort_key, state.direction, state.preference)
    if state.snapshot is not None:
        state = replace(state, snapshot=tuple(r.primary_name for r in ordered))
    return ordered, state
