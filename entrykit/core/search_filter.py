"""
search_filter.py - Ranked entry filtering

Orders a listing against a free-text query and marks which records stay
visible. Records are never removed, only reordered and masked.
"""

from dataclasses import replace
from typing import Dict, List, Sequence, Tuple
import logging

from .config import MIN_SCORE
from .fuzzy import best_score
from .identifiers import extract
from .models import Record, ScoredRecord, SessionState

logger = logging.getLogger(__name__)


def restore_order(records: Sequence[Record], snapshot: Sequence[str]) -> List[Record]:
    """
    Put records back into a previously saved order

    Records missing from the snapshot keep their current relative order and
    go after the ones that were saved.
    """
    position: Dict[str, int] = {name: i for i, name in enumerate(snapshot)}
    fallback = len(position)
    return sorted(records, key=lambda r: position.get(r.primary_name, fallback))


def score_records(records: Sequence[Record], query: str) -> List[ScoredRecord]:
    """
    Score every record against a non-empty query, in input order

    A query naming an AniList or TMDB id matches exactly that id and nothing
    else, even when no record carries it. Any other query is fuzzy matched
    against the primary name and every alternate name.
    """
    identifier = extract(query)
    if identifier is not None:
        logger.debug("Filtering %d records by identifier %s", len(records), identifier)
        return [
            ScoredRecord(r, 0 if r.external_ids.matches(identifier) else MIN_SCORE)
            for r in records
        ]

    logger.debug("Filtering %d records by fuzzy query %r", len(records), query)
    return [ScoredRecord(r, best_score(r.names, query)) for r in records]


def filter_records(
    records: Sequence[Record],
    query: str,
    state: SessionState
) -> Tuple[List[ScoredRecord], SessionState]:
    """
    Rank records against a query

    Args:
        records: Records in their current display order
        query: Raw query text
        state: Current session state

    Returns:
        (scored records, new session state) - same cardinality as the input,
        best score first, ties in their prior relative order
    """
    if not query:
        ordered = list(records)
        if state.snapshot is not None:
            ordered = restore_order(records, state.snapshot)
        new_state = replace(state, query="", snapshot=None)
        return [ScoredRecord(r, 0) for r in ordered], new_state

    snapshot = state.snapshot
    if snapshot is None:
        snapshot = tuple(r.primary_name for r in records)

    scored = score_records(records, query)
    # sorted() is stable, equal scores keep their prior order
    scored = sorted(scored, key=lambda s: s.score, reverse=True)
    return scored, replace(state, query=query, snapshot=snapshot)


def visible_records(scored: Sequence[ScoredRecord]) -> List[Record]:
    """Records that passed the filter, in display order"""
    return [s.record for s in scored if s.visible]
