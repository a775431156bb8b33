"""
session.py - Listing session

Maps each UI command (query typed, header clicked, rule edited, name
preference changed) onto one engine call, and keeps the only state that
lives between calls: the SessionState and the current display order.
Front ends own the wiring and nothing else.
"""

from dataclasses import dataclass, replace
from typing import Callable, Dict, Iterable, List, Optional, Set
import logging
import os

from .config import DEBOUNCE_MS, ENV_PREFERRED_NAME, ENV_SORT_BY, ENV_SORT_ORDER
from .exceptions import EmptySubmissionError, InvalidPatternError
from .models import (
    NamePreference, Record, RenameForm, RenamePlan, RenameRule,
    ScoredRecord, SessionState, SortDirection, SortKey,
)
from .plan_rename import preview, validate_plan
from .rename_rule import compile_rule
from .search_filter import filter_records
from .sort_rules import sort_with_state, toggle_header

logger = logging.getLogger(__name__)


@dataclass
class EngineOptions:
    """Initial session state supplied by the host application"""
    sort_by: SortKey = SortKey.NAME
    sort_order: SortDirection = SortDirection.ASCENDING
    preferred_name: NamePreference = NamePreference.ROMAJI
    debounce_ms: int = DEBOUNCE_MS

    @classmethod
    def from_env(cls) -> "EngineOptions":
        """Build options from ENTRYKIT_* environment variables, ignoring unknown values"""
        options = cls()
        for env, attr, enum in (
            (ENV_SORT_BY, "sort_by", SortKey),
            (ENV_SORT_ORDER, "sort_order", SortDirection),
            (ENV_PREFERRED_NAME, "preferred_name", NamePreference),
        ):
            value = os.environ.get(env)
            if not value:
                continue
            try:
                setattr(options, attr, enum(value.lower()))
            except ValueError:
                logger.warning("Ignoring %s=%r", env, value)
        return options

    def initial_state(self) -> SessionState:
        return SessionState(
            sort_key=self.sort_by,
            direction=self.sort_order,
            preference=self.preferred_name,
        )


class EntrySession:
    """One listing, from load until the next load"""

    def __init__(self, options: Optional[EngineOptions] = None):
        self.options = options or EngineOptions()
        self.state = self.options.initial_state()
        self.scored: List[ScoredRecord] = []
        self.rule: Optional[RenameRule] = None
        self.plan: Optional[RenamePlan] = None
        self.pattern_error: Optional[InvalidPatternError] = None
        self._selected: Set[str] = set()
        self._listeners: List[Callable[[], None]] = []

    # --- Listing ---

    def load(self, records: Iterable[Record]) -> None:
        """Replace the listing wholesale and apply the current sort"""
        self.state = replace(self.state, query="", snapshot=None)
        ordered, self.state = sort_with_state(list(records), self.state)
        self.scored = [ScoredRecord(r, 0) for r in ordered]
        self._selected.clear()
        self.rule = None
        self.plan = None
        self.pattern_error = None
        logger.debug("Session loaded %d records", len(self.scored))

    @property
    def records(self) -> List[Record]:
        """Every record in display order, hidden ones included"""
        return [s.record for s in self.scored]

    @property
    def visible(self) -> List[Record]:
        return [s.record for s in self.scored if s.visible]

    def is_visible(self, name: str) -> bool:
        return any(s.visible for s in self.scored if s.record.primary_name == name)

    # --- Commands ---

    def on_query_changed(self, query: str) -> List[ScoredRecord]:
        """Re-rank the listing and notify filter listeners"""
        self.scored, self.state = filter_records(self.records, query, self.state)
        self._notify()
        return self.scored

    def clear_query(self) -> List[ScoredRecord]:
        return self.on_query_changed("")

    def on_header_clicked(self, sort_by: SortKey) -> List[ScoredRecord]:
        """Toggle/switch the sort column and reorder the full listing"""
        self.state = toggle_header(self.state, sort_by)
        self._resort()
        return self.scored

    def on_preference_changed(self, preference: NamePreference) -> None:
        """Switch displayed titles; name sorting follows the shown label"""
        self.state = replace(self.state, preference=preference)
        if self.state.sort_key == SortKey.NAME:
            self._resort()

    def on_rule_edited(self, form: RenameForm) -> Optional[RenamePlan]:
        """
        Recompile the rename rule and regenerate the preview

        An invalid pattern is kept in pattern_error and the last valid
        preview is returned unchanged.
        """
        try:
            rule = compile_rule(form)
        except InvalidPatternError as e:
            self.pattern_error = e
            return self.plan
        self.pattern_error = None
        self.rule = rule
        self.plan = preview(rule, self.selected_names())
        validate_plan(self.plan, [r.primary_name for r in self.records])
        return self.plan

    def rename_payload(self) -> List[Dict[str, str]]:
        """
        Changed-only `[{from, to}]` list for the rename request

        Raises:
            EmptySubmissionError: no preview, or nothing would change
        """
        if self.plan is None or not self.plan.changes:
            raise EmptySubmissionError("No files need renaming")
        return self.plan.to_payload()

    # --- Selection ---

    def select(self, names: Iterable[str], selected: bool = True) -> None:
        names = set(names)
        if selected:
            self._selected |= names
        else:
            self._selected -= names

    def clear_selection(self) -> None:
        self._selected.clear()

    def select_all_visible(self) -> None:
        self._selected = {r.primary_name for r in self.visible}

    def selected_names(self) -> List[str]:
        """Selected records that are currently visible, in display order"""
        return [s.record.primary_name for s in self.scored if s.visible and s.record.primary_name in self._selected]

    # --- Notifications ---

    def add_filter_listener(self, callback: Callable[[], None]) -> None:
        self._listeners.append(callback)

    def remove_filter_listener(self, callback: Callable[[], None]) -> None:
        self._listeners.remove(callback)

    def _notify(self) -> None:
        for callback in list(self._listeners):
            callback()

    def _resort(self) -> None:
        scores = {s.record.primary_name: s.score for s in self.scored}
        ordered, self.state = sort_with_state(self.records, self.state)
        self.scored = [ScoredRecord(r, scores[r.primary_name]) for r in ordered]
