"""
models.py - Core Data Structure Definitions

Contains:
- Record: One file/entry row of a listing
- ScoredRecord: A record ranked against a query
- RenameForm / RenameRule: Raw and compiled rename settings
- RenameEntry / RenamePlan: Previewable original -> renamed mapping
"""

import re
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple

from .config import MIN_SCORE


class SortKey(Enum):
    """Sort key enumeration"""
    NAME = "name"            # Displayed label
    REASON = "reason"        # Trash/removal reason
    SIZE = "size"            # File size
    MODIFIED = "modified"    # Last modification time


class SortDirection(Enum):
    """Sort direction enumeration"""
    ASCENDING = "ascending"
    DESCENDING = "descending"

    def flipped(self) -> "SortDirection":
        if self is SortDirection.ASCENDING:
            return SortDirection.DESCENDING
        return SortDirection.ASCENDING


class NamePreference(Enum):
    """Which title is displayed for an entry"""
    ROMAJI = "romaji"        # primary name
    NATIVE = "native"        # japanese name
    ENGLISH = "english"      # english name


class RenameScope(Enum):
    """Portion of a filename a rename rule applies to"""
    WHOLE = "whole"          # Entire filename
    BASE = "base"            # Before the last dot
    EXTENSION = "ext"        # After the last dot


class CaseTransform(Enum):
    """Case transformation applied after replacement"""
    NONE = "none"
    LOWER = "lower"
    UPPER = "upper"

    def apply(self, text: str) -> str:
        if self is CaseTransform.LOWER:
            return text.lower()
        if self is CaseTransform.UPPER:
            return text.upper()
        return text


@dataclass(frozen=True)
class AlternateName:
    """Alternate title of a record (e.g., native or English)"""
    label: str
    value: str


@dataclass(frozen=True)
class AniListId:
    """AniList numeric media identifier"""
    id: int

    def __str__(self) -> str:
        return str(self.id)


@dataclass(frozen=True)
class TmdbId:
    """TMDB identifier, scoped by media kind"""
    kind: str                # "movie" or "tv"
    id: int

    def __str__(self) -> str:
        return f"{self.kind}:{self.id}"

    @property
    def is_movie(self) -> bool:
        return self.kind == "movie"

    def url(self) -> str:
        """Canonical TMDB page URL"""
        return f"https://www.themoviedb.org/{self.kind}/{self.id}"


@dataclass(frozen=True)
class ExternalIds:
    """External identifiers attached to a record"""
    anilist: Optional[AniListId] = None
    tmdb: Optional[TmdbId] = None

    def matches(self, identifier) -> bool:
        """Whether this record carries exactly the given identifier"""
        if isinstance(identifier, AniListId):
            return self.anilist == identifier
        if isinstance(identifier, TmdbId):
            return self.tmdb == identifier
        return False


def preferred_name(primary: str, alternates: Sequence[AlternateName], preference: NamePreference) -> str:
    """Pick the label to display, falling back to the primary name"""
    if preference is NamePreference.ROMAJI:
        return primary
    for alt in alternates:
        if alt.label == preference.value and alt.value:
            return alt.value
    return primary


@dataclass(frozen=True)
class Record:
    """One file/entry row of a listing"""
    primary_name: str                                   # Unique within a listing
    size: int = 0                                       # Bytes
    modified_at: Optional[datetime] = None              # Last modification (UTC)
    alternate_names: Tuple[AlternateName, ...] = ()
    reason: Optional[str] = None                        # Trash reason, if any
    external_ids: ExternalIds = field(default_factory=ExternalIds)

    @property
    def names(self) -> List[str]:
        """Primary name followed by every alternate name"""
        return [self.primary_name] + [alt.value for alt in self.alternate_names]

    def display_name(self, preference: NamePreference = NamePreference.ROMAJI) -> str:
        return preferred_name(self.primary_name, self.alternate_names, preference)

    @property
    def modified_timestamp(self) -> float:
        if self.modified_at is None:
            return 0.0
        return self.modified_at.timestamp()


@dataclass(frozen=True)
class ScoredRecord:
    """A record ranked against one query"""
    record: Record
    score: int

    @property
    def visible(self) -> bool:
        return self.score > MIN_SCORE


@dataclass
class RenameForm:
    """Raw rename form inputs, exactly as the user entered them"""
    search: str = ""
    replacement: str = ""
    is_regex: bool = False
    match_all: bool = False
    case_sensitive: bool = False
    scope: RenameScope = RenameScope.WHOLE
    case_transform: CaseTransform = CaseTransform.NONE


@dataclass(frozen=True)
class RenameRule:
    """Compiled rename rule"""
    pattern: "re.Pattern[str]"
    replacement: str
    scope: RenameScope = RenameScope.WHOLE
    match_all: bool = False
    case_transform: CaseTransform = CaseTransform.NONE
    is_regex: bool = False

    @property
    def is_empty(self) -> bool:
        """No substring replacement is performed"""
        return self.pattern.pattern == ""


@dataclass(frozen=True)
class RenameEntry:
    """Single original -> renamed mapping"""
    original: str
    renamed: str

    @property
    def changed(self) -> bool:
        return self.original != self.renamed

    def to_json(self) -> Dict[str, str]:
        return {"from": self.original, "to": self.renamed}


@dataclass
class RenamePlan:
    """Batch rename preview"""
    entries: List[RenameEntry] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def changes(self) -> List[RenameEntry]:
        """Submission view: only entries whose name actually changes"""
        return [e for e in self.entries if e.changed]

    @property
    def total_count(self) -> int:
        return len(self.changes)

    def to_payload(self) -> List[Dict[str, str]]:
        """Rename request body, `[{from, to}, ...]`"""
        return [e.to_json() for e in self.changes]

    def add_warning(self, msg: str) -> None:
        self.warnings.append(msg)

    def summary(self) -> str:
        """Generate summary"""
        lines = [
            f"Rename Plan Summary:",
            f"  - Selected files: {len(self.entries)}",
            f"  - Will rename: {self.total_count}",
            f"  - Unchanged: {len(self.entries) - self.total_count}",
            f"  - Warnings: {len(self.warnings)}",
        ]
        return "\n".join(lines)


@dataclass(frozen=True)
class SessionState:
    """
    Per-listing session state, passed into and returned from each engine call

    snapshot holds primary names in the order they stood before the first
    non-empty query; None while no filter is active.
    """
    sort_key: SortKey = SortKey.NAME
    direction: SortDirection = SortDirection.ASCENDING
    preference: NamePreference = NamePreference.ROMAJI
    query: str = ""
    snapshot: Optional[Tuple[str, ...]] = None

    @property
    def filtering(self) -> bool:
        return self.snapshot is not None
