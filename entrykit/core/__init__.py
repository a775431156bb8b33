"""
core - Entry search-and-transform engine

Provides ranked filtering, sorting, rename rule compilation and previewing
over an in-memory listing of file/entry records.
"""

from .models import (
    AlternateName,
    AniListId,
    TmdbId,
    ExternalIds,
    Record,
    ScoredRecord,
    SortKey,
    SortDirection,
    NamePreference,
    RenameScope,
    CaseTransform,
    RenameForm,
    RenameRule,
    RenameEntry,
    RenamePlan,
    SessionState,
)

from .exceptions import (
    EntryKitError,
    InvalidPatternError,
    ListingError,
    EmptySubmissionError,
    ExternalServiceError,
)

from .config import MIN_SCORE

from .text_match import (
    normalize,
    split_extension,
    is_valid_filename,
)

from .identifiers import (
    extract,
    parse_anilist_id,
    parse_tmdb_id,
)

from .fuzzy import score

from .search_filter import (
    filter_records,
    visible_records,
)

from .sort_rules import (
    sort_records,
    toggle_header,
    use_user_collation,
)

from .rename_rule import compile_rule

from .plan_rename import (
    rename_filename,
    preview,
    validate_plan,
)

from .listing import (
    record_from_attrs,
    load_records,
    load_listing,
    load_source,
    scan_directory,
    format_relative,
    filter_upload_names,
)

from .session import (
    EngineOptions,
    EntrySession,
)

from .exec_rename import (
    execute_rename,
    RenameResult,
)

__all__ = [
    # Data models
    "AlternateName",
    "AniListId",
    "TmdbId",
    "ExternalIds",
    "Record",
    "ScoredRecord",
    "SortKey",
    "SortDirection",
    "NamePreference",
    "RenameScope",
    "CaseTransform",
    "RenameForm",
    "RenameRule",
    "RenameEntry",
    "RenamePlan",
    "SessionState",
    "RenameResult",

    # Errors
    "EntryKitError",
    "InvalidPatternError",
    "ListingError",
    "EmptySubmissionError",
    "ExternalServiceError",

    # Matching
    "MIN_SCORE",
    "normalize",
    "split_extension",
    "is_valid_filename",
    "extract",
    "parse_anilist_id",
    "parse_tmdb_id",
    "score",

    # Filtering and sorting
    "filter_records",
    "visible_records",
    "sort_records",
    "toggle_header",
    "use_user_collation",

    # Renaming
    "compile_rule",
    "rename_filename",
    "preview",
    "validate_plan",
    "execute_rename",

    # Listing
    "record_from_attrs",
    "load_records",
    "load_listing",
    "load_source",
    "scan_directory",
    "format_relative",
    "filter_upload_names",

    # Session
    "EngineOptions",
    "EntrySession",
]
