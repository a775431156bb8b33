"""
listing.py - Record ingestion

The only place untyped listing data is parsed. Everything downstream works
on Record instances.

Supported sources:
- attribute dicts as rendered in a listing (`name`, `japanese_name`,
  `english_name`, `size`, `last_modified`, `reason`, `anilist_id`,
  `tmdb_id`, and an optional JSON `extra` blob)
- a JSON file holding an array of such dicts
- a directory on disk (one record per file)
"""

from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional
import json
import logging
import os

from .config import ALLOWED_UPLOAD_EXTENSIONS
from .exceptions import ListingError
from .identifiers import parse_tmdb_id
from .models import AlternateName, AniListId, ExternalIds, Record

logger = logging.getLogger(__name__)

# attribute name -> alternate name label
ALTERNATE_NAME_KEYS = {
    "japanese_name": "native",
    "english_name": "english",
}


def _normalize_keys(attrs: Mapping[str, Any]) -> Dict[str, Any]:
    """Accept both `data-japanese-name` and `japanese_name` spellings"""
    result: Dict[str, Any] = {}
    for key, value in attrs.items():
        if key.startswith("data-"):
            key = key[5:]
        result[key.replace("-", "_")] = value
    return result


def _merge_extra(attrs: Dict[str, Any]) -> Dict[str, Any]:
    extra = attrs.pop("extra", None)
    if extra is None:
        return attrs
    if isinstance(extra, str):
        try:
            extra = json.loads(extra)
        except json.JSONDecodeError as e:
            raise ListingError(f"Invalid extra data: {e}") from e
    if not isinstance(extra, dict):
        raise ListingError("Extra data must be a JSON object")
    for key, value in _normalize_keys(extra).items():
        if value is not None:
            attrs[key] = value
    return attrs


def _from_epoch(seconds: float) -> datetime:
    try:
        return datetime.fromtimestamp(seconds, tz=timezone.utc)
    except (OverflowError, OSError, ValueError) as e:
        raise ListingError(f"Invalid timestamp: {seconds!r}") from e


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse a modification time

    Accepts epoch seconds (int or digit string), ISO-8601 strings and
    datetimes. Naive values are taken as UTC.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        return _from_epoch(value)
    elif isinstance(value, str) and value.strip().isdigit():
        return _from_epoch(int(value.strip()))
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(text)
        except ValueError as e:
            raise ListingError(f"Invalid timestamp: {value!r}") from e
    else:
        raise ListingError(f"Invalid timestamp: {value!r}")

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def _parse_int(value: Any, what: str) -> Optional[int]:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ListingError(f"Invalid {what}: {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ListingError(f"Invalid {what}: {value!r}") from e


def record_from_attrs(attrs: Mapping[str, Any]) -> Record:
    """
    Build a Record from one listing row

    Args:
        attrs: Untyped attribute mapping

    Returns:
        Record

    Raises:
        ListingError: the row is missing its name or has malformed fields
    """
    data = _merge_extra(_normalize_keys(attrs))

    name = data.get("name")
    if not isinstance(name, str) or not name:
        raise ListingError(f"Listing row has no name: {dict(attrs)!r}")

    alternates = []
    for key, label in ALTERNATE_NAME_KEYS.items():
        value = data.get(key)
        if value:
            alternates.append(AlternateName(label=label, value=str(value)))

    size = _parse_int(data.get("size"), "size") or 0
    if size < 0:
        raise ListingError(f"Invalid size for {name}: {size}")

    anilist = _parse_int(data.get("anilist_id"), "AniList id")
    tmdb = None
    raw_tmdb = data.get("tmdb_id")
    if raw_tmdb:
        tmdb = parse_tmdb_id(str(raw_tmdb))
        if tmdb is None:
            raise ListingError(f"Invalid TMDB id for {name}: {raw_tmdb!r}")

    reason = data.get("reason")
    return Record(
        primary_name=name,
        size=size,
        modified_at=parse_timestamp(data.get("last_modified")),
        alternate_names=tuple(alternates),
        reason=None if reason is None else str(reason),
        external_ids=ExternalIds(
            anilist=AniListId(anilist) if anilist is not None else None,
            tmdb=tmdb,
        ),
    )


def load_records(rows: Iterable[Mapping[str, Any]]) -> List[Record]:
    """
    Build records for a whole listing, rejecting duplicate names
    """
    records: List[Record] = []
    seen = set()
    for row in rows:
        if not isinstance(row, Mapping):
            raise ListingError(f"Listing row must be an object, got {type(row).__name__}")
        record = record_from_attrs(row)
        if record.primary_name in seen:
            raise ListingError(f"Duplicate name in listing: {record.primary_name}")
        seen.add(record.primary_name)
        records.append(record)
    logger.debug("Loaded %d records", len(records))
    return records


def load_listing(path: Path) -> List[Record]:
    """
    Load records from a JSON file holding an array of listing rows
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ListingError(f"Cannot read listing {path}: {e}") from e
    if not isinstance(data, list):
        raise ListingError(f"Listing {path} must hold a JSON array")
    return load_records(data)


def scan_directory(directory: Path, include_hidden: bool = False) -> List[Record]:
    """
    Build records from the files of a single directory (non-recursive)

    Args:
        directory: Target directory
        include_hidden: Whether to include hidden files

    Returns:
        Record list, in directory iteration order
    """
    directory = Path(directory).resolve()
    if not directory.is_dir():
        raise ListingError(f"Directory does not exist: {directory}")

    results: List[Record] = []
    for item in directory.iterdir():
        if not item.is_file():
            continue
        if not include_hidden and item.name.startswith('.'):
            continue
        try:
            stat = item.stat()
        except OSError as e:
            logger.warning("Cannot access %s: %s", item, e)
            continue
        results.append(Record(
            primary_name=item.name,
            size=stat.st_size,
            modified_at=datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc),
        ))
    return results


def load_source(source: Path) -> List[Record]:
    """Load a directory or a JSON listing file"""
    source = Path(source)
    if source.is_dir():
        return scan_directory(source)
    return load_listing(source)


def file_extension(name: str) -> str:
    """Extension without the dot (case preserved), "" when absent"""
    base, ext = os.path.splitext(name)
    if not base or not ext:
        return ""
    return ext[1:]


def filter_upload_names(names: Iterable[str]) -> List[str]:
    """Keep only files with an accepted subtitle/archive extension"""
    return [n for n in names if file_extension(n) in ALLOWED_UPLOAD_EXTENSIONS]


def format_relative(when: Optional[datetime], now: Optional[datetime] = None) -> str:
    """
    Render a timestamp relative to now, e.g. "3 hours ago" or "in 2 days"
    """
    if when is None:
        return ""
    if now is None:
        now = datetime.now(timezone.utc)
    delta = (now - when).total_seconds()
    future = delta < 0
    seconds = abs(int(delta))

    if seconds < 10:
        return "just now"

    units = [
        ("year", 365 * 24 * 3600),
        ("month", 30 * 24 * 3600),
        ("day", 24 * 3600),
        ("hour", 3600),
        ("minute", 60),
        ("second", 1),
    ]
    for unit, length in units:
        if seconds >= length:
            count = seconds // length
            label = unit if count == 1 else unit + "s"
            return f"in {count} {label}" if future else f"{count} {label} ago"
    return "just now"
