"""
identifiers.py - External identifier extraction

Recognizes queries that name an entry by AniList id or TMDB URL instead of
by title. Pure functions, no network access.
"""

from typing import Optional, Union
import re

from .models import AniListId, TmdbId

ExternalId = Union[AniListId, TmdbId]

_BARE_INTEGER = re.compile(r"^\s*(\d+)\s*$")
_ANILIST_URL = re.compile(r"^\s*(?:https?://)?(?:www\.)?anilist\.co/anime/(\d+)(?:[/?#].*)?\s*$", re.IGNORECASE)
_TMDB_URL = re.compile(r"^\s*https://(?:www\.)?themoviedb\.org/(tv|movie)/(\d+)(?:-[a-zA-Z0-9\-]+)?(?:[/?#].*)?\s*$")
_TMDB_PAIR = re.compile(r"^\s*(tv|movie):(\d+)\s*$")


def parse_anilist_id(text: Optional[str]) -> Optional[int]:
    """
    Parse an AniList id from a bare integer or an anilist.co anime URL

    Args:
        text: Raw input

    Returns:
        The numeric id, or None
    """
    if not text:
        return None
    m = _BARE_INTEGER.match(text) or _ANILIST_URL.match(text)
    if m is None:
        return None
    return int(m.group(1))


def parse_tmdb_id(text: Optional[str]) -> Optional[TmdbId]:
    """
    Parse a TMDB id from a themoviedb.org movie/tv URL or a `kind:id` pair

    Args:
        text: Raw input

    Returns:
        TmdbId, or None
    """
    if not text:
        return None
    m = _TMDB_URL.match(text) or _TMDB_PAIR.match(text)
    if m is None:
        return None
    return TmdbId(kind=m.group(1), id=int(m.group(2)))


def extract(text: Optional[str]) -> Optional[ExternalId]:
    """
    Parse a query into a structured external identifier

    AniList takes precedence over TMDB. None means the caller should fall
    back to fuzzy matching.
    """
    anilist = parse_anilist_id(text)
    if anilist is not None:
        return AniListId(anilist)
    return parse_tmdb_id(text)
