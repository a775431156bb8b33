"""
payloads.py - Request bodies and response shapes for external collaborators

The engine never sends requests. It builds what the host application sends
to AniList, TMDB and the entry backend, and interprets what comes back.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence
from urllib.parse import quote
import logging

from .config import ANILIST_GRAPHQL_URL, BULK_FILENAME_HEADER
from .exceptions import EmptySubmissionError, ExternalServiceError
from .models import AlternateName, NamePreference, RenamePlan, TmdbId, preferred_name

logger = logging.getLogger(__name__)

ANILIST_MEDIA_QUERY = """
query ($id: Int) {
  Media (id: $id, type: ANIME) {
    id
    title {
      romaji
      english
      native
    }
    isAdult
    format
  }
}"""

ANILIST_RELATIONS_QUERY = """
query ($id: Int) {
  Media(id: $id) {
    relations {
      edges {
        relationType
        node {
          id
          type
          title {
            romaji
            native
            english
          }
        }
      }
    }
  }
}
"""


@dataclass
class MediaInfo:
    """Titles and flags used to fill in an entry's edit form"""
    romaji: Optional[str] = None
    english: Optional[str] = None
    native: Optional[str] = None
    adult: bool = False
    movie: bool = False


@dataclass
class RelatedEntry:
    """An existing entry related to the current one"""
    id: int
    name: str
    japanese_name: Optional[str] = None
    english_name: Optional[str] = None

    def display_name(self, preference: NamePreference = NamePreference.ROMAJI) -> str:
        alternates = []
        if self.japanese_name:
            alternates.append(AlternateName("native", self.japanese_name))
        if self.english_name:
            alternates.append(AlternateName("english", self.english_name))
        return preferred_name(self.name, alternates, preference)


@dataclass
class BulkResult:
    """Outcome of a bulk rename/move/delete, reported verbatim"""
    success: int
    failed: int
    entry_id: Optional[int] = None

    @property
    def total(self) -> int:
        return self.success + self.failed

    def describe(self, verb: str) -> str:
        noun = "file" if self.total == 1 else "files"
        return f"Successfully {verb} {self.success}/{self.total} {noun}"


def check_response(status: int, body: Any = None, service: str = "API") -> Any:
    """
    Reject non-2xx responses

    Args:
        status: HTTP status code
        body: Decoded JSON body, if any
        service: Name used in the error message

    Returns:
        The body, unchanged

    Raises:
        ExternalServiceError: carries the status and the server's `error` message when present
    """
    if 200 <= status < 300:
        return body
    message = None
    if isinstance(body, Mapping) and isinstance(body.get("error"), str):
        message = body["error"]
    logger.warning("%s returned %d: %s", service, status, message)
    raise ExternalServiceError(status, message, service=service)


def _require_mapping(body: Any, status: int, service: str) -> Mapping:
    if not isinstance(body, Mapping):
        raise ExternalServiceError(status, f"Malformed response from {service}", service=service)
    return body


# --- AniList ---

def anilist_media_request(anilist_id: int) -> Dict[str, Any]:
    """POST body for the AniList media lookup"""
    return {"query": ANILIST_MEDIA_QUERY, "variables": {"id": anilist_id}}


def anilist_relations_request(anilist_id: int) -> Dict[str, Any]:
    """POST body for the AniList relations lookup"""
    return {"query": ANILIST_RELATIONS_QUERY, "variables": {"id": anilist_id}}


def anilist_endpoint() -> str:
    return ANILIST_GRAPHQL_URL


def parse_media_info(status: int, body: Any) -> Optional[MediaInfo]:
    """
    Interpret an AniList media response

    Returns None when the response holds no media.
    """
    body = _require_mapping(check_response(status, body, "AniList"), status, "AniList")
    try:
        media = (body.get("data") or {}).get("Media")
        if not media:
            return None
        title = media.get("title") or {}
        return MediaInfo(
            romaji=title.get("romaji"),
            english=title.get("english"),
            native=title.get("native"),
            adult=bool(media.get("isAdult")),
            movie=media.get("format") == "MOVIE",
        )
    except AttributeError as e:
        raise ExternalServiceError(status, "Malformed response from AniList", service="AniList") from e


def parse_relation_ids(status: int, body: Any) -> List[int]:
    """AniList ids of every related media"""
    body = _require_mapping(check_response(status, body, "AniList"), status, "AniList")
    try:
        media = (body.get("data") or {}).get("Media") or {}
        edges = (media.get("relations") or {}).get("edges") or []
    except AttributeError as e:
        raise ExternalServiceError(status, "Malformed response from AniList", service="AniList") from e
    if not isinstance(edges, list):
        raise ExternalServiceError(status, "Malformed response from AniList", service="AniList")
    ids = []
    for edge in edges:
        node = edge.get("node") if isinstance(edge, Mapping) else None
        if isinstance(node, Mapping) and isinstance(node.get("id"), int):
            ids.append(node["id"])
    return ids


# --- TMDB ---

def tmdb_lookup_path(tmdb: TmdbId) -> str:
    """Same-origin path for the TMDB title lookup"""
    return "/entry/tmdb?id=" + quote(str(tmdb), safe="")


def parse_tmdb_info(status: int, body: Any) -> Optional[MediaInfo]:
    """Interpret the `{title, adult, movie}` TMDB lookup response"""
    body = check_response(status, body, "TMDB")
    if body is None:
        return None
    body = _require_mapping(body, status, "TMDB")
    title = body.get("title")
    if not isinstance(title, Mapping):
        title = {}
    return MediaInfo(
        romaji=title.get("romaji"),
        english=title.get("english"),
        native=title.get("native"),
        adult=bool(body.get("adult")),
        movie=bool(body.get("movie")),
    )


# --- Entry backend ---

def relations_request(anilist_ids: Sequence[int]) -> Dict[str, Any]:
    """POST /entry/relations body"""
    return {"anilist_ids": list(anilist_ids)}


def parse_relations(status: int, body: Any) -> List[RelatedEntry]:
    """Interpret the relations response, an array of entries"""
    body = check_response(status, body, "Server")
    if not isinstance(body, list):
        raise ExternalServiceError(status, "Malformed response from Server", service="Server")
    entries = []
    for item in body:
        if not isinstance(item, Mapping) or "id" not in item or "name" not in item:
            raise ExternalServiceError(status, "Malformed relation entry", service="Server")
        try:
            related_id = int(item["id"])
        except (TypeError, ValueError) as e:
            raise ExternalServiceError(status, "Malformed relation entry", service="Server") from e
        entries.append(RelatedEntry(
            id=related_id,
            name=item["name"],
            japanese_name=item.get("japanese_name"),
            english_name=item.get("english_name"),
        ))
    return entries


def rename_request(entry_id: int, plan: RenamePlan) -> Dict[str, Any]:
    """
    POST /entry/{id}/rename with only the entries that change

    Raises:
        EmptySubmissionError: nothing would be renamed
    """
    payload = plan.to_payload()
    if not payload:
        raise EmptySubmissionError("No files need renaming")
    return {"method": "POST", "path": f"/entry/{entry_id}/rename", "json": payload}


def move_request(
    entry_id: int,
    files: Sequence[str],
    destination_id: Optional[int] = None,
    anilist_id: Optional[int] = None,
    tmdb: Optional[TmdbId] = None,
    name: Optional[str] = None
) -> Dict[str, Any]:
    """
    POST /entry/{id}/move

    Exactly one destination form is sent, in priority order: an existing
    entry id, an AniList id, or a TMDB id (with optional directory name).
    """
    if not files:
        raise EmptySubmissionError("No files selected")
    payload: Dict[str, Any] = {"files": list(files)}
    if destination_id is not None:
        payload["entry_id"] = destination_id
    elif anilist_id is not None:
        payload["anilist_id"] = anilist_id
    elif tmdb is not None:
        payload["tmdb"] = str(tmdb)
        payload["anime"] = False
        if name:
            payload["name"] = name
    else:
        raise EmptySubmissionError("Either an entry id, AniList URL, or TMDB URL is required")
    return {"method": "POST", "path": f"/entry/{entry_id}/move", "json": payload}


def delete_request(entry_id: int, files: Sequence[str]) -> Dict[str, Any]:
    """DELETE /entry/{id}; no selected files deletes the entry itself"""
    if files:
        payload: Dict[str, Any] = {"files": list(files)}
    else:
        payload = {"delete_parent": True}
    return {"method": "DELETE", "path": f"/entry/{entry_id}", "json": payload}


def bulk_download_request(entry_id: int, files: Sequence[str]) -> Dict[str, Any]:
    """POST /entry/{id}/bulk"""
    if not files:
        raise EmptySubmissionError("No files selected")
    return {"method": "POST", "path": f"/entry/{entry_id}/bulk", "json": {"files": list(files)}}


def bulk_download_filename(headers: Mapping[str, str]) -> Optional[str]:
    """Archive filename carried in the bulk download response headers"""
    for key, value in headers.items():
        if key.lower() == BULK_FILENAME_HEADER:
            return value
    return None


def parse_bulk_result(status: int, body: Any) -> BulkResult:
    """Interpret a `{success, failed[, entry_id]}` response"""
    body = _require_mapping(check_response(status, body, "Server"), status, "Server")
    try:
        success = int(body["success"])
        failed = int(body["failed"])
        entry_id = body.get("entry_id")
        if entry_id is not None:
            entry_id = int(entry_id)
    except (KeyError, TypeError, ValueError) as e:
        raise ExternalServiceError(status, "Malformed response from Server", service="Server") from e
    return BulkResult(success=success, failed=failed, entry_id=entry_id)
