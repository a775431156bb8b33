import pytest
from datetime import datetime, timezone
from entrykit.core import (
    AlternateName, AniListId, EntrySession, ExternalIds, Record, TmdbId,
)


def _make_record(name, size=0, modified=None, reason=None, native=None, english=None, anilist=None, tmdb=None):
    alternates = []
    if native:
        alternates.append(AlternateName("native", native))
    if english:
        alternates.append(AlternateName("english", english))
    return Record(
        primary_name=name,
        size=size,
        modified_at=modified,
        alternate_names=tuple(alternates),
        reason=reason,
        external_ids=ExternalIds(
            anilist=AniListId(anilist) if anilist is not None else None,
            tmdb=tmdb,
        ),
    )


@pytest.fixture
def make_record():
    """Factory for Record instances with keyword shortcuts."""
    return _make_record


@pytest.fixture
def records():
    """A small listing, already in ascending name order."""
    return [
        _make_record(
            "Kimi no Na wa", size=50,
            modified=datetime(2023, 1, 4, tzinfo=timezone.utc),
            native="君の名は。", english="Your Name.",
            tmdb=TmdbId("movie", 372058),
        ),
        _make_record(
            "Pokémon", size=200,
            modified=datetime(2023, 1, 2, tzinfo=timezone.utc),
            reason="duplicate",
            tmdb=TmdbId("tv", 60572),
        ),
        _make_record(
            "Shingeki no Kyojin", size=300,
            modified=datetime(2023, 1, 3, tzinfo=timezone.utc),
            native="進撃の巨人", english="Attack on Titan",
            anilist=16498,
        ),
        _make_record(
            "Sousou no Frieren", size=100,
            modified=datetime(2023, 1, 1, tzinfo=timezone.utc),
            english="Frieren: Beyond Journey's End",
            anilist=154587,
        ),
    ]


@pytest.fixture
def session(records):
    """A session loaded with the sample listing."""
    s = EntrySession()
    s.load(records)
    return s


def names(items):
    """Primary names of records or scored records, in order."""
    return [getattr(i, "record", i).primary_name for i in items]


@pytest.fixture
def names_of():
    return names
