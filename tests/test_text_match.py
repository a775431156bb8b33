import pytest

from entrykit.core import is_valid_filename, normalize, split_extension
from entrykit.core.identifiers import extract, parse_anilist_id, parse_tmdb_id
from entrykit.core.models import AniListId, TmdbId


def test_normalize_strips_diacritics():
    assert normalize("Pokémon") == "Pokemon"
    assert normalize("Ünïcödé") == "Unicode"


def test_normalize_compatibility_forms():
    assert normalize("ﬁle") == "file"
    assert normalize("ＡＢＣ") == "ABC"


def test_normalize_empty_values_pass_through():
    assert normalize("") == ""
    assert normalize(None) is None


def test_split_extension_uses_last_dot():
    assert split_extension("show.s01e01.mkv") == ("show.s01e01", "mkv")
    assert split_extension("README") == ("README", None)
    assert split_extension("trailing.") == ("trailing", "")


@pytest.mark.parametrize("name", ["", ".", "..", "a/b", "a:b", "name ", "name.", "x" * 256])
def test_invalid_filenames(name):
    valid, error = is_valid_filename(name)
    assert not valid
    assert error


def test_valid_filename():
    assert is_valid_filename("[Group] Show - 01.ja.srt") == (True, None)


def test_parse_anilist_id():
    assert parse_anilist_id("16498") == 16498
    assert parse_anilist_id("  42 ") == 42
    assert parse_anilist_id("https://anilist.co/anime/16498/Shingeki-no-Kyojin/") == 16498
    assert parse_anilist_id("anilist.co/anime/5") == 5
    assert parse_anilist_id("12a") is None
    assert parse_anilist_id("frieren") is None
    assert parse_anilist_id("") is None
    assert parse_anilist_id(None) is None


def test_parse_tmdb_id():
    assert parse_tmdb_id("https://www.themoviedb.org/tv/60572-pokemon") == TmdbId("tv", 60572)
    assert parse_tmdb_id("https://themoviedb.org/movie/372058/cast") == TmdbId("movie", 372058)
    assert parse_tmdb_id("movie:372058") == TmdbId("movie", 372058)
    assert parse_tmdb_id("http://www.themoviedb.org/tv/1") is None
    assert parse_tmdb_id("tv:") is None
    assert parse_tmdb_id("") is None


def test_extract_prefers_anilist():
    assert extract("16498") == AniListId(16498)
    assert extract("https://anilist.co/anime/1") == AniListId(1)
    assert extract("tv:1") == TmdbId("tv", 1)
    assert extract("attack on titan") is None


def test_tmdb_id_string_forms():
    tmdb = TmdbId("movie", 372058)
    assert str(tmdb) == "movie:372058"
    assert tmdb.is_movie
    assert tmdb.url() == "https://www.themoviedb.org/movie/372058"
    assert not TmdbId("tv", 1).is_movie
