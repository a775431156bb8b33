import json

import pytest

from entrykit.cli import main


@pytest.fixture
def listing_file(tmp_path):
    path = tmp_path / "listing.json"
    path.write_text(json.dumps([
        {"name": "Shingeki no Kyojin", "english_name": "Attack on Titan", "anilist_id": 16498, "size": 3072},
        {"name": "Sousou no Frieren", "anilist_id": 154587, "size": 1024},
        {"name": "Pokémon", "tmdb_id": "tv:60572", "size": 2048},
    ]), encoding="utf-8")
    return path


@pytest.fixture
def subs_dir(tmp_path):
    directory = tmp_path / "subs"
    directory.mkdir()
    for name in ("[Group] Show - 01.srt", "[Group] Show - 02.srt", "notes.txt"):
        (directory / name).write_text(name)
    return directory


def test_search_fuzzy(listing_file, capsys):
    assert main(["search", str(listing_file), "--query", "titan"]) == 0
    out = capsys.readouterr().out
    assert "Found 1 of 3 entries" in out
    assert "Shingeki no Kyojin" in out
    assert "Pokémon" not in out


def test_search_by_identifier(listing_file, capsys):
    assert main(["search", str(listing_file), "-q", "https://anilist.co/anime/154587"]) == 0
    out = capsys.readouterr().out
    assert "Sousou no Frieren" in out
    assert "Shingeki no Kyojin" not in out


def test_search_sorted_with_hidden(listing_file, capsys):
    assert main(["search", str(listing_file), "--sort", "size", "-r", "--prefer", "english", "--all"]) == 0
    out = capsys.readouterr().out
    assert out.index("Attack on Titan") < out.index("Pokémon") < out.index("Sousou no Frieren")


def test_search_no_match(listing_file, capsys):
    assert main(["search", str(listing_file), "-q", "zzzz"]) == 0
    assert "No matching entries found" in capsys.readouterr().out


def test_search_missing_source(tmp_path, capsys):
    assert main(["search", str(tmp_path / "missing.json")]) == 1
    assert "Error:" in capsys.readouterr().out


def test_rename_executes(subs_dir, capsys):
    code = main(["rename", str(subs_dir), "--search", "[Group]", "--scope", "base", "--yes"])
    assert code == 0
    names = sorted(p.name for p in subs_dir.iterdir())
    assert names == ["Show - 01.srt", "Show - 02.srt", "notes.txt"]
    assert "Successfully renamed 2/2 files" in capsys.readouterr().out


def test_rename_dry_run(subs_dir, capsys):
    code = main(["rename", str(subs_dir), "--search", "srt", "--replace", "ass", "--scope", "ext", "--dry-run"])
    assert code == 0
    out = capsys.readouterr().out
    assert "Will perform 2 rename operations" in out
    assert "Preview mode" in out
    assert (subs_dir / "[Group] Show - 01.srt").exists()


def test_rename_json_payload(subs_dir, capsys):
    code = main(["rename", str(subs_dir), "-q", "notes", "--case", "upper", "--json"])
    assert code == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload == [{"from": "notes.txt", "to": "NOTES.TXT"}]


def test_rename_selected_only(subs_dir, capsys):
    code = main([
        "rename", str(subs_dir), "--select", "notes.txt",
        "--search", r"(\w+)\.txt", "--replace", r"\1.md", "--regex", "--yes",
    ])
    assert code == 0
    assert (subs_dir / "notes.md").exists()
    assert (subs_dir / "[Group] Show - 01.srt").exists()


def test_rename_invalid_regex(subs_dir, capsys):
    assert main(["rename", str(subs_dir), "--search", "(", "--regex", "--yes"]) == 1
    assert "Invalid regex provided" in capsys.readouterr().out


def test_rename_nothing_to_do(subs_dir, capsys):
    assert main(["rename", str(subs_dir), "--search", "zzz", "--replace", "y", "--yes"]) == 0
    assert "No files need renaming" in capsys.readouterr().out


def test_launcher_routes_leading_cli_flag(listing_file, capsys):
    import main as launcher

    assert launcher.main(["-c", "search", str(listing_file), "-q", "frieren"]) == 0
    assert "Sousou no Frieren" in capsys.readouterr().out
    assert launcher._split_mode(["rename", "-c"]) == (False, ["rename", "-c"])
