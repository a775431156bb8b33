import pytest

from entrykit.core import EmptySubmissionError, execute_rename
from entrykit.core.exec_rename import TEMP_PREFIX
from entrykit.core.models import RenameEntry, RenamePlan


def make_files(directory, *names):
    for name in names:
        (directory / name).write_text(name)


def plan_of(*pairs):
    return RenamePlan(entries=[RenameEntry(a, b) for a, b in pairs])


def test_renames_files(tmp_path):
    make_files(tmp_path, "a.srt", "keep.srt")
    result = execute_rename(tmp_path, plan_of(("a.srt", "b.srt"), ("keep.srt", "keep.srt")))

    assert result.to_response() == {"success": 1, "failed": 0}
    assert (tmp_path / "b.srt").read_text() == "a.srt"
    assert not (tmp_path / "a.srt").exists()
    assert not any(p.name.startswith(TEMP_PREFIX) for p in tmp_path.iterdir())


def test_swap_names(tmp_path):
    make_files(tmp_path, "a.srt", "b.srt")
    result = execute_rename(tmp_path, plan_of(("a.srt", "b.srt"), ("b.srt", "a.srt")))

    assert result.success_count == 2
    assert (tmp_path / "a.srt").read_text() == "b.srt"
    assert (tmp_path / "b.srt").read_text() == "a.srt"


def test_failures_are_reported_per_file(tmp_path):
    make_files(tmp_path, "a.srt", "taken.srt", "c.srt")
    result = execute_rename(tmp_path, plan_of(
        ("a.srt", "taken.srt"),
        ("missing.srt", "x.srt"),
        ("c.srt", "bad/name.srt"),
    ))

    assert result.to_response() == {"success": 0, "failed": 3}
    errors = [error for _, error in result.failed]
    assert "Destination already exists" in errors
    assert "Source file does not exist" in errors
    assert (tmp_path / "a.srt").exists()
    assert (tmp_path / "taken.srt").read_text() == "taken.srt"
    assert "Successfully renamed 0/3 files" in result.summary()


def test_dry_run_touches_nothing(tmp_path):
    make_files(tmp_path, "a.srt")
    progress = []
    result = execute_rename(
        tmp_path, plan_of(("a.srt", "b.srt")), dry_run=True,
        progress_callback=lambda current, total, msg: progress.append((current, total)),
    )

    assert result.success_count == 1
    assert (tmp_path / "a.srt").exists()
    assert not (tmp_path / "b.srt").exists()
    assert progress == [(1, 1)]


def test_progress_reports_both_phases(tmp_path):
    make_files(tmp_path, "a.srt")
    progress = []
    execute_rename(
        tmp_path, plan_of(("a.srt", "b.srt")),
        progress_callback=lambda current, total, msg: progress.append(msg),
    )
    assert progress[0].startswith("[Phase 1]")
    assert progress[1].startswith("[Phase 2]")


def test_empty_plan_is_refused(tmp_path):
    with pytest.raises(EmptySubmissionError):
        execute_rename(tmp_path, plan_of(("a.srt", "a.srt")))


def test_shared_destination_fails_every_claimant(tmp_path):
    make_files(tmp_path, "a.srt", "b.srt")
    result = execute_rename(tmp_path, plan_of(("a.srt", "x.srt"), ("b.srt", "x.srt")))

    assert result.to_response() == {"success": 0, "failed": 2}
    assert sorted(p.name for p in tmp_path.iterdir()) == ["a.srt", "b.srt"]


def test_rejected_rename_does_not_free_its_name(tmp_path):
    make_files(tmp_path, "a.srt", "b.srt")
    result = execute_rename(tmp_path, plan_of(("a.srt", "b.srt"), ("b.srt", "bad/name.srt")))

    assert result.to_response() == {"success": 0, "failed": 2}
    assert (tmp_path / "a.srt").read_text() == "a.srt"
    assert (tmp_path / "b.srt").read_text() == "b.srt"


def test_blocked_chain_fails_as_a_whole(tmp_path):
    make_files(tmp_path, "a.srt", "b.srt", "c.srt", "d.srt")
    result = execute_rename(tmp_path, plan_of(("a.srt", "b.srt"), ("b.srt", "c.srt"), ("c.srt", "d.srt")))

    assert result.to_response() == {"success": 0, "failed": 3}
    for name in ("a.srt", "b.srt", "c.srt", "d.srt"):
        assert (tmp_path / name).read_text() == name


def test_destination_appearing_before_phase_two_is_not_overwritten(tmp_path):
    make_files(tmp_path, "a.srt")

    def create_destination(current, total, msg):
        if msg.startswith("[Phase 2]"):
            (tmp_path / "b.srt").write_text("late")

    result = execute_rename(tmp_path, plan_of(("a.srt", "b.srt")), progress_callback=create_destination)

    assert result.to_response() == {"success": 0, "failed": 1}
    assert "restored" in result.failed[0][1]
    assert (tmp_path / "b.srt").read_text() == "late"
    assert (tmp_path / "a.srt").read_text() == "a.srt"
