import pytest

from entrykit.core import (
    CaseTransform, InvalidPatternError, RenameForm, RenameScope,
    compile_rule, preview, rename_filename, validate_plan,
)
from entrykit.core.models import RenameEntry, RenamePlan


def rename(name, **form):
    return rename_filename(compile_rule(RenameForm(**form)), name)


# --- Rule compilation ---

def test_unterminated_group_is_invalid():
    good = compile_rule(RenameForm(search="foo", replacement="bar"))
    with pytest.raises(InvalidPatternError) as exc_info:
        compile_rule(RenameForm(search="(abc", is_regex=True))
    assert exc_info.value.field == "search"
    assert str(exc_info.value).startswith("Invalid regex provided")
    # The earlier rule is unaffected
    assert rename_filename(good, "foo.mkv") == "bar.mkv"


def test_bad_group_reference_is_invalid():
    with pytest.raises(InvalidPatternError) as exc_info:
        compile_rule(RenameForm(search=r"(\d+)", replacement=r"\2", is_regex=True))
    assert exc_info.value.field == "replacement"


def test_literal_search_is_escaped():
    assert rename("abc.srt", search="a.c", replacement="x") == "abc.srt"
    assert rename("a.c.srt", search="a.c", replacement="x") == "x.srt"
    assert rename("[1080p] show.mkv", search="[1080p]", replacement="") == "show.mkv"


def test_literal_search_with_metacharacters_is_valid_in_any_case_mode():
    for case_sensitive in (True, False):
        rule = compile_rule(RenameForm(search="(abc", case_sensitive=case_sensitive))
        assert rename_filename(rule, "(ABC)x") == ("(ABC)x" if case_sensitive else ")x")


def test_case_insensitive_by_default():
    assert rename("FOO.mkv", search="foo", replacement="bar") == "bar.mkv"
    assert rename("FOO.mkv", search="foo", replacement="bar", case_sensitive=True) == "FOO.mkv"


def test_match_all():
    assert rename("a_b_c", search="_", replacement="-") == "a-b_c"
    assert rename("a_b_c", search="_", replacement="-", match_all=True) == "a-b-c"


def test_regex_group_reference():
    assert rename("ep 05.mkv", search=r"(\d+)", replacement=r"E\1", is_regex=True) == "ep E05.mkv"


def test_literal_replacement_is_verbatim():
    assert rename("axb", search="x", replacement=r"\1") == r"a\1b"
    assert rename("axb", search="x", replacement="$&-$1") == "a$&-$1b"


def test_empty_search_is_identity_replace():
    rule = compile_rule(RenameForm(search=""))
    assert rule.is_empty
    assert rename_filename(rule, " padded.srt ") == " padded.srt "


# --- Scopes ---

def test_scope_renames():
    assert rename("foo.mkv", search="foo", replacement="bar", scope=RenameScope.BASE) == "bar.mkv"
    assert rename("foo.mkv", search="mkv", replacement="", scope=RenameScope.EXTENSION) == "foo"
    assert rename("abc.srt", case_transform=CaseTransform.UPPER) == "ABC.SRT"


def test_case_transform_only_touches_scoped_segment():
    assert rename("abc.srt", case_transform=CaseTransform.UPPER, scope=RenameScope.BASE) == "ABC.srt"
    assert rename("abc.srt", case_transform=CaseTransform.UPPER, scope=RenameScope.EXTENSION) == "abc.SRT"
    assert rename("ABC.SRT", case_transform=CaseTransform.LOWER, scope=RenameScope.EXTENSION) == "ABC.srt"


def test_scope_without_dot_falls_back_to_whole_name():
    assert rename("foo", search="foo", replacement="bar", scope=RenameScope.BASE) == "bar"
    assert rename("foo", search="o", replacement="0", scope=RenameScope.EXTENSION, match_all=True) == "f00"


def test_base_scope_keeps_extension_verbatim():
    assert rename("mkv.mkv", search="mkv", replacement="x", match_all=True, scope=RenameScope.BASE) == "x.mkv"


def test_result_is_trimmed_after_replacement():
    assert rename("[Group] Show 01.srt", search="[Group]", replacement="") == "Show 01.srt"


# --- Preview and validation ---

def test_preview_keeps_input_order_and_unchanged_entries():
    rule = compile_rule(RenameForm(search="foo", replacement="bar"))
    plan = preview(rule, ["b_foo.srt", "a.srt", "foo.srt"])
    assert [e.original for e in plan.entries] == ["b_foo.srt", "a.srt", "foo.srt"]
    assert [e.changed for e in plan.entries] == [True, False, True]


def test_changes_never_contain_unchanged_pairs():
    rule = compile_rule(RenameForm(search="x", replacement="x"))
    plan = preview(rule, ["x.srt", "y.srt", "xx.srt"])
    assert plan.changes == []
    assert plan.to_payload() == []

    rule = compile_rule(RenameForm(search="a", replacement="b", match_all=True))
    plan = preview(rule, ["a.srt", "b.srt", "ab.srt"])
    assert all(e.original != e.renamed for e in plan.changes)
    assert plan.to_payload() == [{"from": "a.srt", "to": "b.srt"}, {"from": "ab.srt", "to": "bb.srt"}]


def test_validate_flags_duplicate_destinations():
    rule = compile_rule(RenameForm(search=r"\d+", is_regex=True, scope=RenameScope.BASE))
    plan = preview(rule, ["a1.srt", "a2.srt"])
    warnings = validate_plan(plan, ["a1.srt", "a2.srt"])
    assert any("same destination" in w for w in warnings)
    assert plan.warnings == warnings


def test_validate_flags_existing_destination():
    rule = compile_rule(RenameForm(search="1", scope=RenameScope.BASE))
    plan = preview(rule, ["a1.srt"])
    warnings = validate_plan(plan, ["a1.srt", "a.srt"])
    assert warnings == ["a1.srt: destination already exists: a.srt"]


def test_validate_allows_reusing_freed_names():
    plan = RenamePlan(entries=[RenameEntry("a", "b"), RenameEntry("b", "c")])
    assert validate_plan(plan, ["a", "b"]) == []


def test_validate_flags_invalid_names():
    rule = compile_rule(RenameForm(search="a", replacement="a/b"))
    plan = preview(rule, ["a.srt"])
    warnings = validate_plan(plan, ["a.srt"])
    assert len(warnings) == 1
    assert "invalid character" in warnings[0]


def test_plan_summary():
    plan = RenamePlan(entries=[RenameEntry("a", "b"), RenameEntry("c", "c")])
    summary = plan.summary()
    assert "Will rename: 1" in summary
    assert "Unchanged: 1" in summary
