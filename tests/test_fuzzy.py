from entrykit.core import MIN_SCORE, score
from entrykit.core.config import SUBSTRING_FLOOR
from entrykit.core.fuzzy import best_score


def test_exact_whole_match_scores_zero():
    assert score("abc", "abc") == 0


def test_case_mismatch_costs_points():
    s = score("ABC", "abc")
    assert SUBSTRING_FLOOR < s < 0


def test_empty_query_matches_everything():
    assert score("anything", "") == 0
    assert score("", "") == 0
    assert score("anything", None) == 0


def test_empty_candidate_never_matches():
    assert score("", "a") == MIN_SCORE
    assert score(None, "a") == MIN_SCORE


def test_no_subsequence_is_min_score():
    assert score("abc", "abd") == MIN_SCORE
    assert score("ab", "abc") == MIN_SCORE
    assert score("cba", "abc") == MIN_SCORE


def test_substring_beats_scattered():
    contiguous = score("abc", "abc")
    scattered = score("xaxbxcx", "abc")
    assert contiguous > scattered
    assert score("xabcx", "abc") > scattered


def test_scattered_match_band():
    s = score("xaxbxcx", "abc")
    assert MIN_SCORE < s <= SUBSTRING_FLOOR - 10


def test_earlier_match_scores_higher():
    assert score("abcxx", "abc") > score("xxabc", "abc")


def test_shorter_tail_scores_higher():
    assert score("abc", "abc") > score("abcdef", "abc")


def test_diacritics_ignored_on_both_sides():
    assert score("Pokémon", "pokemon") == -5
    assert score("Pokemon", "Pokémon") == 0


def test_long_scattered_match_stays_visible():
    candidate = "a" + "-" * 3000 + "b"
    s = score(candidate, "ab")
    assert s == MIN_SCORE + 1


def test_best_score_over_names():
    assert best_score(["Shingeki no Kyojin", "Attack on Titan"], "titan") > MIN_SCORE
    assert best_score(["abc", None, ""], "zzz") == MIN_SCORE
    assert best_score([], "a") == MIN_SCORE
