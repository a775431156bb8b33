"""
fuzzy.py - Fuzzy subsequence scoring

A candidate matches when the query's characters appear in it in order,
ignoring case. Scores are integers:

    0                         exact, case-sensitive whole match
    (SUBSTRING_FLOOR, 0]      query occurs as a contiguous substring
    (MIN_SCORE, SUBSTRING_FLOOR]  scattered subsequence match
    MIN_SCORE                 no match

Within a band, penalties grow with distance from the start, gaps between
matched characters, unmatched trailing text and case mismatches.
"""

from typing import List, Optional

from .config import MIN_SCORE, SUBSTRING_FLOOR
from .text_match import normalize

# Substring band penalties, each capped so their sum stays above SUBSTRING_FLOOR
START_WEIGHT = 2
START_CAP = 300
CASE_WEIGHT = 5
CASE_CAP = 200
TRAIL_CAP = 200

# Scattered band penalties
GAP_OPEN = 10
GAP_EXTEND = 3

_INF = float("inf")


def _fold(text: str) -> List[str]:
    # per character so indexes stay aligned with the original text
    return [ch.casefold() for ch in text]


def _substring_penalty(cand: str, query: str, cfold: List[str], qfold: List[str]) -> Optional[int]:
    """Lowest penalty over every contiguous occurrence, or None"""
    n, m = len(cfold), len(qfold)
    best = None
    for start in range(n - m + 1):
        if cfold[start:start + m] != qfold:
            continue
        mismatches = sum(1 for k in range(m) if cand[start + k] != query[k])
        penalty = (
            min(start * START_WEIGHT, START_CAP)
            + min(mismatches * CASE_WEIGHT, CASE_CAP)
            + min(n - m - start, TRAIL_CAP)
        )
        if best is None or penalty < best:
            best = penalty
    return best


def _scattered_penalty(cand: str, query: str, cfold: List[str], qfold: List[str]) -> Optional[float]:
    """
    Lowest-cost in-order alignment of query characters within the candidate

    dp[j] holds the cheapest cost of matching the query prefix so far with
    its last character at candidate position j.
    """
    n = len(cfold)
    prev = [_INF] * n
    for j in range(n):
        if cfold[j] == qfold[0]:
            case = CASE_WEIGHT if cand[j] != query[0] else 0
            prev[j] = min(j * START_WEIGHT, START_CAP) + case

    for k in range(1, len(qfold)):
        cur = [_INF] * n
        # min over j' <= j - 2 of prev[j'] - GAP_EXTEND * j'
        running = _INF
        for j in range(n):
            if j >= 2 and prev[j - 2] != _INF:
                running = min(running, prev[j - 2] - GAP_EXTEND * (j - 2))
            if cfold[j] != qfold[k]:
                continue
            adjacent = prev[j - 1] if j >= 1 else _INF
            gapped = running + GAP_OPEN + GAP_EXTEND * (j - 1) if running != _INF else _INF
            best = min(adjacent, gapped)
            if best == _INF:
                continue
            case = CASE_WEIGHT if cand[j] != query[k] else 0
            cur[j] = best + case
        prev = cur

    best = _INF
    for j in range(n):
        if prev[j] != _INF:
            best = min(best, prev[j] + min(n - 1 - j, TRAIL_CAP))
    if best == _INF:
        return None
    return best


def score(candidate: Optional[str], query: Optional[str]) -> int:
    """
    Score one candidate string against a query

    Args:
        candidate: Text being searched (e.g., an entry title)
        query: Raw query text

    Returns:
        Integer score; MIN_SCORE when the query is not a subsequence
    """
    query = normalize(query)
    if not query:
        return 0
    candidate = normalize(candidate)
    if not candidate:
        return MIN_SCORE

    qfold = _fold(query)
    cfold = _fold(candidate)
    if len(qfold) > len(cfold):
        return MIN_SCORE

    penalty = _substring_penalty(candidate, query, cfold, qfold)
    if penalty is not None:
        return -penalty

    scattered = _scattered_penalty(candidate, query, cfold, qfold)
    if scattered is None:
        return MIN_SCORE
    return max(SUBSTRING_FLOOR - int(scattered), MIN_SCORE + 1)


def best_score(candidates, query: str) -> int:
    """Highest score over several candidate strings"""
    best = MIN_SCORE
    for candidate in candidates:
        if candidate:
            best = max(best, score(candidate, query))
    return best
