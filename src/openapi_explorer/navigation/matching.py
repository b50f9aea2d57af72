"""Fuzzy subsequence matching used to rank names against a query.

A candidate matches when every character of the query appears in it, in
order, ignoring case. Matches are scored so that tighter and better-aligned
hits sort first:

* every matched character earns a base score;
* a character directly following the previous match earns a run bonus;
* a character at a word boundary (start of the name, after ``_ - / . {``
  or space, or a lower-to-upper camelCase step) earns a boundary bonus;
* every skipped character between matches, and before the first one,
  costs a point.

Every occurrence of the query's first character is tried as a starting point
and the best score wins.
"""

from __future__ import annotations

from typing import Iterable, Optional

_MATCH_SCORE = 16
_RUN_BONUS = 8
_BOUNDARY_BONUS = 10
_GAP_PENALTY = 1

_SEPARATORS = frozenset("_-/.{ ")


def fuzzy_score(candidate: str, query: str) -> Optional[int]:
    """Score *candidate* against *query*, or ``None`` when it does not match.

    An empty query matches everything with a score of ``0``.

    Example::

        >>> fuzzy_score("user_id", "uid") is not None
        True
        >>> fuzzy_score("user_id", "xyz") is None
        True
    """
    if not query:
        return 0

    haystack = candidate.lower()
    needle = query.lower()

    best: Optional[int] = None
    start = haystack.find(needle[0])
    while start != -1:
        score = _score_from(candidate, haystack, needle, start)
        if score is None:
            # Later starts leave even less room for the rest of the query.
            break
        if best is None or score > best:
            best = score
        start = haystack.find(needle[0], start + 1)
    return best


def _score_from(candidate: str, haystack: str, needle: str, start: int) -> Optional[int]:
    score = -start * _GAP_PENALTY
    previous = -1
    for char in needle:
        position = start if previous == -1 else haystack.find(char, previous + 1)
        if position == -1:
            return None

        score += _MATCH_SCORE
        if previous != -1:
            gap = position - previous - 1
            if gap == 0:
                score += _RUN_BONUS
            else:
                score -= gap * _GAP_PENALTY
        if _is_boundary(candidate, position):
            score += _BOUNDARY_BONUS
        previous = position
    return score


def _is_boundary(candidate: str, position: int) -> bool:
    if position == 0:
        return True
    before = candidate[position - 1]
    if before in _SEPARATORS:
        return True
    return before.islower() and candidate[position].isupper()


def rank(candidates: Iterable[str], query: str) -> list[str]:
    """Filter and order *candidates* for *query*.

    With an empty query every candidate is returned in ascending order.
    Otherwise non-matching names are dropped and the rest are sorted by
    score, highest first; equal scores keep ascending name order.
    """
    names = sorted(candidates)
    if not query:
        return names

    scored: list[tuple[int, str]] = []
    for name in names:
        score = fuzzy_score(name, query)
        if score is not None:
            scored.append((score, name))

    scored.sort(key=lambda pair: -pair[0])
    return [name for _, name in scored]
