"""
forge/suggestions.py -- "Did you mean ...?" matching for section names.
"""

from __future__ import annotations

from typing import Iterable

MAX_SUGGESTION_DISTANCE = 3


def levenshtein_distance(a: str, b: str) -> int:
    """Return the edit distance between *a* and *b*.

    Insertions, deletions and substitutions each cost 1.  Only two rows of
    the dynamic-programming matrix are kept.
    """
    if len(a) < len(b):
        a, b = b, a
    previous = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        current = [i]
        for j, cb in enumerate(b, start=1):
            cost = 0 if ca == cb else 1
            current.append(min(
                previous[j] + 1,
                current[j - 1] + 1,
                previous[j - 1] + cost,
            ))
        previous = current
    return previous[-1]


def find_suggestion(
    text: str,
    candidates: Iterable[str],
    max_distance: int = MAX_SUGGESTION_DISTANCE,
) -> str | None:
    """Return the candidate closest to *text*, or None if none is close enough.

    Only candidates within *max_distance* edits qualify.  On ties the
    candidate that appears first in *candidates* wins.
    """
    best: str | None = None
    best_distance = max_distance + 1
    for candidate in candidates:
        distance = levenshtein_distance(text, candidate)
        if distance < best_distance:
            best_distance = distance
            best = candidate
    return best
