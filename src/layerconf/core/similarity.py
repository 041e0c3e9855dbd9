"""Typo suggestions for unknown configuration keys."""

from collections.abc import Iterable

import Levenshtein

__all__ = ["levenshtein_distance", "find_similar_key"]


def levenshtein_distance(a: str, b: str) -> int:
    return Levenshtein.distance(a, b)


def find_similar_key(unknown_key: str, known_keys: Iterable[str]) -> str | None:
    """Closest known key, compared case-insensitively.

    A candidate qualifies when its distance is at most ``max(2, len // 3)``.
    On ties the first candidate in iteration order wins, so pass a sorted
    sequence for stable suggestions.
    """
    threshold = max(2, len(unknown_key) // 3)
    lowered = unknown_key.lower()
    best_match = None
    best_score = threshold + 1
    for known in known_keys:
        distance = Levenshtein.distance(lowered, known.lower(), score_cutoff=threshold)
        if distance < best_score:
            best_score = distance
            best_match = known
    return best_match
