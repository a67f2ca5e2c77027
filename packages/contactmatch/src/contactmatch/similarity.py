"""String similarity primitives for first-name matching."""

from __future__ import annotations

from rapidfuzz.distance import Levenshtein

from contactmatch.aliases import are_aliases
from contactmatch.normalize import normalize_for_comparison


def levenshtein_similarity(a: str | None, b: str | None) -> float:
    """Similarity in [0, 1] derived from unit-cost edit distance.

    1 - distance / max(len(a), len(b)) over normalized strings; an empty
    input yields 0.0.
    """
    s1 = normalize_for_comparison(a)
    s2 = normalize_for_comparison(b)
    if not s1 or not s2:
        return 0.0
    distance = Levenshtein.distance(s1, s2)
    return max(0.0, 1.0 - distance / max(len(s1), len(s2)))


def fuzzy_first_name_match(
    a: str | None,
    b: str | None,
    min_similarity: float = 0.8,
) -> bool:
    """Compare first names by exact value, alias group, then edit distance."""
    n1 = normalize_for_comparison(a)
    n2 = normalize_for_comparison(b)
    if not n1 or not n2:
        return False

    if n1 == n2:
        return True

    if are_aliases(n1, n2):
        return True

    return levenshtein_similarity(n1, n2) >= min_similarity
