"""
String similarity for product codes and descriptions.
Uses rapidfuzz for the edit-distance computation.
"""

import re
from typing import Any

from rapidfuzz.distance import Levenshtein


DEFAULT_SUBSTRING_SIMILARITY = 0.8


def normalize_text(value: Any) -> str:
    """Lower-case, trim and collapse internal whitespace. None becomes ''."""
    if value is None:
        return ""
    return re.sub(r"\s+", " ", str(value)).strip().lower()


def string_similarity(
    a: Any,
    b: Any,
    substring_similarity: float = DEFAULT_SUBSTRING_SIMILARITY,
) -> float:
    """
    Similarity between two short text tokens, in [0, 1].

    Rules, first applicable wins:
    - either side empty after normalization -> 0.0
    - equal -> 1.0
    - one contains the other -> substring_similarity
    - otherwise 1 - levenshtein / max(len(a), len(b)), floored at 0

    The empty check comes first: the edit distance against an empty string
    says nothing about similarity, and the ratio would divide by zero when
    both sides are empty.
    """
    s1 = normalize_text(a)
    s2 = normalize_text(b)

    if not s1 or not s2:
        return 0.0

    if s1 == s2:
        return 1.0

    if s1 in s2 or s2 in s1:
        return substring_similarity

    distance = Levenshtein.distance(s1, s2)
    return max(0.0, 1.0 - distance / max(len(s1), len(s2)))


def codes_equal(a: Any, b: Any) -> bool:
    """Exact comparison of two identifiers after normalization."""
    s1 = normalize_text(a)
    return bool(s1) and s1 == normalize_text(b)
