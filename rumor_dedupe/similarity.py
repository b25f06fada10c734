"""Token-order-insensitive similarity scoring."""
from __future__ import annotations

from typing import Callable

from rapidfuzz import fuzz, utils

SimilarityScorer = Callable[[str, str], int]
"""Any ``(text_a, text_b) -> int`` in ``0..100``; must be symmetric."""


def token_sort_ratio(text_a: str, text_b: str) -> int:
    """Score two normalized texts after sorting their whitespace tokens.

    Non-alphanumeric characters are replaced by spaces before tokenizing, so
    ``"¡Betis ficha a Isco!"`` and ``"isco, ficha a betis"`` compare equal.
    rapidfuzz returns an Indel-based percentage as a float; it is rounded half
    up and clamped so callers always see an integer in ``0..100``.
    """
    raw = fuzz.token_sort_ratio(text_a, text_b, processor=utils.default_process)
    score = int(raw + 0.5)
    return max(0, min(100, score))
