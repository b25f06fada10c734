"""Duplicate detection for ingested rumor items.

An incoming item is first compared by content hash against every stored item.
Only when no hash matches is the fuzzy pass run, scoring the candidate against
each stored item and keeping the first item that reaches the best score.
"""
from __future__ import annotations

from typing import Optional, Sequence

from .logging_setup import get_logger
from .normalization import content_hash, normalize_content
from .schemas import DuplicateCheckResult, ExistingItem, FuzzyMatch
from .similarity import SimilarityScorer, token_sort_ratio

logger = get_logger(__name__)

DUPLICATE_THRESHOLD = 85
EXACT_MATCH_SCORE = 100


def find_exact_match(candidate_hash: str, existing: Sequence[ExistingItem]) -> Optional[ExistingItem]:
    for item in existing:
        if item.content_hash == candidate_hash:
            return item
    return None


def find_best_match(
    candidate_text: str,
    existing: Sequence[ExistingItem],
    scorer: SimilarityScorer = token_sort_ratio,
) -> Optional[FuzzyMatch]:
    """Return the highest scoring item, ``None`` when ``existing`` is empty.

    The best is replaced only on a strictly greater score, so the earliest
    item in scan order wins ties.
    """
    best: Optional[FuzzyMatch] = None
    for item in existing:
        score = scorer(candidate_text, normalize_content(item.title, item.description))
        if best is None or score > best.score:
            best = FuzzyMatch(item_id=item.id, score=score)
    return best


def check_duplicate(
    title: str,
    description: Optional[str],
    existing: Sequence[ExistingItem],
    scorer: SimilarityScorer = token_sort_ratio,
) -> DuplicateCheckResult:
    candidate_text = normalize_content(title, description)
    candidate_hash = content_hash(candidate_text)

    exact = find_exact_match(candidate_hash, existing)
    if exact is not None:
        logger.info("duplicate_exact_match", duplicate_of_id=exact.id, content_hash=candidate_hash)
        return DuplicateCheckResult(
            is_duplicate=True,
            duplicate_of_id=exact.id,
            similarity_score=EXACT_MATCH_SCORE,
            content_hash=candidate_hash,
        )

    best = find_best_match(candidate_text, existing, scorer)
    if best is not None and best.score >= DUPLICATE_THRESHOLD:
        logger.info("duplicate_fuzzy_match", duplicate_of_id=best.item_id, similarity_score=best.score)
        return DuplicateCheckResult(
            is_duplicate=True,
            duplicate_of_id=best.item_id,
            similarity_score=best.score,
            content_hash=candidate_hash,
        )

    logger.debug(
        "duplicate_not_found",
        compared=len(existing),
        best_score=best.score if best is not None else None,
    )
    return DuplicateCheckResult(is_duplicate=False, content_hash=candidate_hash)
