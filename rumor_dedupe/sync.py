"""Batch deduplication of freshly scraped candidates against the stored corpus."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Iterable, List, Optional

from .config import get_settings
from .dedupe import check_duplicate
from .logging_setup import get_logger
from .normalization import ContentEncodingError, to_utc
from .schemas import CandidateItem, ExistingItem, SyncResult
from .similarity import SimilarityScorer, token_sort_ratio
from .storage import CorpusStore, DuplicateKeyError

logger = get_logger(__name__)


def lookback_cutoff(now: datetime, days: int) -> datetime:
    return now - timedelta(days=days)


def sync_candidates(
    candidates: Iterable[CandidateItem],
    store: CorpusStore,
    now: Optional[datetime] = None,
    scorer: SimilarityScorer = token_sort_ratio,
) -> SyncResult:
    """Insert every non-duplicate candidate and count the outcome.

    The corpus snapshot is taken once; accepted items are appended to it so
    later candidates in the same batch are checked against them too.
    """
    settings = get_settings()
    now = to_utc(now) if now else datetime.now(timezone.utc)
    batch: List[CandidateItem] = list(candidates)
    result = SyncResult(fetched=len(batch))

    pool: List[ExistingItem] = store.snapshot(since=lookback_cutoff(now, settings.lookback_days))
    logger.info("rumors_fetched", count=len(batch), corpus=len(pool))

    for candidate in batch:
        try:
            decision = check_duplicate(candidate.title, candidate.description, pool, scorer)
            if decision.is_duplicate:
                result.duplicates += 1
                continue

            new_id = store.insert(candidate, decision.content_hash)
        except DuplicateKeyError as exc:
            logger.info("rumor_insert_conflict", title=candidate.title, error=str(exc))
            result.duplicates += 1
            continue
        except ContentEncodingError:
            raise
        except Exception as exc:
            logger.error("rumor_insert_failed", title=candidate.title, error=str(exc), exc_info=True)
            result.errors += 1
            continue

        pool.append(
            ExistingItem(
                id=new_id,
                title=candidate.title,
                description=candidate.description,
                content_hash=decision.content_hash,
                link=candidate.link,
                published_at=candidate.published_at,
            )
        )
        result.inserted += 1

    logger.info("rumor_sync_completed", **result.model_dump())
    return result
