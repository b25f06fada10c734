from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional

import pytest
from conftest import RecordingScorer, make_existing

from rumor_dedupe.normalization import ContentEncodingError, generate_content_hash
from rumor_dedupe.schemas import CandidateItem, ExistingItem
from rumor_dedupe.storage import CorpusStore, DuplicateKeyError, get_store
from rumor_dedupe.sync import lookback_cutoff, sync_candidates

NOW = datetime(2025, 3, 1, tzinfo=timezone.utc)


class FakeStore(CorpusStore):
    def __init__(self, items: Optional[List[ExistingItem]] = None, fail_on: Optional[dict] = None) -> None:
        self.items = list(items or [])
        self.fail_on = fail_on or {}
        self.inserted: List[tuple] = []
        self.since: Optional[datetime] = None

    def snapshot(self, since=None):
        self.since = since
        return list(self.items)

    def insert(self, candidate, content_hash):
        if candidate.title in self.fail_on:
            raise self.fail_on[candidate.title]
        self.inserted.append((candidate.title, content_hash))
        return 100 + len(self.inserted)


def test_lookback_cutoff():
    assert lookback_cutoff(NOW, 30) == datetime(2025, 1, 30, tzinfo=timezone.utc)


def test_sync_skips_duplicates_and_inserts_new_items():
    store = FakeStore([make_existing(1, "Betis firma a jugador", "Descripción completa")])
    candidates = [
        CandidateItem(title="Betis firma a jugador", description="Descripción completa"),
        CandidateItem(title="Nuevo fichaje en el Betis", description="Confirmado"),
    ]

    result = sync_candidates(candidates, store, now=NOW, scorer=RecordingScorer(default=10))

    assert result.model_dump() == {"fetched": 2, "duplicates": 1, "inserted": 1, "errors": 0}
    assert store.inserted == [("Nuevo fichaje en el Betis", generate_content_hash("Nuevo fichaje en el Betis", "Confirmado"))]
    assert store.since == datetime(2025, 1, 30, tzinfo=timezone.utc)


def test_sync_dedupes_within_the_batch():
    store = FakeStore()
    candidates = [
        CandidateItem(title="Rumor repetido", description="Texto"),
        CandidateItem(title="RUMOR REPETIDO", description="TEXTO"),
    ]

    result = sync_candidates(candidates, store, now=NOW, scorer=RecordingScorer(default=0))

    assert result.inserted == 1
    assert result.duplicates == 1
    assert len(store.inserted) == 1


def test_sync_counts_conflicts_and_errors():
    store = FakeStore(
        fail_on={
            "Enlace repetido": DuplicateKeyError("link"),
            "Fallo": RuntimeError("db down"),
        }
    )
    candidates = [
        CandidateItem(title="Enlace repetido"),
        CandidateItem(title="Fallo"),
        CandidateItem(title="Correcto"),
    ]

    result = sync_candidates(candidates, store, now=NOW, scorer=RecordingScorer(default=0))

    assert result.model_dump() == {"fetched": 3, "duplicates": 1, "inserted": 1, "errors": 1}


def test_sync_propagates_encoding_errors():
    with pytest.raises(ContentEncodingError):
        sync_candidates([CandidateItem(title="roto \ud800")], FakeStore(), now=NOW)


def test_sync_respects_configured_lookback(monkeypatch):
    from rumor_dedupe.config import get_settings

    monkeypatch.setenv("DEDUPE_LOOKBACK_DAYS", "7")
    get_settings.cache_clear()  # type: ignore[attr-defined]
    store = FakeStore()

    sync_candidates([], store, now=NOW)

    assert store.since == datetime(2025, 2, 22, tzinfo=timezone.utc)


def test_sync_against_local_store():
    store = get_store()
    first = sync_candidates(
        [CandidateItem(title="Betis ficha a nuevo atacante", description="Fuentes lo confirman", link="https://example.com/1")],
        store,
        now=NOW,
    )
    second = sync_candidates(
        [CandidateItem(title="betis ficha a nuevo atacante", description="fuentes lo confirman", link="https://example.com/2")],
        store,
        now=NOW,
    )

    assert first.inserted == 1
    assert second.duplicates == 1
    assert [item.id for item in store.snapshot()] == [1]
