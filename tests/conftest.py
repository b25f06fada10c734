from __future__ import annotations

from typing import Iterable, List, Optional, Tuple

import pytest

from rumor_dedupe.config import get_settings
from rumor_dedupe.normalization import generate_content_hash
from rumor_dedupe.schemas import ExistingItem
from rumor_dedupe.storage import get_store


class RecordingScorer:
    """Scorer stand-in returning queued scores and remembering its calls."""

    def __init__(self, scores: Iterable[int] = (), default: int = 0) -> None:
        self.scores: List[int] = list(scores)
        self.default = default
        self.calls: List[Tuple[str, str]] = []

    def __call__(self, text_a: str, text_b: str) -> int:
        self.calls.append((text_a, text_b))
        if self.scores:
            return self.scores.pop(0)
        return self.default


def make_existing(item_id: int, title: str, description: Optional[str] = None, content_hash: Optional[str] = None) -> ExistingItem:
    return ExistingItem(
        id=item_id,
        title=title,
        description=description,
        content_hash=content_hash or generate_content_hash(title, description),
    )


@pytest.fixture(autouse=True)
def reset_caches(monkeypatch, tmp_path):
    monkeypatch.setenv("DATA_DIR", str(tmp_path))
    get_settings.cache_clear()  # type: ignore[attr-defined]
    get_store.cache_clear()  # type: ignore[attr-defined]
    yield
    get_settings.cache_clear()  # type: ignore[attr-defined]
    get_store.cache_clear()  # type: ignore[attr-defined]
