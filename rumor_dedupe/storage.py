"""Corpus storage boundary: stored items in, accepted items out."""
from __future__ import annotations

from datetime import datetime
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional

import ujson

from .config import get_settings
from .logging_setup import get_logger
from .normalization import to_utc
from .schemas import CandidateItem, ExistingItem

logger = get_logger(__name__)

CORPUS_FILENAME = "rumors.json"


class DuplicateKeyError(Exception):
    """Raised when an insert violates a uniqueness constraint (e.g. link)."""


def _prepare_payload(data: Any) -> Any:
    if isinstance(data, datetime):
        return data.isoformat()
    if isinstance(data, dict):
        return {key: _prepare_payload(value) for key, value in data.items()}
    if isinstance(data, list):
        return [_prepare_payload(item) for item in data]
    return data


class CorpusStore:
    def snapshot(self, since: Optional[datetime] = None) -> List[ExistingItem]:  # pragma: no cover - interface
        raise NotImplementedError

    def insert(self, candidate: CandidateItem, content_hash: str) -> int:  # pragma: no cover - interface
        raise NotImplementedError


class LocalCorpusStore(CorpusStore):
    def __init__(self, path: Path) -> None:
        self.path = path
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def _read_rows(self) -> List[Dict[str, Any]]:
        if not self.path.exists():
            return []
        content = self.path.read_text(encoding="utf-8")
        return ujson.loads(content) if content.strip() else []

    def _write_rows(self, rows: List[Dict[str, Any]]) -> None:
        payload = _prepare_payload(rows)
        self.path.write_text(ujson.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")

    def snapshot(self, since: Optional[datetime] = None) -> List[ExistingItem]:
        items = [ExistingItem.model_validate(row) for row in self._read_rows()]
        if since is not None:
            since = to_utc(since)
            items = [item for item in items if item.published_at is None or item.published_at >= since]
        items.sort(key=lambda item: item.id)
        logger.debug("corpus_snapshot", path=str(self.path), items=len(items))
        return items

    def insert(self, candidate: CandidateItem, content_hash: str) -> int:
        rows = self._read_rows()
        if candidate.link and any(row.get("link") == candidate.link for row in rows):
            raise DuplicateKeyError(f"link already stored: {candidate.link}")
        new_id = max((int(row["id"]) for row in rows), default=0) + 1
        item = ExistingItem(
            id=new_id,
            title=candidate.title,
            description=candidate.description,
            content_hash=content_hash,
            link=candidate.link,
            published_at=candidate.published_at,
        )
        rows.append({**item.model_dump(), "source": candidate.source})
        self._write_rows(rows)
        logger.debug("corpus_insert", path=str(self.path), id=new_id)
        return new_id


@lru_cache(maxsize=1)
def get_store() -> CorpusStore:
    settings = get_settings()
    return LocalCorpusStore(Path(settings.data_dir) / CORPUS_FILENAME)
