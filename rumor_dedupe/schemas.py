"""Pydantic models for deduplication inputs, results, and sync summaries."""
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, NamedTuple, Optional

from pydantic import BaseModel, Field, field_validator

from .normalization import parse_datetime, to_utc


def _coerce_published_at(value: Any) -> Optional[datetime]:
    if isinstance(value, str):
        return parse_datetime(value)
    if isinstance(value, datetime):
        return to_utc(value)
    return value


class CandidateItem(BaseModel):
    title: str
    description: Optional[str] = None
    link: Optional[str] = None
    source: Optional[str] = None
    published_at: Optional[datetime] = None

    @field_validator("published_at", mode="before")
    @classmethod
    def _parse_published_at(cls, value: Any) -> Optional[datetime]:
        return _coerce_published_at(value)


class ExistingItem(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    content_hash: str
    link: Optional[str] = None
    published_at: Optional[datetime] = None

    @field_validator("published_at", mode="before")
    @classmethod
    def _parse_published_at(cls, value: Any) -> Optional[datetime]:
        return _coerce_published_at(value)


class DuplicateCheckResult(BaseModel):
    is_duplicate: bool = Field(serialization_alias="isDuplicate")
    duplicate_of_id: Optional[int] = Field(None, serialization_alias="duplicateOfId")
    similarity_score: Optional[int] = Field(None, ge=0, le=100, serialization_alias="similarityScore")
    content_hash: str = Field(serialization_alias="contentHash")

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class FuzzyMatch(NamedTuple):
    item_id: int
    score: int


class SyncResult(BaseModel):
    fetched: int = 0
    duplicates: int = 0
    inserted: int = 0
    errors: int = 0
