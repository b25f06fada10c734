"""Helpers for content normalization, hashing, and timezone handling."""
from __future__ import annotations

import hashlib
from datetime import datetime, timezone
from typing import Optional

from dateutil import parser as date_parser


class ContentEncodingError(ValueError):
    """Raised when normalized text cannot be encoded as UTF-8."""


def normalize_content(title: str, description: Optional[str] = None) -> str:
    """Join title and description with a single space, lowercase, and outer-trim.

    Internal whitespace is kept verbatim, so inputs that differ only in inner
    spacing normalize (and hash) differently. ``None`` and ``""`` descriptions
    produce the same text.
    """
    joined = f"{title} {description or ''}"
    return joined.lower().strip()


def content_hash(normalized: str) -> str:
    try:
        payload = normalized.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise ContentEncodingError(f"content is not representable as UTF-8: {exc.reason}") from exc
    return hashlib.sha256(payload).hexdigest()


def generate_content_hash(title: str, description: Optional[str] = None) -> str:
    return content_hash(normalize_content(title, description))


def to_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_datetime(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        parsed = date_parser.parse(value)
    except (ValueError, TypeError, OverflowError):
        return None
    return to_utc(parsed)
