"""Entity tags for optimistic concurrency on records."""

from __future__ import annotations

import hashlib

from ..db.models import Record
from ..errors import PreconditionFailed, PreconditionRequired


def _fingerprint(record: Record) -> str:
    parts = (
        record.id,
        record.progress,
        record.video or "",
        record.status.value,
        record.player.id,
        record.demon.id,
    )
    return hashlib.md5("|".join(str(part) for part in parts).encode("utf-8")).hexdigest()


def record_etag(record: Record) -> str:
    """Quoted hash of every mutable field; any accepted patch changes it."""
    return f'"{_fingerprint(record)}"'


def check_if_match(if_match: str | None, record: Record, *, required: bool = True) -> None:
    if if_match is None:
        if required:
            raise PreconditionRequired()
        return
    candidates = {tag.strip().removeprefix("W/").strip('"') for tag in if_match.split(",")}
    if "*" in candidates:
        return
    if _fingerprint(record) not in candidates:
        raise PreconditionFailed()
