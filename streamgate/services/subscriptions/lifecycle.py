"""
Derived subscription predicates. Pure functions over stored fields, no I/O.

There is no expiry job: a record whose expires_at has passed is not usable
even though its stored status still says "active".
"""
from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Iterable

from streamgate.models.subscription import STATUS_ACTIVE, STATUS_EXPIRED, SubscriptionRecord


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime | None) -> datetime | None:
    """SQLite (and some drivers) hand back naive datetimes; they are stored as UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def is_usable(record: SubscriptionRecord | None, now: datetime | None = None) -> bool:
    if record is None or record.status != STATUS_ACTIVE:
        return False
    expires_at = as_utc(record.expires_at)
    if expires_at is None:
        return False
    return expires_at > as_utc(now or utcnow())


def effective_status(record: SubscriptionRecord, now: datetime | None = None) -> str:
    """Stored status, except a lapsed "active" record reads as "expired"."""
    if record.status == STATUS_ACTIVE and not is_usable(record, now):
        return STATUS_EXPIRED
    return record.status


def days_remaining(record: SubscriptionRecord | None, now: datetime | None = None) -> int:
    now = as_utc(now or utcnow())
    if not is_usable(record, now):
        return 0
    left = as_utc(record.expires_at) - now
    return math.ceil(left.total_seconds() / 86400)


def pick_authoritative(records: Iterable[SubscriptionRecord]) -> SubscriptionRecord | None:
    """Most recently created record wins. Older records are history, even if still active."""
    best = None
    for record in records:
        if best is None or (as_utc(record.created_at), record.id) > (as_utc(best.created_at), best.id):
            best = record
    return best
