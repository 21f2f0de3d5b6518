"""Expiry rule for quotations.

A quotation that is still open (pending/sent) stops being actionable once its
validUntil passes. The label is derived from (status, valid_until, now) alone,
so the service and the client always agree on it.
"""

from datetime import datetime, timezone

from ..constants import OPEN_QUOTATION_STATUSES


def as_utc(dt: datetime | None) -> datetime | None:
    """Make a naive datetime UTC-aware (no-op if already aware)."""
    if dt is None:
        return None
    return dt.replace(tzinfo=timezone.utc) if dt.tzinfo is None else dt


def parse_timestamp(value) -> datetime | None:
    """Accept a datetime or an ISO-8601 string (with or without 'Z')."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return as_utc(value)
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return as_utc(datetime.fromisoformat(text))
    except ValueError:
        return None


def is_past_due(valid_until, now: datetime | None = None) -> bool:
    deadline = parse_timestamp(valid_until)
    if deadline is None:
        return False
    now = as_utc(now) or datetime.now(timezone.utc)
    return deadline < now


def effective_status(status: str | None, valid_until, now: datetime | None = None) -> str:
    """Return "expired" for open quotations past validUntil, else the stored status."""
    status = status or "pending"
    if status in OPEN_QUOTATION_STATUSES and is_past_due(valid_until, now):
        return "expired"
    return status
