"""Timestamp parsing and the epoch-millisecond time axis."""

from datetime import datetime, timezone
from typing import Any

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def parse_datetime(value: Any) -> datetime | None:
    """Parse datetime from an RFC3339 string or native datetime."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    text = str(value)
    # Go emits a trailing Z and up to nanosecond precision
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    if "." in text:
        head, _, tail = text.partition(".")
        digits = ""
        rest = ""
        for i, ch in enumerate(tail):
            if not ch.isdigit():
                rest = tail[i:]
                break
            digits += ch
        text = f"{head}.{digits[:6]}{rest}"
    return datetime.fromisoformat(text)


def to_epoch_ms(value: datetime) -> float:
    """Milliseconds since the Unix epoch; naive datetimes are taken as UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return (value - _EPOCH).total_seconds() * 1000.0


def from_epoch_ms(value: float) -> datetime:
    """Inverse of to_epoch_ms, always timezone-aware UTC."""
    return datetime.fromtimestamp(value / 1000.0, tz=timezone.utc)
