"""ISO-8601 parsing and formatting for date-like fields."""

from __future__ import annotations

from datetime import UTC, date, datetime


def parse_timestamp(
    value: str,
    *,
    reference: date | None = None,
    assume_utc: bool = False,
) -> date:
    """Parse ``value`` into the same kind of object as ``reference``.

    A ``date`` reference (that is not a ``datetime``) yields a ``date``; anything
    else yields a ``datetime``. Naive results become UTC when the reference is
    timezone-aware or ``assume_utc`` is set. Raises ``ValueError`` when the text
    is not an ISO-8601 timestamp.
    """

    if not isinstance(value, str):
        raise ValueError(f"expected ISO-8601 string, got {type(value).__name__}")
    text = value.strip()
    if not text:
        raise ValueError("empty timestamp")
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"

    if isinstance(reference, date) and not isinstance(reference, datetime):
        try:
            return date.fromisoformat(text)
        except ValueError:
            return datetime.fromisoformat(text).date()

    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None and (assume_utc or _is_aware(reference)):
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def format_timestamp(value: date) -> str:
    """Canonical text form: aware datetimes in UTC with a ``Z`` suffix."""
    if isinstance(value, datetime):
        if value.tzinfo is None or value.utcoffset() is None:
            return value.isoformat(timespec="microseconds")
        normalized = value.astimezone(UTC)
        return normalized.isoformat(timespec="microseconds").replace("+00:00", "Z")
    return value.isoformat()


def is_date_type(target: object) -> bool:
    return isinstance(target, type) and issubclass(target, date)


def _is_aware(reference: date | None) -> bool:
    return (
        isinstance(reference, datetime)
        and reference.tzinfo is not None
        and reference.utcoffset() is not None
    )


__all__ = ["format_timestamp", "is_date_type", "parse_timestamp"]
