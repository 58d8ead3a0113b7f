"""Relative "updated ... ago" labels."""

from datetime import UTC, datetime

JUST_UPDATED = "just updated"


def format_time_ago(published_at: datetime | None, now: datetime | None = None) -> str:
    """Bucket the age of published_at into a short label.

    <1 min -> "just updated", <60 min -> minutes, <24 h -> hours, else days.
    Missing or future timestamps also read "just updated".
    """
    if not isinstance(published_at, datetime):
        return JUST_UPDATED

    now = now or datetime.now(UTC)
    if published_at.tzinfo is None:
        published_at = published_at.replace(tzinfo=UTC)

    diff_mins = int((now - published_at).total_seconds() // 60)
    if diff_mins < 1:
        return JUST_UPDATED
    if diff_mins < 60:
        return _plural(diff_mins, "minute")

    diff_hours = diff_mins // 60
    if diff_hours < 24:
        return _plural(diff_hours, "hour")

    return _plural(diff_hours // 24, "day")


def _plural(count: int, unit: str) -> str:
    suffix = "" if count == 1 else "s"
    return f"{count} {unit}{suffix} ago"
