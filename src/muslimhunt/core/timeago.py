"""Relative time labels."""

from datetime import UTC, datetime


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes (as SQLite returns them) as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def format_time_ago(value: datetime, now: datetime | None = None) -> str:
    """Compact label such as "Just now", "17m ago", "3d ago" or "2y ago"."""
    now = as_utc(now or datetime.now(UTC))
    seconds = int((now - as_utc(value)).total_seconds())

    if seconds < 60:
        return "Just now"
    minutes = seconds // 60
    if minutes < 60:
        return f"{minutes}m ago"
    hours = minutes // 60
    if hours < 24:
        return f"{hours}h ago"
    days = hours // 24
    if days < 30:
        return f"{days}d ago"
    months = days // 30
    if months < 12:
        return f"{months}mo ago"
    return f"{months // 12}y ago"


def format_story_date(value: datetime, now: datetime | None = None) -> str:
    """Label used on story cards: "Today", "Yesterday", "3 days ago", ..."""
    now = as_utc(now or datetime.now(UTC))
    days = int((now - as_utc(value)).total_seconds() // 86400)

    if days <= 0:
        return "Today"
    if days == 1:
        return "Yesterday"
    if days < 7:
        return f"{days} days ago"
    if days < 30:
        return f"{days // 7} weeks ago"
    if days < 365:
        return f"{days // 30} months ago"
    return f"{days // 365} years ago"
