"""Launch feed grouping and launch archive windows.

Products are bucketed by launch time relative to the start of the current UTC
day. Within each bucket the most upvoted product comes first.
"""

import calendar
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import UTC, date, datetime, time, timedelta
from enum import Enum
from typing import Protocol, TypeVar

from src.muslimhunt.core.timeago import as_utc

FIRST_ARCHIVE_YEAR = 2020


class _Launched(Protocol):
    created_at: datetime
    upvotes_count: int


P = TypeVar("P", bound=_Launched)


class FeedBucket(str, Enum):
    TODAY = "today"
    YESTERDAY = "yesterday"
    LAST_WEEK = "last_week"
    LAST_MONTH = "last_month"


class ArchiveMode(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


@dataclass(frozen=True)
class BucketBoundaries:
    today: datetime
    yesterday: datetime
    last_week: datetime
    last_month: datetime


def bucket_boundaries(now: datetime) -> BucketBoundaries:
    """Lower bound of each bucket; every bucket ends where the previous one starts."""
    day0 = datetime.combine(as_utc(now).date(), time.min, tzinfo=UTC)
    return BucketBoundaries(
        today=day0,
        yesterday=day0 - timedelta(days=1),
        last_week=day0 - timedelta(days=7),
        last_month=day0 - timedelta(days=30),
    )


def bucket_for(created_at: datetime, boundaries: BucketBoundaries) -> FeedBucket | None:
    created = as_utc(created_at)
    if created >= boundaries.today:
        return FeedBucket.TODAY
    if created >= boundaries.yesterday:
        return FeedBucket.YESTERDAY
    if created >= boundaries.last_week:
        return FeedBucket.LAST_WEEK
    if created >= boundaries.last_month:
        return FeedBucket.LAST_MONTH
    return None


def _by_popularity(item: _Launched) -> tuple[int, float]:
    return (-item.upvotes_count, -as_utc(item.created_at).timestamp())


def group_by_bucket(products: Sequence[P], now: datetime | None = None) -> dict[FeedBucket, list[P]]:
    """Group products into the four feed buckets, each sorted by upvotes.

    Products older than the last-month boundary are left out.
    """
    boundaries = bucket_boundaries(now or datetime.now(UTC))
    groups: dict[FeedBucket, list[P]] = {bucket: [] for bucket in FeedBucket}
    for product in products:
        bucket = bucket_for(product.created_at, boundaries)
        if bucket is not None:
            groups[bucket].append(product)
    for items in groups.values():
        items.sort(key=_by_popularity)
    return groups


def archive_window(day: date, mode: ArchiveMode) -> tuple[datetime, datetime]:
    """Inclusive [start, end] range covered by an archive page."""
    mode = ArchiveMode(mode)
    if mode is ArchiveMode.DAILY:
        start_day, end_day = day, day
    elif mode is ArchiveMode.WEEKLY:
        start_day, end_day = day, day + timedelta(days=7)
    elif mode is ArchiveMode.MONTHLY:
        last = calendar.monthrange(day.year, day.month)[1]
        start_day, end_day = day.replace(day=1), day.replace(day=last)
    else:
        start_day, end_day = date(day.year, 1, 1), date(day.year, 12, 31)

    return (
        datetime.combine(start_day, time.min, tzinfo=UTC),
        datetime.combine(end_day, time.max, tzinfo=UTC),
    )


def in_window(products: Sequence[P], start: datetime, end: datetime) -> list[P]:
    """Products launched inside the window, most upvoted first."""
    selected = [p for p in products if start <= as_utc(p.created_at) <= end]
    return sorted(selected, key=_by_popularity)


def archive_years(now: datetime | None = None) -> list[int]:
    current = as_utc(now or datetime.now(UTC)).year
    return list(range(current, FIRST_ARCHIVE_YEAR - 1, -1))
