"""Tests for launch feed grouping and archive windows."""

from dataclasses import dataclass
from datetime import UTC, date, datetime, timedelta

import pytest

from src.muslimhunt.core.feed import (
    ArchiveMode,
    FeedBucket,
    archive_window,
    archive_years,
    bucket_boundaries,
    bucket_for,
    group_by_bucket,
    in_window,
)

NOW = datetime(2024, 3, 15, 14, 30, tzinfo=UTC)


@dataclass
class Launch:
    name: str
    created_at: datetime
    upvotes_count: int = 0


class TestBuckets:
    """Bucket boundaries are measured from the start of the current UTC day."""

    def test_boundaries_start_at_midnight(self):
        boundaries = bucket_boundaries(NOW)

        assert boundaries.today == datetime(2024, 3, 15, tzinfo=UTC)
        assert boundaries.yesterday == datetime(2024, 3, 14, tzinfo=UTC)
        assert boundaries.last_week == datetime(2024, 3, 8, tzinfo=UTC)
        assert boundaries.last_month == datetime(2024, 2, 14, tzinfo=UTC)

    @pytest.mark.parametrize(
        "created_at, expected",
        [
            (datetime(2024, 3, 15, 0, 0, tzinfo=UTC), FeedBucket.TODAY),
            (datetime(2024, 3, 14, 23, 59, tzinfo=UTC), FeedBucket.YESTERDAY),
            (datetime(2024, 3, 10, tzinfo=UTC), FeedBucket.LAST_WEEK),
            (datetime(2024, 2, 20, tzinfo=UTC), FeedBucket.LAST_MONTH),
            (datetime(2024, 1, 1, tzinfo=UTC), None),
        ],
    )
    def test_bucket_for(self, created_at, expected):
        assert bucket_for(created_at, bucket_boundaries(NOW)) == expected

    def test_naive_datetimes_are_treated_as_utc(self):
        naive = datetime(2024, 3, 15, 1, 0)
        assert bucket_for(naive, bucket_boundaries(NOW)) == FeedBucket.TODAY


class TestGroupByBucket:
    def test_sorted_by_upvotes_within_bucket(self):
        products = [
            Launch("low", NOW - timedelta(hours=1), upvotes_count=3),
            Launch("high", NOW - timedelta(hours=2), upvotes_count=40),
            Launch("old", NOW - timedelta(days=90), upvotes_count=999),
            Launch("yesterday", NOW - timedelta(days=1), upvotes_count=1),
        ]

        groups = group_by_bucket(products, now=NOW)

        assert [p.name for p in groups[FeedBucket.TODAY]] == ["high", "low"]
        assert [p.name for p in groups[FeedBucket.YESTERDAY]] == ["yesterday"]
        assert groups[FeedBucket.LAST_WEEK] == []
        assert all(p.name != "old" for items in groups.values() for p in items)

    def test_every_bucket_present_when_empty(self):
        groups = group_by_bucket([], now=NOW)
        assert set(groups) == set(FeedBucket)

    def test_tie_broken_by_newest_first(self):
        products = [
            Launch("earlier", NOW - timedelta(hours=3), upvotes_count=5),
            Launch("later", NOW - timedelta(hours=1), upvotes_count=5),
        ]
        groups = group_by_bucket(products, now=NOW)
        assert [p.name for p in groups[FeedBucket.TODAY]] == ["later", "earlier"]


class TestArchiveWindow:
    def test_daily(self):
        start, end = archive_window(date(2024, 3, 15), ArchiveMode.DAILY)
        assert start == datetime(2024, 3, 15, tzinfo=UTC)
        assert end.date() == date(2024, 3, 15)
        assert end.hour == 23 and end.minute == 59

    def test_weekly_spans_seven_days_forward(self):
        start, end = archive_window(date(2024, 3, 15), ArchiveMode.WEEKLY)
        assert start.date() == date(2024, 3, 15)
        assert end.date() == date(2024, 3, 22)

    def test_monthly_handles_leap_february(self):
        start, end = archive_window(date(2024, 2, 10), "monthly")
        assert start.date() == date(2024, 2, 1)
        assert end.date() == date(2024, 2, 29)

    def test_yearly(self):
        start, end = archive_window(date(2023, 7, 4), ArchiveMode.YEARLY)
        assert start.date() == date(2023, 1, 1)
        assert end.date() == date(2023, 12, 31)

    def test_unknown_mode_rejected(self):
        with pytest.raises(ValueError):
            archive_window(date(2024, 1, 1), "hourly")

    def test_in_window_filters_and_sorts(self):
        start, end = archive_window(date(2024, 3, 15), ArchiveMode.DAILY)
        products = [
            Launch("a", datetime(2024, 3, 15, 8, tzinfo=UTC), upvotes_count=1),
            Launch("b", datetime(2024, 3, 15, 20, tzinfo=UTC), upvotes_count=9),
            Launch("c", datetime(2024, 3, 16, 0, 1, tzinfo=UTC), upvotes_count=50),
        ]
        assert [p.name for p in in_window(products, start, end)] == ["b", "a"]


def test_archive_years_counts_down_to_2020():
    assert archive_years(NOW) == [2024, 2023, 2022, 2021, 2020]
