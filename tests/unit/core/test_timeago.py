from datetime import UTC, datetime, timedelta

import pytest

from src.muslimhunt.core.timeago import as_utc, format_story_date, format_time_ago

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=UTC)


@pytest.mark.parametrize(
    "delta, label",
    [
        (timedelta(seconds=30), "Just now"),
        (timedelta(minutes=17), "17m ago"),
        (timedelta(hours=5), "5h ago"),
        (timedelta(days=3), "3d ago"),
        (timedelta(days=65), "2mo ago"),
        (timedelta(days=800), "2y ago"),
    ],
)
def test_format_time_ago(delta, label):
    assert format_time_ago(NOW - delta, now=NOW) == label


@pytest.mark.parametrize(
    "delta, label",
    [
        (timedelta(hours=2), "Today"),
        (timedelta(days=1), "Yesterday"),
        (timedelta(days=4), "4 days ago"),
        (timedelta(days=15), "2 weeks ago"),
        (timedelta(days=95), "3 months ago"),
        (timedelta(days=400), "1 years ago"),
    ],
)
def test_format_story_date(delta, label):
    assert format_story_date(NOW - delta, now=NOW) == label


def test_as_utc_converts_aware_values():
    value = datetime(2024, 1, 1, 12, tzinfo=UTC) + timedelta(hours=0)
    assert as_utc(value.replace(tzinfo=None)).tzinfo == UTC
    assert as_utc(value) == value
