from datetime import UTC, datetime, timedelta, timezone

import pytest
from vcreviews.quota.window import (
    UNLIMITED,
    QuotaState,
    QuotaStatus,
    next_window_start,
    period_key,
    window_start,
)


class TestMonthlyWindow:
    def test_window_starts_at_first_instant_of_month(self):
        now = datetime(2025, 3, 14, 9, 30, 12, 500, tzinfo=UTC)
        assert window_start(now) == datetime(2025, 3, 1, tzinfo=UTC)

    def test_window_is_computed_in_utc(self):
        # 00:30 on April 1st in UTC+2 is still March 31st in UTC
        local = datetime(2025, 4, 1, 0, 30, tzinfo=timezone(timedelta(hours=2)))
        assert period_key(local) == "2025-03"

    def test_naive_datetimes_are_treated_as_utc(self):
        assert period_key(datetime(2025, 7, 31, 23, 59)) == "2025-07"

    @pytest.mark.parametrize(
        "now, expected",
        [
            (datetime(2025, 3, 14, tzinfo=UTC), datetime(2025, 4, 1, tzinfo=UTC)),
            (datetime(2025, 12, 31, 23, 59, tzinfo=UTC), datetime(2026, 1, 1, tzinfo=UTC)),
        ],
    )
    def test_next_window_start(self, now, expected):
        assert next_window_start(now) == expected

    def test_month_boundary_changes_period(self):
        last_instant = datetime(2025, 3, 31, 23, 59, 59, 999999, tzinfo=UTC)
        assert period_key(last_instant) == "2025-03"
        assert period_key(last_instant + timedelta(microseconds=1)) == "2025-04"


class TestQuotaStatus:
    def test_free_member_under_limit(self):
        status = QuotaStatus(period="2025-03", views_this_month=2, limit=6, is_premium=False)

        assert status.remaining_views == 4
        assert status.has_reached_limit is False
        assert status.state == QuotaState.UNDER_LIMIT

    def test_free_member_at_limit(self):
        status = QuotaStatus(period="2025-03", views_this_month=6, limit=6, is_premium=False)

        assert status.remaining_views == 0
        assert status.has_reached_limit is True
        assert status.state == QuotaState.AT_LIMIT

    def test_premium_member_is_never_at_limit(self):
        status = QuotaStatus(period="2025-03", views_this_month=250, limit=6, is_premium=True)

        assert status.remaining_views == UNLIMITED
        assert status.has_reached_limit is False
        assert status.state == QuotaState.UNDER_LIMIT
