"""Monthly quota windows and the quota status value.

A window is a calendar month in UTC: ``[first instant of the month, now)``.
Usage resets at the month boundary, not on a rolling 30-day basis.
"""

from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum

UNLIMITED = "unlimited"


class QuotaState(Enum):
    UNDER_LIMIT = "under_limit"
    AT_LIMIT = "at_limit"


def window_start(now: datetime) -> datetime:
    now = now.astimezone(UTC) if now.tzinfo else now.replace(tzinfo=UTC)
    return now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def next_window_start(now: datetime) -> datetime:
    start = window_start(now)
    if start.month == 12:
        return start.replace(year=start.year + 1, month=1)
    return start.replace(month=start.month + 1)


def period_key(now: datetime) -> str:
    """``YYYY-MM`` label of the window containing ``now``."""
    return window_start(now).strftime("%Y-%m")


@dataclass(frozen=True)
class QuotaStatus:
    period: str
    views_this_month: int
    limit: int
    is_premium: bool
    total_views: int = 0

    @property
    def remaining_views(self) -> int | str:
        if self.is_premium:
            return UNLIMITED
        return max(self.limit - self.views_this_month, 0)

    @property
    def has_reached_limit(self) -> bool:
        return not self.is_premium and self.views_this_month >= self.limit

    @property
    def state(self) -> QuotaState:
        return QuotaState.AT_LIMIT if self.has_reached_limit else QuotaState.UNDER_LIMIT


@dataclass(frozen=True)
class ViewAdmitted:
    review_id: str
    view_id: str
    status: QuotaStatus


@dataclass(frozen=True)
class ViewDenied:
    review_id: str
    status: QuotaStatus
