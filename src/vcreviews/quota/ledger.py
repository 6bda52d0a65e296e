"""Quota Ledger aggregates.

``ReviewView`` is the append-only log: one entry per admitted view, never
removed. Views of the same review are not deduplicated; each consumes a
quota unit. ``MonthlyViewUsage`` is the per-member-per-month counter that
the admission check reads. Both are written in the same unit of work, so
the counter always equals the number of ledger entries for its period.
"""

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, Integer, String

from vcreviews.domain import vcreviews
from vcreviews.quota.events import MonthlyViewLimitReached, ReviewViewRecorded
from vcreviews.shared.identifiers import usage_id_for


@vcreviews.aggregate
class ReviewView:
    member_id = Identifier(required=True)
    review_id = Identifier(required=True)
    period = String(required=True, max_length=7)
    viewed_at = DateTime(required=True)

    @classmethod
    def record(cls, member_id, review_id, period, viewed_at):
        view = cls(member_id=member_id, review_id=review_id, period=period, viewed_at=viewed_at)
        view.raise_(
            ReviewViewRecorded(
                view_id=view.id,
                member_id=member_id,
                review_id=review_id,
                period=period,
                viewed_at=viewed_at,
            )
        )
        return view


@vcreviews.aggregate
class MonthlyViewUsage:
    member_id = Identifier(required=True)
    period = String(required=True, max_length=7)
    views_used = Integer(default=0)
    updated_at = DateTime()

    @invariant.post
    def views_used_cannot_be_negative(self):
        if self.views_used is not None and self.views_used < 0:
            raise ValidationError({"views_used": ["View count cannot be negative"]})

    @classmethod
    def open(cls, member_id, period):
        """Counter for a window nobody has read from yet."""
        return cls(id=usage_id_for(str(member_id), period), member_id=member_id, period=period, views_used=0)

    def has_room(self, is_premium: bool, limit: int) -> bool:
        return is_premium or self.views_used < limit

    def consume(self, is_premium: bool, limit: int, now):
        if not self.has_room(is_premium, limit):
            raise ValidationError({"quota": [f"Monthly view limit of {limit} reached for {self.period}"]})

        self.views_used += 1
        self.updated_at = now

        if not is_premium and self.views_used == limit:
            self.raise_(
                MonthlyViewLimitReached(
                    member_id=self.member_id,
                    period=self.period,
                    views_used=self.views_used,
                    reached_at=now,
                )
            )
