"""Domain events for the quota ledger."""

from protean.fields import DateTime, Identifier, Integer, String

from vcreviews.domain import vcreviews


@vcreviews.event(part_of="ReviewView")
class ReviewViewRecorded:
    """A member was admitted to a full review; one quota unit was consumed."""

    __version__ = 1

    view_id = Identifier(required=True)
    member_id = Identifier(required=True)
    review_id = Identifier(required=True)
    period = String(required=True)
    viewed_at = DateTime(required=True)


@vcreviews.event(part_of="MonthlyViewUsage")
class MonthlyViewLimitReached:
    """A free member used the last view of the month."""

    __version__ = 1

    member_id = Identifier(required=True)
    period = String(required=True)
    views_used = Integer(required=True)
    reached_at = DateTime(required=True)
