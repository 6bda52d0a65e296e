"""Domain events for the Review aggregate."""

from protean.fields import Boolean, DateTime, Identifier, Integer, String

from vcreviews.domain import vcreviews


@vcreviews.event(part_of="Review")
class ReviewSubmitted:
    """A founder submitted a review of a firm."""

    __version__ = 1

    review_id = Identifier(required=True)
    firm_id = Identifier(required=True)
    author_id = Identifier()
    responsiveness = Integer(required=True)
    fairness = Integer(required=True)
    support = Integer(required=True)
    industry = String()
    year_of_interaction = String()
    is_anonymous = Boolean(default=True)
    submitted_at = DateTime(required=True)
