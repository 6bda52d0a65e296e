"""Review aggregate: one founder's rating of one firm.

Reviews are immutable once submitted. There is no edit or delete path; a
firm's rating aggregate is always derived from the full set.
"""

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Identifier, Integer, String, Text, ValueObject

from vcreviews.domain import vcreviews
from vcreviews.firm.summary import RATING_DIMENSIONS
from vcreviews.review.events import ReviewSubmitted
from vcreviews.shared import clock
from vcreviews.shared.numbers import round_half_up

MIN_SCORE = 1
MAX_SCORE = 5


@vcreviews.value_object(part_of="Review")
class Ratings:
    """Scores from 1 to 5 on each dimension a founder rates."""

    responsiveness = Integer(required=True)
    fairness = Integer(required=True)
    support = Integer(required=True)

    @invariant.post
    def scores_must_be_in_range(self):
        errors = {}
        for dimension in RATING_DIMENSIONS:
            score = getattr(self, dimension)
            if score is not None and not MIN_SCORE <= score <= MAX_SCORE:
                errors[dimension] = [f"{dimension.capitalize()} rating must be between {MIN_SCORE} and {MAX_SCORE}"]
        if errors:
            raise ValidationError(errors)

    @property
    def average(self) -> float:
        return round_half_up((self.responsiveness + self.fairness + self.support) / 3)


@vcreviews.aggregate
class Review:
    firm_id = Identifier(required=True)
    firm_name = String(required=True, max_length=255)
    author_id = Identifier()

    ratings = ValueObject(Ratings, required=True)
    body = Text(required=True)

    # Founder context
    company_name = String(max_length=255)
    company_website = String(max_length=500)
    industry = String(max_length=100)
    role = String(max_length=100)
    company_location = String(max_length=255)
    funding_stage = String(max_length=50)
    investment_amount = String(max_length=50)
    year_of_interaction = String(max_length=4)
    is_anonymous = Boolean(default=True)

    created_at = DateTime()

    @invariant.post
    def body_must_not_be_blank(self):
        if self.body is not None and not self.body.strip():
            raise ValidationError({"review_text": ["Review text cannot be empty"]})

    @invariant.post
    def year_must_be_four_digits(self):
        if self.year_of_interaction and not (len(self.year_of_interaction) == 4 and self.year_of_interaction.isdigit()):
            raise ValidationError({"year_of_interaction": ["Year of interaction must be a four digit year"]})

    @property
    def average_rating(self) -> float:
        return self.ratings.average

    @classmethod
    def submit(
        cls,
        firm_id,
        firm_name,
        responsiveness,
        fairness,
        support,
        body,
        author_id=None,
        company_name=None,
        company_website=None,
        industry=None,
        role=None,
        company_location=None,
        funding_stage=None,
        investment_amount=None,
        year_of_interaction=None,
        is_anonymous=True,
    ):
        """Submit a new review of a firm."""
        now = clock.utc_now()

        review = cls(
            firm_id=firm_id,
            firm_name=firm_name,
            author_id=author_id,
            ratings=Ratings(responsiveness=responsiveness, fairness=fairness, support=support),
            body=body,
            company_name=company_name,
            company_website=company_website,
            industry=industry,
            role=role,
            company_location=company_location,
            funding_stage=funding_stage,
            investment_amount=investment_amount,
            year_of_interaction=year_of_interaction,
            is_anonymous=True if is_anonymous is None else is_anonymous,
            created_at=now,
        )

        review.raise_(
            ReviewSubmitted(
                review_id=review.id,
                firm_id=review.firm_id,
                author_id=review.author_id,
                responsiveness=responsiveness,
                fairness=fairness,
                support=support,
                industry=industry,
                year_of_interaction=year_of_interaction,
                is_anonymous=review.is_anonymous,
                submitted_at=now,
            )
        )
        return review
