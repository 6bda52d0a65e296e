"""SubmitReview: record a founder's review and refresh the firm's aggregate.

Submission is two units of work. The first ensures the firm exists and
persists the review together, so a firm is never listed without the review
that named it. The second is the Aggregate Engine's recompute, which reads
the committed review set. Only when both have succeeded is the submission
reported as accepted.
"""

from dataclasses import dataclass

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Boolean, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from vcreviews.domain import vcreviews
from vcreviews.firm.firm import Firm, slugify
from vcreviews.firm.rating import recompute_firm_rating
from vcreviews.review.review import Review
from vcreviews.shared.identifiers import firm_id_for
from vcreviews.shared.locks import KeyedLock, held
from vcreviews.shared.processing import process_with_retries

logger = structlog.get_logger(__name__)

# A lost race to list a new firm is retried once; the retry finds the firm.
SUBMIT_ATTEMPTS = 2


@vcreviews.command(part_of="Review")
class SubmitReview:
    firm_name = String(required=True, max_length=255)
    firm_website = String(max_length=500)
    author_id = Identifier()
    responsiveness = Integer(required=True)
    fairness = Integer(required=True)
    support = Integer(required=True)
    review_text = Text(required=True)
    company_name = String(max_length=255)
    company_website = String(max_length=500)
    industry = String(max_length=100)
    role = String(max_length=100)
    company_location = String(max_length=255)
    funding_stage = String(max_length=50)
    investment_amount = String(max_length=50)
    year_of_interaction = String(max_length=4)
    is_anonymous = Boolean(default=True)


def resolve_firm_id(firm_name: str) -> str:
    """Map a display name to the id of the firm it canonically refers to."""
    slug = slugify(firm_name)
    if not slug:
        raise ValidationError({"firm_name": ["Firm name must contain at least one letter or digit"]})
    return firm_id_for(slug)


@vcreviews.command_handler(part_of=Review)
class SubmitReviewHandler:
    @handle(SubmitReview)
    def submit_review(self, command):
        firm_repo = current_domain.repository_for(Firm)

        try:
            firm = firm_repo.get(resolve_firm_id(command.firm_name))
        except ObjectNotFoundError:
            firm = Firm.list_firm(name=command.firm_name, website=command.firm_website)
            firm_repo.add(firm)
            logger.info("firm_listed", firm_id=str(firm.id), slug=firm.slug)

        review = Review.submit(
            firm_id=firm.id,
            firm_name=firm.name,
            responsiveness=command.responsiveness,
            fairness=command.fairness,
            support=command.support,
            body=command.review_text,
            author_id=command.author_id,
            company_name=command.company_name,
            company_website=command.company_website,
            industry=command.industry,
            role=command.role,
            company_location=command.company_location,
            funding_stage=command.funding_stage,
            investment_amount=command.investment_amount,
            year_of_interaction=command.year_of_interaction,
            is_anonymous=command.is_anonymous,
        )
        current_domain.repository_for(Review).add(review)
        return str(review.id)


@dataclass(frozen=True)
class SubmissionResult:
    review_id: str
    firm: Firm


def submit_review(command: SubmitReview, locks: KeyedLock | None = None) -> SubmissionResult:
    """Persist the review, then bring the firm's aggregate up to date.

    ``locks`` serializes find-or-create and recompute per firm inside one
    process. Another process listing the same firm first surfaces as a
    duplicate on the firm's id or slug; the submission is then retried and
    finds the firm.
    """
    firm_id = resolve_firm_id(command.firm_name)

    with held(locks, firm_id):
        review_id = process_with_retries(command, SUBMIT_ATTEMPTS)

    firm = recompute_firm_rating(firm_id, locks=locks)

    logger.info(
        "review_submitted",
        review_id=review_id,
        firm_id=firm_id,
        total_reviews=firm.total_reviews,
        avg_rating=firm.avg_rating,
    )
    return SubmissionResult(review_id=review_id, firm=firm)
