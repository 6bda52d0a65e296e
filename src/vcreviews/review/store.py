"""Review Store reads: reviews by firm and by id."""

from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from vcreviews.review.review import Review
from vcreviews.shared.identifiers import is_well_formed_id
from vcreviews.shared.paging import fetch_all


def count_reviews_for_firm(firm_id) -> int:
    repo = current_domain.repository_for(Review)
    return repo._dao.query.filter(firm_id=str(firm_id)).all().total


def reviews_for_firm(firm_id) -> list:
    repo = current_domain.repository_for(Review)
    return fetch_all(repo._dao.query.filter(firm_id=str(firm_id)))


def get_review(review_id) -> Review:
    """Load one review; malformed ids fail validation, unknown ids raise ObjectNotFoundError."""
    if not review_id or not is_well_formed_id(review_id):
        raise ValidationError({"review_id": ["Invalid review id"]})
    return current_domain.repository_for(Review).get(str(review_id))
