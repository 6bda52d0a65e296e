"""Paginated review listings for browsing. Listings never carry review bodies."""

from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from vcreviews.firm.firm import slugify
from vcreviews.review.review import Review
from vcreviews.shared.identifiers import firm_id_for
from vcreviews.shared.paging import Page, check_window, fetch_all, fetch_page, slice_page

REVIEW_SORTS = ("newest", "highest")


def list_reviews(
    firm: str | None = None,
    industry: str | None = None,
    year: str | None = None,
    sort: str = "newest",
    page: int = 1,
    limit: int = 10,
) -> Page:
    """Filter by firm (slug or name), industry and year of interaction.

    ``newest`` orders by submission time; ``highest`` by the review's
    average score, newest first among equal scores.
    """
    if sort not in REVIEW_SORTS:
        raise ValidationError({"sort": [f"Sort must be one of: {', '.join(REVIEW_SORTS)}"]})
    check_window(page, limit)

    criteria = {}
    if firm:
        criteria["firm_id"] = firm_id_for(slugify(firm))
    if industry:
        criteria["industry"] = industry
    if year:
        criteria["year_of_interaction"] = str(year)

    queryset = current_domain.repository_for(Review)._dao.query
    if criteria:
        queryset = queryset.filter(**criteria)
    queryset = queryset.order_by("-created_at")

    if sort == "newest":
        return fetch_page(queryset, page, limit)

    ranked = sorted(fetch_all(queryset), key=lambda review: review.average_rating, reverse=True)
    return slice_page(ranked, page, limit)


def reviews_by_author(author_id, page: int = 1, limit: int = 10) -> Page:
    """A member's own submissions, newest first."""
    check_window(page, limit)
    queryset = current_domain.repository_for(Review)._dao.query.filter(author_id=str(author_id))
    return fetch_page(queryset.order_by("-created_at"), page, limit)
