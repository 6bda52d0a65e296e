"""Firm directory reads: lookup by slug and paginated browsing."""

from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from vcreviews.firm.firm import Firm, slugify
from vcreviews.shared.identifiers import firm_id_for
from vcreviews.shared.paging import Page, check_window, fetch_all, fetch_page, slice_page

FIRM_SORTS = ("rating", "name", "reviews", "recent")

_ORDERINGS = {
    "name": "name",
    "reviews": "-total_reviews",
    "recent": "-last_review_date",
}


def get_firm_by_slug(slug: str) -> Firm:
    """Resolve a slug (or any spelling of the firm's name) to the firm."""
    canonical = slugify(slug)
    if not canonical:
        raise ObjectNotFoundError(f"Firm '{slug}' does not exist")
    try:
        return current_domain.repository_for(Firm).get(firm_id_for(canonical))
    except ObjectNotFoundError as exc:
        raise ObjectNotFoundError(f"Firm '{slug}' does not exist") from exc


def list_firms(search: str | None = None, sort: str = "rating", page: int = 1, limit: int = 12) -> Page:
    if sort not in FIRM_SORTS:
        raise ValidationError({"sort": [f"Sort must be one of: {', '.join(FIRM_SORTS)}"]})
    check_window(page, limit)

    queryset = current_domain.repository_for(Firm)._dao.query
    if search and search.strip():
        queryset = queryset.filter(name__icontains=search.strip())

    if sort in _ORDERINGS:
        return fetch_page(queryset.order_by(_ORDERINGS[sort]), page, limit)

    # The overall rating is derived, so it cannot be ordered in the store.
    ranked = sorted(
        fetch_all(queryset.order_by("name")),
        key=lambda firm: (firm.avg_rating, firm.total_reviews),
        reverse=True,
    )
    return slice_page(ranked, page, limit)
