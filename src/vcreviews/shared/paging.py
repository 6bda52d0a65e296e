import math
from dataclasses import dataclass, field

from protean.exceptions import ValidationError

MAX_PAGE_SIZE = 100


@dataclass(frozen=True)
class Page:
    items: list = field(default_factory=list)
    total: int = 0
    page: int = 1
    limit: int = 10

    @property
    def pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.total else 0

    @property
    def has_next(self) -> bool:
        return self.page < self.pages


def check_window(page: int, limit: int) -> None:
    errors = {}
    if page < 1:
        errors["page"] = ["Page must be 1 or greater"]
    if not 1 <= limit <= MAX_PAGE_SIZE:
        errors["limit"] = [f"Limit must be between 1 and {MAX_PAGE_SIZE}"]
    if errors:
        raise ValidationError(errors)


def fetch_all(queryset) -> list:
    # Repository queries are paged by default; size the page to the match count.
    total = queryset.all().total
    if not total:
        return []
    return queryset.limit(total).all().items


def fetch_page(queryset, page: int, limit: int) -> Page:
    result = queryset.offset((page - 1) * limit).limit(limit).all()
    return Page(items=list(result.items), total=result.total, page=page, limit=limit)


def slice_page(items: list, page: int, limit: int) -> Page:
    start = (page - 1) * limit
    return Page(items=items[start : start + limit], total=len(items), page=page, limit=limit)
