"""Firm aggregate: a venture capital firm that founders review.

A firm is listed lazily, the first time a submission names it, and is
addressed everywhere by its canonical slug. The rating fields are derived
state owned by the Aggregate Engine (``vcreviews.firm.rating``); nothing
else writes them.
"""

import re

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, Integer, String

from vcreviews.domain import vcreviews
from vcreviews.firm.events import FirmListed, FirmRatingRecomputed
from vcreviews.firm.summary import RatingSummary, overall_rating
from vcreviews.shared import clock
from vcreviews.shared.identifiers import firm_id_for

_DISALLOWED = re.compile(r"[^a-z0-9\s_-]")
_SEPARATORS = re.compile(r"[\s_-]+")


def slugify(name: str) -> str:
    """Canonical slug: "Acme   Ventures!!" -> "acme-ventures"."""
    slug = _DISALLOWED.sub("", (name or "").lower())
    slug = _SEPARATORS.sub("-", slug)
    return slug.strip("-")


@vcreviews.aggregate
class Firm:
    name = String(required=True, max_length=255)
    slug = String(required=True, max_length=255, unique=True)
    website = String(max_length=500)

    # Rating aggregate
    avg_responsiveness = Float(default=0.0)
    avg_fairness = Float(default=0.0)
    avg_support = Float(default=0.0)
    total_reviews = Integer(default=0)
    last_review_date = DateTime()

    listed_at = DateTime()

    @invariant.post
    def slug_must_match_name(self):
        if self.name is not None and self.slug != slugify(self.name):
            raise ValidationError({"slug": ["Slug must be derived from the firm name"]})

    @invariant.post
    def total_reviews_cannot_be_negative(self):
        if self.total_reviews is not None and self.total_reviews < 0:
            raise ValidationError({"total_reviews": ["Review count cannot be negative"]})

    @invariant.post
    def averages_must_match_review_count(self):
        averages = {
            "avg_responsiveness": self.avg_responsiveness,
            "avg_fairness": self.avg_fairness,
            "avg_support": self.avg_support,
        }
        errors = {}
        for field_name, value in averages.items():
            if value is None:
                continue
            if not self.total_reviews and value != 0:
                errors[field_name] = ["Average must be 0 while the firm has no reviews"]
            elif self.total_reviews and not 1 <= value <= 5:
                errors[field_name] = ["Average must be between 1 and 5"]
        if errors:
            raise ValidationError(errors)

    @property
    def avg_rating(self) -> float:
        if not self.total_reviews:
            return 0.0
        return overall_rating(self.avg_responsiveness, self.avg_fairness, self.avg_support)

    @classmethod
    def list_firm(cls, name, website=None):
        """List a firm that has never been reviewed before.

        The id is derived from the slug, so listing the same firm twice
        always targets the same record.
        """
        display_name = (name or "").strip()
        slug = slugify(display_name)
        if not slug:
            raise ValidationError({"firm_name": ["Firm name must contain at least one letter or digit"]})

        now = clock.utc_now()
        firm = cls(
            id=firm_id_for(slug),
            name=display_name,
            slug=slug,
            website=website or None,
            avg_responsiveness=0.0,
            avg_fairness=0.0,
            avg_support=0.0,
            total_reviews=0,
            last_review_date=now,
            listed_at=now,
        )
        firm.raise_(
            FirmListed(
                firm_id=firm.id,
                name=firm.name,
                slug=firm.slug,
                website=firm.website,
                listed_at=now,
            )
        )
        return firm

    def apply_rating_summary(self, summary: RatingSummary) -> None:
        """Overwrite the aggregate with a freshly computed summary."""
        now = clock.utc_now()
        with atomic_change(self):
            self.avg_responsiveness = summary.avg_responsiveness
            self.avg_fairness = summary.avg_fairness
            self.avg_support = summary.avg_support
            self.total_reviews = summary.total_reviews
            self.last_review_date = now

        self.raise_(
            FirmRatingRecomputed(
                firm_id=self.id,
                avg_responsiveness=summary.avg_responsiveness,
                avg_fairness=summary.avg_fairness,
                avg_support=summary.avg_support,
                total_reviews=summary.total_reviews,
                recomputed_at=now,
            )
        )
