"""Domain events for the Firm aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from vcreviews.domain import vcreviews


@vcreviews.event(part_of="Firm")
class FirmListed:
    """A firm was named in a review for the first time."""

    __version__ = 1

    firm_id = Identifier(required=True)
    name = String(required=True)
    slug = String(required=True)
    website = String()
    listed_at = DateTime(required=True)


@vcreviews.event(part_of="Firm")
class FirmRatingRecomputed:
    """The firm's rating aggregate was rebuilt from its full review set."""

    __version__ = 1

    firm_id = Identifier(required=True)
    avg_responsiveness = Float(required=True)
    avg_fairness = Float(required=True)
    avg_support = Float(required=True)
    total_reviews = Integer(required=True)
    recomputed_at = DateTime(required=True)
