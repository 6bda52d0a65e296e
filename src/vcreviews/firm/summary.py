"""Pure rating arithmetic shared by the Aggregate Engine and its callers."""

from dataclasses import dataclass

from vcreviews.shared.numbers import round_half_up

RATING_DIMENSIONS = ("responsiveness", "fairness", "support")


@dataclass(frozen=True)
class RatingSummary:
    avg_responsiveness: float
    avg_fairness: float
    avg_support: float
    total_reviews: int

    @classmethod
    def empty(cls) -> "RatingSummary":
        return cls(avg_responsiveness=0.0, avg_fairness=0.0, avg_support=0.0, total_reviews=0)


def summarize(scores) -> RatingSummary:
    """Summarize an iterable of ``(responsiveness, fairness, support)`` triples.

    Each dimension is the arithmetic mean over every triple, rounded to one
    decimal half away from zero. No triples means an all-zero summary.
    """
    totals = [0, 0, 0]
    count = 0
    for triple in scores:
        for index, score in enumerate(triple):
            totals[index] += score
        count += 1

    if count == 0:
        return RatingSummary.empty()

    return RatingSummary(
        avg_responsiveness=round_half_up(totals[0] / count),
        avg_fairness=round_half_up(totals[1] / count),
        avg_support=round_half_up(totals[2] / count),
        total_reviews=count,
    )


def overall_rating(avg_responsiveness: float, avg_fairness: float, avg_support: float) -> float:
    return round_half_up((avg_responsiveness + avg_fairness + avg_support) / 3)
