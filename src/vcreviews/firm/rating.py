"""Aggregate Engine: rebuilds a firm's rating summary from its review set.

The summary is never updated incrementally. Every recompute reads all of
the firm's reviews and overwrites the stored averages, so the aggregate is
always reproducible from the reviews alone.

Reviews are append-only, which makes the review count a version number for
the aggregate: a recompute records how many reviews it summarized, and if
the count has moved by the time the write lands, another submission raced
it and the engine recomputes again. The last write therefore always covers
the complete set.
"""

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier
from protean.utils.globals import current_domain

from vcreviews.config import setting
from vcreviews.domain import vcreviews
from vcreviews.firm.firm import Firm
from vcreviews.firm.summary import summarize
from vcreviews.review.store import count_reviews_for_firm, reviews_for_firm
from vcreviews.shared.errors import WRITE_CONFLICTS, TransientFailure, is_write_conflict
from vcreviews.shared.locks import KeyedLock, held
from vcreviews.shared.paging import fetch_all

logger = structlog.get_logger(__name__)


@vcreviews.command(part_of="Firm")
class RecomputeFirmRating:
    firm_id = Identifier(required=True)


@vcreviews.command_handler(part_of=Firm)
class FirmRatingHandler:
    @handle(RecomputeFirmRating)
    def recompute_firm_rating(self, command):
        """Returns the number of reviews the new summary covers."""
        repo = current_domain.repository_for(Firm)
        firm = repo.get(command.firm_id)

        reviews = reviews_for_firm(firm.id)
        summary = summarize(
            (review.ratings.responsiveness, review.ratings.fairness, review.ratings.support) for review in reviews
        )
        firm.apply_rating_summary(summary)
        repo.add(firm)

        logger.debug(
            "firm_rating_written",
            firm_id=str(firm.id),
            total_reviews=summary.total_reviews,
            avg_rating=firm.avg_rating,
        )
        return summary.total_reviews


def recompute_firm_rating(firm_id, locks: KeyedLock | None = None) -> Firm:
    """Recompute until the stored aggregate covers every committed review.

    Recomputes of one firm within a process are serialized through ``locks``
    when the caller supplies a registry; across processes the convergence
    loop alone keeps the last write complete.

    Raises ``TransientFailure`` when the review set keeps moving (or writes
    keep conflicting) for more than ``RECOMPUTE_MAX_ATTEMPTS`` rounds.
    """
    firm_id = str(firm_id)
    max_attempts = setting("RECOMPUTE_MAX_ATTEMPTS")

    with held(locks, firm_id):
        for attempt in range(1, max_attempts + 1):
            try:
                covered = current_domain.process(RecomputeFirmRating(firm_id=firm_id), asynchronous=False)
            except (*WRITE_CONFLICTS, ValidationError) as exc:
                if not is_write_conflict(exc):
                    raise
                logger.warning("firm_rating_write_conflict", firm_id=firm_id, attempt=attempt, error=str(exc))
                continue

            committed = count_reviews_for_firm(firm_id)
            if committed == covered:
                return current_domain.repository_for(Firm).get(firm_id)

            logger.info(
                "firm_rating_stale",
                firm_id=firm_id,
                attempt=attempt,
                covered=covered,
                committed=committed,
            )

    logger.error("firm_rating_not_converged", firm_id=firm_id, attempts=max_attempts)
    raise TransientFailure(
        f"Rating for firm {firm_id} did not settle after {max_attempts} attempts",
        operation="recompute_firm_rating",
    )


def recompute_all_firm_ratings(locks: KeyedLock | None = None) -> int:
    """Reconcile every listed firm. Returns how many firms were recomputed."""
    repo = current_domain.repository_for(Firm)
    firms = fetch_all(repo._dao.query.order_by("slug"))

    for firm in firms:
        recompute_firm_rating(firm.id, locks=locks)

    logger.info("firm_ratings_reconciled", firms=len(firms))
    return len(firms)
