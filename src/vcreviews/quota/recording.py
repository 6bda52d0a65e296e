"""Atomic check-and-record of a review view.

Reading the month's usage, deciding, incrementing the counter and appending
the ledger entry all happen inside one command handler, i.e. one unit of
work. Callers serialize handlers per member (see ``vcreviews.access.gate``);
across processes the counter's version check rejects the slower writer,
whose unit of work is rolled back and retried.
"""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier
from protean.utils.globals import current_domain

from vcreviews.config import setting
from vcreviews.domain import vcreviews
from vcreviews.member.member import Member
from vcreviews.quota.ledger import MonthlyViewUsage, ReviewView
from vcreviews.quota.window import QuotaStatus, ViewAdmitted, ViewDenied, period_key
from vcreviews.shared import clock
from vcreviews.shared.identifiers import usage_id_for

logger = structlog.get_logger(__name__)


def views_used(member_id, period: str) -> int:
    try:
        usage = current_domain.repository_for(MonthlyViewUsage).get(usage_id_for(str(member_id), period))
    except ObjectNotFoundError:
        return 0
    return usage.views_used


def total_views(member_id) -> int:
    repo = current_domain.repository_for(ReviewView)
    return repo._dao.query.filter(member_id=str(member_id)).all().total


def quota_status_for(member: Member) -> QuotaStatus:
    period = period_key(clock.utc_now())
    return QuotaStatus(
        period=period,
        views_this_month=views_used(member.id, period),
        limit=setting("FREE_MONTHLY_VIEW_LIMIT"),
        is_premium=member.is_premium,
        total_views=total_views(member.id),
    )


@vcreviews.command(part_of="MonthlyViewUsage")
class RecordReviewView:
    member_id = Identifier(required=True)
    review_id = Identifier(required=True)


@vcreviews.command_handler(part_of=MonthlyViewUsage)
class RecordReviewViewHandler:
    @handle(RecordReviewView)
    def record_review_view(self, command):
        """Returns ``ViewAdmitted`` or ``ViewDenied``; a denial writes nothing."""
        now = clock.utc_now()
        period = period_key(now)
        limit = setting("FREE_MONTHLY_VIEW_LIMIT")

        member = current_domain.repository_for(Member).get(command.member_id)
        usage_repo = current_domain.repository_for(MonthlyViewUsage)
        try:
            usage = usage_repo.get(usage_id_for(str(member.id), period))
        except ObjectNotFoundError:
            usage = MonthlyViewUsage.open(member.id, period)

        lifetime_views = total_views(member.id)

        if not usage.has_room(member.is_premium, limit):
            logger.info(
                "review_view_denied",
                member_id=str(member.id),
                review_id=str(command.review_id),
                period=period,
                views_used=usage.views_used,
            )
            return ViewDenied(
                review_id=str(command.review_id),
                status=QuotaStatus(
                    period=period,
                    views_this_month=usage.views_used,
                    limit=limit,
                    is_premium=member.is_premium,
                    total_views=lifetime_views,
                ),
            )

        usage.consume(member.is_premium, limit, now)
        view = ReviewView.record(member_id=member.id, review_id=command.review_id, period=period, viewed_at=now)
        usage_repo.add(usage)
        current_domain.repository_for(ReviewView).add(view)

        logger.debug(
            "review_view_recorded",
            member_id=str(member.id),
            review_id=str(command.review_id),
            period=period,
            views_used=usage.views_used,
        )
        return ViewAdmitted(
            review_id=str(command.review_id),
            view_id=str(view.id),
            status=QuotaStatus(
                period=period,
                views_this_month=usage.views_used,
                limit=limit,
                is_premium=member.is_premium,
                total_views=lifetime_views + 1,
            ),
        )
