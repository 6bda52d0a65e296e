"""Application tests for the quota ledger's check-and-record command."""

from datetime import UTC, datetime

from protean import current_domain
from vcreviews.member.member import Member
from vcreviews.member.plan import UpgradePlan
from vcreviews.member.provisioning import ProvisionMember
from vcreviews.quota.ledger import MonthlyViewUsage, ReviewView
from vcreviews.quota.recording import RecordReviewView, quota_status_for, total_views, views_used
from vcreviews.quota.window import UNLIMITED, ViewAdmitted, ViewDenied


def _member(external_id="user_free"):
    return current_domain.process(ProvisionMember(external_id=external_id), asynchronous=False)


def _view(member_id, review_id):
    return current_domain.process(RecordReviewView(member_id=member_id, review_id=review_id), asynchronous=False)


def _ledger_entries(member_id):
    return current_domain.repository_for(ReviewView)._dao.query.filter(member_id=member_id).all().total


class TestFreeQuota:
    def test_six_views_admitted_then_denied(self, frozen_clock, review_id):
        member_id = _member()

        decisions = [_view(member_id, review_id) for _ in range(7)]

        assert all(isinstance(d, ViewAdmitted) for d in decisions[:6])
        assert isinstance(decisions[6], ViewDenied)
        assert decisions[5].status.remaining_views == 0
        assert decisions[6].status.has_reached_limit is True

    def test_denial_records_nothing(self, frozen_clock, review_id):
        member_id = _member()
        for _ in range(8):
            _view(member_id, review_id)

        assert _ledger_entries(member_id) == 6
        assert views_used(member_id, "2025-03") == 6

    def test_repeat_views_of_one_review_each_count(self, frozen_clock, review_id):
        member_id = _member()
        _view(member_id, review_id)
        decision = _view(member_id, review_id)

        assert decision.status.views_this_month == 2
        assert decision.status.remaining_views == 4

    def test_new_month_resets_quota(self, frozen_clock, review_id):
        member_id = _member()
        frozen_clock(datetime(2025, 3, 31, 23, 59, 59, tzinfo=UTC))
        for _ in range(6):
            _view(member_id, review_id)
        assert isinstance(_view(member_id, review_id), ViewDenied)

        frozen_clock(datetime(2025, 4, 1, 0, 0, tzinfo=UTC))
        decision = _view(member_id, review_id)

        assert isinstance(decision, ViewAdmitted)
        assert decision.status.period == "2025-04"
        assert decision.status.views_this_month == 1
        assert decision.status.total_views == 7

    def test_counter_matches_ledger(self, frozen_clock, review_id):
        member_id = _member()
        for _ in range(4):
            _view(member_id, review_id)

        usage = current_domain.repository_for(MonthlyViewUsage)._dao.query.filter(member_id=member_id).all().items
        assert len(usage) == 1
        assert usage[0].views_used == _ledger_entries(member_id) == 4


class TestPremiumQuota:
    def test_premium_is_never_denied(self, frozen_clock, review_id):
        member_id = _member("user_premium")
        current_domain.process(UpgradePlan(member_id=member_id, plan="premium"), asynchronous=False)

        decisions = [_view(member_id, review_id) for _ in range(15)]

        assert all(isinstance(d, ViewAdmitted) for d in decisions)
        assert decisions[-1].status.remaining_views == UNLIMITED
        assert total_views(member_id) == 15

    def test_upgrade_after_denial_admits(self, frozen_clock, review_id):
        member_id = _member()
        for _ in range(6):
            _view(member_id, review_id)
        assert isinstance(_view(member_id, review_id), ViewDenied)

        current_domain.process(UpgradePlan(member_id=member_id, plan="premium"), asynchronous=False)

        assert isinstance(_view(member_id, review_id), ViewAdmitted)


class TestQuotaStatus:
    def test_status_for_new_member(self, frozen_clock):
        member = current_domain.repository_for(Member).get(_member())
        status = quota_status_for(member)

        assert status.period == "2025-03"
        assert status.views_this_month == 0
        assert status.remaining_views == 6
        assert status.has_reached_limit is False
        assert status.is_premium is False
        assert status.total_views == 0
