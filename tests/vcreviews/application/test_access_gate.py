"""Application tests for the Access Gate state machine."""

import uuid

import pytest
from protean import current_domain
from protean.exceptions import ExpectedVersionError, ObjectNotFoundError, ValidationError
from vcreviews.access.gate import AccessGate
from vcreviews.domain import vcreviews
from vcreviews.member.member import Member
from vcreviews.quota.ledger import ReviewView
from vcreviews.shared.errors import AuthenticationRequired, QuotaExceeded, TransientFailure


def _views_recorded():
    return current_domain.repository_for(ReviewView)._dao.query.all().total


class TestAnonymous:
    @pytest.mark.parametrize("identity", [None, "", "   "])
    def test_gated_read_rejected(self, gate, review_id, identity):
        with pytest.raises(AuthenticationRequired):
            gate.view_review(identity, review_id)
        assert _views_recorded() == 0

    def test_quota_read_rejected(self, gate):
        with pytest.raises(AuthenticationRequired):
            gate.quota_status(None)


class TestProvisioning:
    def test_first_contact_copies_profile(self, gate, identity_provider):
        identity_provider.register("user_ada", email="ada@example.com", first_name="Ada", last_name="Lovelace")

        member = gate.provision("user_ada")

        assert member.external_id == "user_ada"
        assert member.email == "ada@example.com"
        assert member.first_name == "Ada"
        assert member.plan == "free"

    def test_known_member_skips_identity_provider(self, gate, identity_provider):
        gate.provision("user_ada")
        gate.provision("user_ada")
        gate.provision("user_ada")

        assert identity_provider.calls == ["user_ada"]
        assert current_domain.repository_for(Member)._dao.query.all().total == 1

    def test_unknown_identity_is_unauthenticated(self, gate, identity_provider):
        identity_provider.forget("user_ghost")

        with pytest.raises(AuthenticationRequired):
            gate.provision("user_ghost")

    def test_identity_provider_outage_is_transient(self, gate, identity_provider):
        identity_provider.configure(available=False)

        with pytest.raises(TransientFailure):
            gate.provision("user_ada")
        assert current_domain.repository_for(Member)._dao.query.all().total == 0

    def test_sync_profile_merges_latest_values(self, gate, identity_provider):
        identity_provider.register("user_ada", email="ada@example.com", first_name="Ada")
        gate.provision("user_ada")

        identity_provider.register("user_ada", email="countess@example.com", first_name="")
        member = gate.sync_profile("user_ada")

        assert member.email == "countess@example.com"
        assert member.first_name == "Ada"


class TestGatedRead:
    def test_admitted_read_returns_review_and_quota(self, gate, review_id):
        read = gate.view_review("user_ada", review_id)

        assert str(read.review.id) == review_id
        assert read.status.views_this_month == 1
        assert read.status.remaining_views == 5

    def test_seventh_view_denied_with_upgrade_route(self, gate, review_id):
        for _ in range(6):
            gate.view_review("user_ada", review_id)

        with pytest.raises(QuotaExceeded) as exc:
            gate.view_review("user_ada", review_id)

        assert exc.value.upgrade_url == "/upgrade"
        assert exc.value.status.has_reached_limit is True
        assert "6 review views" in exc.value.message
        assert _views_recorded() == 6

    def test_denial_is_per_request_only(self, gate, review_id):
        for _ in range(6):
            gate.view_review("user_ada", review_id)
        with pytest.raises(QuotaExceeded):
            gate.view_review("user_ada", review_id)

        gate.upgrade_plan("user_ada", "premium")

        assert gate.view_review("user_ada", review_id).status.is_premium is True

    def test_unknown_review_consumes_nothing(self, gate):
        with pytest.raises(ObjectNotFoundError):
            gate.view_review("user_ada", str(uuid.uuid4()))

        assert gate.quota_status("user_ada").views_this_month == 0

    @pytest.mark.parametrize("bad_id", ["", "not-a-uuid", "12345"])
    def test_malformed_review_id(self, gate, bad_id):
        with pytest.raises(ValidationError) as exc:
            gate.view_review("user_ada", bad_id)
        assert "review_id" in exc.value.messages

    def test_other_members_have_their_own_quota(self, gate, review_id):
        for _ in range(6):
            gate.view_review("user_ada", review_id)

        assert gate.view_review("user_grace", review_id).status.views_this_month == 1


class TestWriteConflicts:
    def test_conflicting_write_is_retried(self, identity_provider, review_id, monkeypatch):
        gate = AccessGate(identity_provider=identity_provider, max_attempts=3)
        gate.provision("user_ada")

        real_process = vcreviews.process
        failures = iter([ExpectedVersionError("stale"), None])

        def flaky_process(command, asynchronous=True):
            failure = next(failures, None)
            if failure is not None:
                raise failure
            return real_process(command, asynchronous=asynchronous)

        monkeypatch.setattr(vcreviews, "process", flaky_process)
        read = gate.view_review("user_ada", review_id)

        assert read.status.views_this_month == 1

    def test_persistent_conflicts_surface_as_transient(self, identity_provider, review_id, monkeypatch):
        gate = AccessGate(identity_provider=identity_provider, max_attempts=2)
        gate.provision("user_ada")

        def always_conflicting(command, asynchronous=True):
            raise ExpectedVersionError("stale")

        monkeypatch.setattr(vcreviews, "process", always_conflicting)

        with pytest.raises(TransientFailure):
            gate.view_review("user_ada", review_id)
