"""Shared fixtures for the VC Reviews test suite."""

from datetime import UTC, datetime

import pytest
from protean import current_domain
from protean.adapters.repository.memory import MemoryProvider
from vcreviews.access.fake_provider import FakeIdentityProvider
from vcreviews.access.gate import AccessGate
from vcreviews.review.submission import SubmitReview, submit_review
from vcreviews.shared import clock


@pytest.fixture()
def identity_provider():
    return FakeIdentityProvider()


@pytest.fixture()
def gate(identity_provider):
    return AccessGate(identity_provider=identity_provider)


@pytest.fixture()
def frozen_clock(monkeypatch):
    """Pin ``utc_now`` to a fixed instant; call the fixture value to move time."""
    state = {"now": datetime(2025, 3, 14, 9, 30, tzinfo=UTC)}
    monkeypatch.setattr(clock, "utc_now", lambda: state["now"])

    def move_to(value: datetime):
        state["now"] = value

    return move_to


@pytest.fixture()
def submit():
    """Submit a review through the full submission flow (store + recompute)."""

    def _submit(firm_name="Acme Ventures", ratings=(4, 4, 4), review_text="Responsive partners, fair terms.", **extra):
        responsiveness, fairness, support = ratings
        command = SubmitReview(
            firm_name=firm_name,
            responsiveness=responsiveness,
            fairness=fairness,
            support=support,
            review_text=review_text,
            **extra,
        )
        return submit_review(command)

    return _submit


@pytest.fixture()
def review_id(submit):
    return submit().review_id


@pytest.fixture()
def sql_store():
    """Skip unless the suite runs against an RDBMS (``--env development`` or ``production``).

    The in-memory provider has no row-level conflict detection, so races
    between separate lock registries are only meaningful on a SQL store.
    """
    if isinstance(current_domain.providers["default"], MemoryProvider):
        pytest.skip("needs a SQL store: run with --env development")
