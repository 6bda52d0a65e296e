"""Shared BDD fixtures and step definitions for the VC Reviews domain."""

import pytest
from pytest_bdd import given, parsers, then, when
from vcreviews.firm.directory import get_firm_by_slug


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def outcome():
    """Container for the last gated read (admitted read or raised error)."""
    return {"read": None, "exc": None}


# ---------------------------------------------------------------------------
# Given / When steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('a review of "{firm_name}" is submitted with ratings {r:d}, {f:d}, {s:d}'))
@when(parsers.cfparse('a review of "{firm_name}" is submitted with ratings {r:d}, {f:d}, {s:d}'))
def review_submitted(submit, firm_name, r, f, s):
    submit(firm_name=firm_name, ratings=(r, f, s))


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the firm "{slug}" has {count:d} review'))
@then(parsers.cfparse('the firm "{slug}" has {count:d} reviews'))
def firm_review_count(slug, count):
    assert get_firm_by_slug(slug).total_reviews == count
