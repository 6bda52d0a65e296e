"""BDD tests for the firm rating aggregate."""

from protean import current_domain
from pytest_bdd import given, parsers, scenarios, then, when
from vcreviews.firm.directory import get_firm_by_slug
from vcreviews.firm.firm import Firm
from vcreviews.firm.rating import recompute_firm_rating
from vcreviews.firm.summary import RatingSummary

scenarios("features/rating_aggregate.feature")


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('the firm "{slug}" aggregate has drifted'))
def aggregate_drifted(slug):
    firm = get_firm_by_slug(slug)
    firm.apply_rating_summary(RatingSummary(avg_responsiveness=1.0, avg_fairness=1.0, avg_support=1.0, total_reviews=9))
    current_domain.repository_for(Firm).add(firm)


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(parsers.cfparse('the firm "{slug}" is recomputed'))
def recompute(slug):
    recompute_firm_rating(get_firm_by_slug(slug).id)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the firm "{slug}" averages {r:f}, {f:f}, {s:f}'))
def firm_averages(slug, r, f, s):
    firm = get_firm_by_slug(slug)
    assert (firm.avg_responsiveness, firm.avg_fairness, firm.avg_support) == (r, f, s)


@then(parsers.cfparse('the firm "{slug}" has an overall rating of {rating:f}'))
def firm_overall(slug, rating):
    assert get_firm_by_slug(slug).avg_rating == rating
