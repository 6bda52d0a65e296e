"""Mixed workload scenario.

Combines the review and gated-read journeys with weights that model a
review site: mostly browsing, some gated reads, few submissions. This is
the recommended scenario for load baseline testing.
"""

from locust import HttpUser, between

from loadtests.scenarios.quota import GatedReadJourney
from loadtests.scenarios.reviews import BrowseFirmsJourney, SubmitAndBrowseJourney


class MixedWorkloadUser(HttpUser):
    """Realistic mixed workload.

    - Browsing firms and review previews (60%)
    - Gated reads by signed-in members (30%)
    - Review submissions (10%)
    """

    wait_time = between(1, 3)
    tasks = {
        BrowseFirmsJourney: 6,
        GatedReadJourney: 3,
        SubmitAndBrowseJourney: 1,
    }
