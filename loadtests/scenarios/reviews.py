"""Review submission and browsing scenarios.

Submissions recompute the firm's aggregate, so the firm pool is kept small
enough that concurrent submissions regularly hit the same firm.
"""

import random

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import firm_name, review_data
from loadtests.helpers.response import extract_error_detail


class SubmitAndBrowseJourney(SequentialTaskSet):
    """Submit -> Check firm aggregate -> Browse firm reviews."""

    def on_start(self):
        self.slug = None

    @task
    def submit(self):
        with self.client.post(
            "/reviews",
            json=review_data(),
            catch_response=True,
            name="POST /reviews",
        ) as resp:
            if resp.status_code == 201:
                self.slug = resp.json()["firm"]["slug"]
            else:
                resp.failure(f"Submit failed: {resp.status_code}: {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def firm_detail(self):
        with self.client.get(
            f"/firms/{self.slug}",
            catch_response=True,
            name="GET /firms/{slug}",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Firm detail failed: {resp.status_code}: {extract_error_detail(resp)}")
            elif resp.json()["totalReviews"] < 1:
                resp.failure("Firm aggregate does not include the submitted review")

    @task
    def firm_reviews(self):
        self.client.get(
            "/reviews",
            params={"firm": self.slug, "sort": random.choice(["newest", "highest"])},
            name="GET /reviews?firm={slug}",
        )
        self.interrupt()


class BrowseFirmsJourney(SequentialTaskSet):
    @task
    def list_firms(self):
        self.client.get(
            "/firms",
            params={"sort": random.choice(["rating", "name", "reviews", "recent"])},
            name="GET /firms",
        )

    @task
    def search_firms(self):
        self.client.get("/firms", params={"search": firm_name().split()[0]}, name="GET /firms?search")
        self.interrupt()


class ReviewSubmissionUser(HttpUser):
    wait_time = between(0.5, 2)
    tasks = {SubmitAndBrowseJourney: 3, BrowseFirmsJourney: 2}
