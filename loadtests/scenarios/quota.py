"""Gated read scenarios for the monthly view quota.

ViewBurstUser drives one fresh member per simulated user through the gate
with no think time. Each member must see at most six admissions per month;
a 403 is the expected outcome after that.
"""

from locust import HttpUser, SequentialTaskSet, constant_pacing, task

from loadtests.data_generators import review_data, unique_external_id
from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import MemberState

FREE_MONTHLY_VIEW_LIMIT = 6


class GatedReadJourney(SequentialTaskSet):
    """Seed a review -> Read until denied -> Check quota -> Upgrade -> Read again."""

    def on_start(self):
        self.state = MemberState(external_id=unique_external_id())

    @task
    def seed_review(self):
        with self.client.post("/reviews", json=review_data(), catch_response=True, name="POST /reviews") as resp:
            if resp.status_code != 201:
                resp.failure(f"Seed review failed: {resp.status_code}: {extract_error_detail(resp)}")
                self.interrupt()
                return
            self.state.review_ids.append(resp.json()["reviewId"])

    @task
    def read_until_denied(self):
        for _ in range(FREE_MONTHLY_VIEW_LIMIT + 2):
            self._open(self.state.review_ids[0])

    @task
    def check_quota(self):
        with self.client.get(
            "/members/me/quota",
            headers=self.state.headers,
            catch_response=True,
            name="GET /members/me/quota",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Quota failed: {resp.status_code}: {extract_error_detail(resp)}")
            elif resp.json()["viewsThisMonth"] > FREE_MONTHLY_VIEW_LIMIT:
                resp.failure(f"Quota overrun: {resp.json()['viewsThisMonth']} views recorded")

    @task
    def upgrade(self):
        self.client.put(
            "/members/me/plan",
            json={"plan": "premium"},
            headers=self.state.headers,
            name="PUT /members/me/plan",
        )
        self.state.plan = "premium"

    @task
    def read_as_premium(self):
        self._open(self.state.review_ids[0])
        self.interrupt()

    def _open(self, review_id):
        with self.client.post(
            "/members/me/views",
            json={"reviewId": review_id},
            headers=self.state.headers,
            catch_response=True,
            name="POST /members/me/views",
        ) as resp:
            if resp.status_code == 200:
                self.state.views_admitted += 1
            elif resp.status_code == 403:
                self.state.views_denied += 1
                resp.success()
                self._record_denial(resp)
            else:
                resp.failure(f"Gated read failed: {resp.status_code}: {extract_error_detail(resp)}")

    def _record_denial(self, resp):
        # Separate stats row so admissions and denials can be counted apart
        self.user.environment.events.request.fire(
            request_type="POST",
            name="POST /members/me/views [denied]",
            response_time=resp.elapsed.total_seconds() * 1000,
            response_length=len(resp.content or b""),
            response=None,
            exception=None,
            context={},
        )


class ViewBurstUser(HttpUser):
    """Back-to-back gated reads with no think time."""

    wait_time = constant_pacing(0.05)
    tasks = [GatedReadJourney]
