"""VC Reviews Load Testing - Locust entry point.

Discovers all user classes from the scenarios package.
Run specific scenarios with Locust's class selection.

Usage:
    # All scenarios (web UI):
    locust -f loadtests/locustfile.py

    # Mixed workload only:
    locust -f loadtests/locustfile.py MixedWorkloadUser

    # Quota contention (one member, many parallel reads):
    locust -f loadtests/locustfile.py ViewBurstUser

    # Headless (CI mode):
    locust -f loadtests/locustfile.py MixedWorkloadUser --headless \
           -u 50 -r 5 -t 300s --csv=results/loadtest
"""

import logging
import time

from locust import events

# Import all user classes so Locust discovers them
from loadtests.helpers.response import extract_error_detail
from loadtests.scenarios.mixed import MixedWorkloadUser  # noqa: F401
from loadtests.scenarios.quota import ViewBurstUser  # noqa: F401
from loadtests.scenarios.reviews import ReviewSubmissionUser  # noqa: F401

logger = logging.getLogger("loadtest")

# Quota denials are an expected business outcome, not a failure worth logging
EXPECTED_STATUSES = {403}


@events.request.add_listener
def on_request(request_type, name, response, exception, **_kw):
    """Log error details for every failed request."""
    if exception:
        logger.error("[EXCEPTION] %s %s: %s", request_type, name, exception)
    elif response is not None and response.status_code >= 400 and response.status_code not in EXPECTED_STATUSES:
        detail = extract_error_detail(response)
        logger.error("[%s] %s %s: %s", response.status_code, request_type, name, detail)


@events.test_start.add_listener
def on_test_start(environment, **_kwargs):
    print(f"\n[LOADTEST] Started at {time.strftime('%H:%M:%S')}")
    print(f"[LOADTEST] Target host: {environment.host}")
    print()


@events.test_stop.add_listener
def on_test_stop(environment, **_kwargs):
    """Print the gated-read outcome counts when the test ends."""
    print(f"\n[LOADTEST] Stopped at {time.strftime('%H:%M:%S')}")
    stats = environment.stats
    reads = stats.get("POST /members/me/views", "POST")
    denied = stats.get("POST /members/me/views [denied]", "POST")
    print(f"[LOADTEST] Gated reads admitted: {reads.num_requests - reads.num_failures - denied.num_requests}")
    print(f"[LOADTEST] Gated reads denied:   {denied.num_requests}")
    print()
