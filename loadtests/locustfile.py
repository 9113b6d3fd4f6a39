"""Storefront load testing: Locust entry point.

Discovers all user classes from the scenarios package.
Start the server with the fake gateway first: ``python src/server.py --gateway fake``.

Usage:
    # All scenarios (web UI):
    locust -f loadtests/locustfile.py

    # Shopper workload only:
    locust -f loadtests/locustfile.py ShopperUser

    # Abuse traffic (validation and rate limiting):
    locust -f loadtests/locustfile.py CardTestingUser InvalidCartUser

    # Headless (CI mode):
    locust -f loadtests/locustfile.py ShopperUser --headless \
           -u 50 -r 5 -t 300s --csv=results/loadtest
"""

import logging
import time

from locust import events

# Import all user classes so Locust discovers them
from loadtests.helpers.response import extract_error_detail
from loadtests.scenarios.checkout import ShopperUser  # noqa: F401
from loadtests.scenarios.stress import CardTestingUser, InvalidCartUser  # noqa: F401

logger = logging.getLogger("loadtest")


@events.request.add_listener
def on_request(request_type, name, response, exception, **_kw):
    """Log error details for every failed request.

    Fires globally for all scenarios. Extracts the API error body so you see
    "Invalid checkout session format" instead of just "400".
    """
    if exception:
        logger.error("[EXCEPTION] %s %s: %s", request_type, name, exception)
    elif response is not None and response.status_code >= 400:
        detail = extract_error_detail(response)
        logger.error("[%s] %s %s: %s", response.status_code, request_type, name, detail)


@events.test_start.add_listener
def on_test_start(environment, **_kwargs):
    """Log a marker when load test begins."""
    print(f"\n[LOADTEST] Started at {time.strftime('%H:%M:%S')}")
    print(f"[LOADTEST] Target host: {environment.host}")
    print()


@events.test_stop.add_listener
def on_test_stop(environment, **_kwargs):
    """Print request and failure totals when the test ends."""
    print(f"\n[LOADTEST] Stopped at {time.strftime('%H:%M:%S')}")
    total = environment.stats.total
    if total.num_requests:
        print(f"[LOADTEST] Requests: {total.num_requests}, failures: {total.num_failures}")
    print()
