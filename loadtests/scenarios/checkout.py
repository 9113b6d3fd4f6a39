"""Checkout load test scenarios.

Sequential journeys that mirror what the browser does during checkout:
open a checkout session for a cart, then submit the widget's one-time token.
Run against a server started with ``--gateway fake`` so no provider traffic
is generated.
"""

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import checkout_session_data, country, payment_data
from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import CheckoutState


class CheckoutJourney(SequentialTaskSet):
    """Create Checkout Session -> Submit Payment.

    A 429 from the payments limiter is expected once a simulated client
    exceeds its payment ceiling and is not counted as a failure.
    """

    def on_start(self):
        self.state = CheckoutState(country=country())

    @task
    def create_checkout_session(self):
        payload = checkout_session_data()
        self.state.amount = payload["amount"]
        with self.client.post(
            f"/checkout/sessions?country={self.state.country}",
            json=payload,
            catch_response=True,
            name="POST /checkout/sessions",
        ) as resp:
            if resp.status_code == 200:
                body = resp.json()
                self.state.checkout_session = body["checkout_session"]
                self.state.merchant_order_id = body["merchant_order_id"]
                if body["amount"] != payload["amount"]:
                    resp.failure(f"Session amount {body['amount']} != requested {payload['amount']}")
            elif resp.status_code == 429:
                resp.success()
                self.interrupt()
            else:
                resp.failure(f"Create session failed: {resp.status_code}: {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def submit_payment(self):
        with self.client.post(
            f"/payments?country={self.state.country}",
            json=payment_data(self.state.checkout_session, self.state.amount),
            catch_response=True,
            name="POST /payments",
        ) as resp:
            if resp.status_code == 200:
                self.state.payment_status = resp.json().get("status")
            elif resp.status_code == 429:
                resp.success()
            else:
                resp.failure(f"Payment failed: {resp.status_code}: {extract_error_detail(resp)}")

    @task
    def done(self):
        self.interrupt()


class BrowseJourney(SequentialTaskSet):
    """Health check and public key fetch, as done on every page load."""

    @task
    def healthy(self):
        self.client.get("/healthy", name="GET /healthy")

    @task
    def public_api_key(self):
        with self.client.get("/public-api-key", catch_response=True, name="GET /public-api-key") as resp:
            if resp.status_code == 429:
                resp.success()

    @task
    def done(self):
        self.interrupt()


class ShopperUser(HttpUser):
    """Storefront shopper: mostly browsing, some checkouts."""

    wait_time = between(0.5, 3.0)
    tasks = {
        BrowseJourney: 3,
        CheckoutJourney: 2,
    }
