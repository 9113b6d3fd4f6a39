"""Abuse scenarios for request validation and rate limiting.

CardTestingUser hammers the payment endpoint the way a card-testing bot
would; every response must be a 400 or a 429, never a provider call.
InvalidCartUser sends carts that validation must reject.
"""

from locust import HttpUser, constant_pacing, task

from loadtests.data_generators import invalid_item_payload, malformed_session_id, one_time_token


class CardTestingUser(HttpUser):
    """Rapid payment submissions with malformed session ids."""

    wait_time = constant_pacing(0.1)  # ~10 requests/sec per user

    @task
    def submit_bogus_payment(self):
        with self.client.post(
            "/payments",
            json={"checkoutSession": malformed_session_id(), "oneTimeToken": one_time_token()},
            catch_response=True,
            name="[ABUSE] POST /payments",
        ) as resp:
            if resp.status_code in (400, 429):
                resp.success()
            else:
                resp.failure(f"Expected 400 or 429, got {resp.status_code}")


class InvalidCartUser(HttpUser):
    """Checkout session requests with invalid items."""

    wait_time = constant_pacing(0.2)

    @task
    def create_invalid_session(self):
        with self.client.post(
            "/checkout/sessions",
            json=invalid_item_payload(),
            catch_response=True,
            name="[ABUSE] POST /checkout/sessions (invalid items)",
        ) as resp:
            if resp.status_code in (400, 429):
                resp.success()
            else:
                resp.failure(f"Expected 400 or 429, got {resp.status_code}")
