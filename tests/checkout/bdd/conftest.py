"""Shared BDD fixtures and step definitions for the checkout orchestrator."""

from checkout.cart import CartItem
from checkout.events import TokenCreated
from checkout.orchestrator import CheckoutOrchestrator
from pytest_bdd import given, parsers, then, when
from shared.errors import NetworkError, StateError


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('a cart with {quantity:d} "{name}" at {unit_amount:d}'), target_fixture="cart")
def _cart(quantity, name, unit_amount):
    return [CartItem(product_id="A", name=name, quantity=quantity, unit_amount=unit_amount)]


@given("the checkout has started", target_fixture="orchestrator")
def _started_checkout(backend, widget, cart):
    orchestrator = CheckoutOrchestrator(backend, widget, cart)
    orchestrator.begin()
    return orchestrator


@given("a checkout that has not started", target_fixture="orchestrator")
def _unstarted_checkout(backend, widget, cart):
    return CheckoutOrchestrator(backend, widget, cart)


@given(parsers.cfparse('the payment provider will answer "{status}" with "{sub_status}"'))
def _provider_answer(backend, status, sub_status):
    backend.payment_payload = {"status": status, "sub_status": sub_status}


@given("the payment provider will require further action")
def _provider_requires_action(backend):
    backend.payment_payload = {"status": "PENDING", "requiresAction": True}


@given("the storefront cannot create a checkout session")
def _session_unavailable(backend):
    backend.session_error = NetworkError("Payment provider unavailable")


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when("the shopper pays")
def _pay(orchestrator):
    orchestrator.pay()


@when(parsers.cfparse('the widget creates the one-time token "{token}"'))
def _token_created(orchestrator, widget, token):
    widget.emit_token(token)
    orchestrator.process_events()


@when("the widget reports an error")
def _widget_error(orchestrator, widget):
    widget.fail("Card form could not be loaded")
    orchestrator.process_events()


@when("a one-time token arrives", target_fixture="raised")
def _orphan_token(orchestrator):
    orchestrator.post(TokenCreated("ott_orphan"))
    try:
        orchestrator.process_events()
    except StateError as exc:
        return exc
    return None


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the checkout is "{state}"'))
def _checkout_state(orchestrator, state):
    assert orchestrator.state.value == state


@then(parsers.cfparse('the message is "{message}"'))
def _checkout_message(orchestrator, message):
    assert orchestrator.message == message


@then(parsers.cfparse("{count:d} payment submission was made"))
def _submission_count(backend, count):
    assert len(backend.payment_calls) == count


@then("no payment submission was made")
def _no_submission(backend):
    assert backend.payment_calls == []


@then(parsers.cfparse("the widget was asked to continue {count:d} time"))
def _continuation_count(widget, count):
    assert widget.continuation_count == count


@then("a state error is raised")
def _state_error(raised):
    assert isinstance(raised, StateError)
