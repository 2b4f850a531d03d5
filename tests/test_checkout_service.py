import re
from decimal import Decimal

import pytest

from storefront.domain.errors import CheckoutStateError, EmptyCartError, UserInputError
from storefront.domain.schemas import DeliveryMethod, OrderRecord
from storefront.repos.order_repo import OrderRepo
from storefront.repos.snapshot_store import SnapshotStore
from storefront.services.checkout_service import AbortReason, CheckoutService, CheckoutState
from storefront.services.payment_gateway import GATEWAY_DECLINE_REASON, INVALID_CARD_REASON
from tests.conftest import (
    CUSTOMER_CARD,
    CUSTOMER_ID,
    ScriptedRandom,
    SpyGateway,
    approving_gateway,
    declining_gateway,
)


def _ledger_state(ledger):
    return [(l.item_id, l.quantity) for l in ledger.order_lines()]


# =====================================================
# START
# =====================================================
def test_empty_cart_never_leaves_start(make_checkout, orders):
    gateway = approving_gateway()
    checkout = make_checkout(gateway)

    with pytest.raises(EmptyCartError):
        checkout.start()

    assert checkout.state is CheckoutState.START
    assert gateway.calls == []
    assert orders.all() == []


def test_start_uses_stored_card(make_checkout, ledger, item_a):
    ledger.add_line(item_a, 2)
    checkout = make_checkout()

    status = checkout.start()

    assert status.state is CheckoutState.DELIVERY_SELECT
    assert checkout.card == CUSTOMER_CARD
    assert status.card.endswith(CUSTOMER_CARD[-4:])
    assert CUSTOMER_CARD not in status.card


def test_start_unknown_customer(make_checkout, ledger, item_a):
    ledger.add_line(item_a, 1)
    checkout = make_checkout(customer_id="nobody")

    with pytest.raises(PermissionError):
        checkout.start()
    assert checkout.state is CheckoutState.START


def test_start_twice_not_allowed(make_checkout, ledger, item_a):
    ledger.add_line(item_a, 1)
    checkout = make_checkout()
    checkout.start()

    with pytest.raises(CheckoutStateError):
        checkout.start()


# =====================================================
# DELIVERY
# =====================================================
def test_exactly_two_delivery_options(make_checkout):
    options = make_checkout().delivery_options()

    assert [(o.method, o.fee) for o in options] == [
        (DeliveryMethod.MAIL, Decimal("3.00")),
        (DeliveryMethod.PICKUP, Decimal("0.00")),
    ]


def test_pickup_is_free(make_checkout, ledger, item_a):
    ledger.add_line(item_a, 2)
    checkout = make_checkout()
    checkout.start()

    status = checkout.select_delivery(DeliveryMethod.PICKUP)

    assert status.state is CheckoutState.PAYMENT_ATTEMPT
    assert status.delivery_fee == Decimal("0.00")
    assert status.running_total == Decimal("21.60")


def test_delivery_before_start_not_allowed(make_checkout, ledger, item_a):
    ledger.add_line(item_a, 1)

    with pytest.raises(CheckoutStateError):
        make_checkout().select_delivery(DeliveryMethod.MAIL)


def test_abort_at_delivery_keeps_cart(make_checkout, ledger, item_a):
    ledger.add_line(item_a, 2)
    checkout = make_checkout()
    checkout.start()

    status = checkout.abort()

    assert status.state is CheckoutState.ABORTED
    assert status.abort_reason is AbortReason.USER_ABORT
    assert _ledger_state(ledger) == [("A", 2)]


# =====================================================
# PAYMENT
# =====================================================
def test_approved_on_first_attempt_commits(make_checkout, ledger, item_a, orders, order_store, orders_url):
    ledger.add_line(item_a, 2)
    checkout = make_checkout(approving_gateway())

    assert checkout.start().subtotal == Decimal("20.00")
    status = checkout.select_delivery(DeliveryMethod.MAIL)
    assert status.tax == Decimal("1.60")
    assert status.running_total == Decimal("24.60")

    status = checkout.attempt_payment()

    assert status.state is CheckoutState.COMMITTED
    order = status.order
    assert order.total_amount == Decimal("24.60")
    assert order.delivery_fee == Decimal("3.00")
    assert order.delivery_method is DeliveryMethod.MAIL
    assert order.customer_id == CUSTOMER_ID
    assert [(l.item_id, l.quantity) for l in order.items] == [("A", 2)]
    assert re.fullmatch(r"\d{4}", order.authorization_token)
    assert re.fullmatch(r"ORD-[A-Z0-9]{8}", order.order_id)
    assert status.order_saved is True
    assert ledger.is_empty()

    # zapisane trwale
    reopened = OrderRepo(SnapshotStore(OrderRecord, orders_url, "orders"))
    assert reopened.all() == [order]


def test_running_total_is_charged(make_checkout, ledger, item_a):
    ledger.add_line(item_a, 2)
    gateway = approving_gateway()
    checkout = make_checkout(gateway)
    checkout.start()
    checkout.select_delivery(DeliveryMethod.MAIL)

    checkout.attempt_payment()

    assert gateway.calls == [(CUSTOMER_CARD, Decimal("24.60"))]


def test_three_declines_abort_and_keep_cart(make_checkout, ledger, item_a, orders, order_store):
    ledger.add_line(item_a, 2)
    gateway = declining_gateway()
    checkout = make_checkout(gateway)
    checkout.start()
    checkout.select_delivery(DeliveryMethod.MAIL)

    status = checkout.attempt_payment()
    assert status.state is CheckoutState.PAYMENT_ATTEMPT
    assert status.attempts_left == 2
    assert status.awaiting_card
    assert status.last_decline_reason == GATEWAY_DECLINE_REASON

    status = checkout.retry_with_card("5500000000000004")
    assert status.state is CheckoutState.PAYMENT_ATTEMPT
    assert status.attempts_left == 1

    status = checkout.retry_with_card("6011000000000004")

    assert status.state is CheckoutState.ABORTED
    assert status.abort_reason is AbortReason.MAX_ATTEMPTS
    assert status.attempts_left == 0
    assert status.order is None
    assert len(gateway.calls) == 3
    assert _ledger_state(ledger) == [("A", 2)]
    assert orders.all() == []
    assert order_store.load() == []


def test_no_attempt_after_max_attempts(make_checkout, ledger, item_a):
    ledger.add_line(item_a, 1)
    checkout = make_checkout(declining_gateway(), max_attempts=1)
    checkout.start()
    checkout.select_delivery(DeliveryMethod.PICKUP)
    checkout.attempt_payment()

    with pytest.raises(CheckoutStateError):
        checkout.attempt_payment()
    with pytest.raises(CheckoutStateError):
        checkout.abort()


def test_retry_requires_new_card(make_checkout, ledger, item_a):
    ledger.add_line(item_a, 1)
    gateway = declining_gateway()
    checkout = make_checkout(gateway)
    checkout.start()
    checkout.select_delivery(DeliveryMethod.PICKUP)
    checkout.attempt_payment()

    with pytest.raises(CheckoutStateError):
        checkout.attempt_payment()
    assert len(gateway.calls) == 1


def test_replacement_card_persisted_before_next_attempt(make_checkout, ledger, item_a, customers, customer_store):
    ledger.add_line(item_a, 1)
    gateway = SpyGateway(rng=ScriptedRandom([0.0, 0.99]), decline_rate=0.2)
    checkout = make_checkout(gateway)
    checkout.start()
    checkout.select_delivery(DeliveryMethod.MAIL)
    checkout.attempt_payment()

    checkout.replace_card("5500000000000004")

    # zapisane zanim nastapila kolejna proba
    assert len(gateway.calls) == 1
    stored = {c.id: c for c in customer_store.load()}
    assert stored[CUSTOMER_ID].card_identifier == "5500000000000004"
    assert customers.get_customer(CUSTOMER_ID).card_identifier == "5500000000000004"

    status = checkout.attempt_payment()

    assert status.state is CheckoutState.COMMITTED
    assert status.attempts_used == 2
    assert gateway.calls[-1][0] == "5500000000000004"


def test_running_total_frozen_across_card_swap(make_checkout, ledger, item_a):
    ledger.add_line(item_a, 2)
    gateway = SpyGateway(rng=ScriptedRandom([0.0, 0.99]), decline_rate=0.2)
    checkout = make_checkout(gateway)
    checkout.start()
    checkout.select_delivery(DeliveryMethod.MAIL)

    checkout.attempt_payment()
    checkout.retry_with_card("5500000000000004")

    assert [amount for _, amount in gateway.calls] == [Decimal("24.60"), Decimal("24.60")]


def test_replace_card_only_after_decline(make_checkout, ledger, item_a):
    ledger.add_line(item_a, 1)
    checkout = make_checkout()
    checkout.start()
    checkout.select_delivery(DeliveryMethod.MAIL)

    with pytest.raises(CheckoutStateError):
        checkout.replace_card("5500000000000004")


def test_blank_replacement_card_rejected(make_checkout, ledger, item_a):
    ledger.add_line(item_a, 1)
    checkout = make_checkout(declining_gateway())
    checkout.start()
    checkout.select_delivery(DeliveryMethod.MAIL)
    checkout.attempt_payment()

    with pytest.raises(UserInputError):
        checkout.replace_card("   ")
    assert checkout.awaiting_card


def test_invalid_stored_card_declines(make_checkout, ledger, item_a, customers):
    customers.update_card(CUSTOMER_ID, "invalid-card")
    ledger.add_line(item_a, 1)
    checkout = make_checkout(approving_gateway())
    checkout.start()
    checkout.select_delivery(DeliveryMethod.MAIL)

    status = checkout.attempt_payment()

    assert status.last_decline_reason == INVALID_CARD_REASON
    assert status.state is CheckoutState.PAYMENT_ATTEMPT


def test_abort_after_decline_keeps_cart(make_checkout, ledger, item_a, item_b, orders):
    ledger.add_line(item_a, 2)
    ledger.add_line(item_b, 1)
    checkout = make_checkout(declining_gateway())
    checkout.start()
    checkout.select_delivery(DeliveryMethod.MAIL)
    checkout.attempt_payment()

    status = checkout.abort()

    assert status.state is CheckoutState.ABORTED
    assert status.abort_reason is AbortReason.USER_ABORT
    assert _ledger_state(ledger) == [("A", 2), ("B", 1)]
    assert orders.all() == []


# =====================================================
# COMMIT
# =====================================================
def test_commit_is_reachable_once(make_checkout, ledger, item_a):
    ledger.add_line(item_a, 1)
    checkout = make_checkout()
    checkout.start()
    checkout.select_delivery(DeliveryMethod.PICKUP)
    checkout.attempt_payment()

    for step in (checkout.attempt_payment, checkout.abort, checkout.start):
        with pytest.raises(CheckoutStateError):
            step()


def test_save_failure_still_places_order(ledger, item_a, customers, tmp_path):
    broken = OrderRepo(SnapshotStore(OrderRecord, f"sqlite:///{tmp_path}", "orders", write_attempts=1))
    ledger.add_line(item_a, 2)
    checkout = CheckoutService(
        ledger=ledger,
        customer_id=CUSTOMER_ID,
        customers=customers,
        orders=broken,
        gateway=approving_gateway(),
    )
    checkout.start()
    checkout.select_delivery(DeliveryMethod.MAIL)

    status = checkout.attempt_payment()

    assert status.state is CheckoutState.COMMITTED
    assert status.order_saved is False
    assert broken.all() == [status.order]
    assert ledger.is_empty()


def test_order_ids_unique(make_checkout, ledger, item_a, orders):
    for _ in range(5):
        ledger.add_line(item_a, 1)
        checkout = make_checkout()
        checkout.start()
        checkout.select_delivery(DeliveryMethod.PICKUP)
        checkout.attempt_payment()

    ids = [o.order_id for o in orders.all()]
    assert len(ids) == 5
    assert len(set(ids)) == 5
