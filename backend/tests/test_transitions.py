from datetime import timedelta

import pytest

from quickinvoice.models import OrderStatus
from quickinvoice.models.status import Tone
from quickinvoice.services.orders.exceptions import StatusTransitionNotAllowed
from quickinvoice.services.orders.transitions import TransitionPolicy, allowed_transitions, apply_status

from tests.factories import NOW, make_order


def test_status_metadata() -> None:
    assert OrderStatus.initial() == OrderStatus.UNPAID
    assert OrderStatus.ordered() == (OrderStatus.UNPAID, OrderStatus.PAID, OrderStatus.DELIVERED)
    assert OrderStatus.UNPAID.meta.tone == Tone.WARNING
    assert OrderStatus.PAID.meta.display == "PAID"
    assert OrderStatus.DELIVERED.meta.tone == Tone.INFO


def test_any_policy_allows_backward_moves() -> None:
    assert allowed_transitions(OrderStatus.DELIVERED, TransitionPolicy.ANY) == (OrderStatus.UNPAID, OrderStatus.PAID)


def test_forward_only_policy() -> None:
    policy = TransitionPolicy.FORWARD_ONLY

    assert allowed_transitions(OrderStatus.UNPAID, policy) == (OrderStatus.PAID, OrderStatus.DELIVERED)
    assert allowed_transitions(OrderStatus.DELIVERED, policy) == ()
    assert policy.allows(OrderStatus.PAID, OrderStatus.PAID)


def test_apply_status_mutates_order() -> None:
    order = make_order()
    later = NOW + timedelta(days=1)

    result = apply_status(order, OrderStatus.PAID, now=later, policy=TransitionPolicy.ANY)

    assert result is order
    assert order.status == OrderStatus.PAID
    assert order.updated_at == later


def test_apply_status_rejected_leaves_order_untouched() -> None:
    order = make_order(status=OrderStatus.PAID)

    with pytest.raises(StatusTransitionNotAllowed):
        apply_status(order, OrderStatus.UNPAID, now=NOW + timedelta(days=1), policy=TransitionPolicy.FORWARD_ONLY)

    assert order.status == OrderStatus.PAID
    assert order.updated_at == NOW


def test_default_policy_allows_unpaid_to_delivered() -> None:
    order = make_order()
    later = NOW + timedelta(minutes=5)

    apply_status(order, OrderStatus.DELIVERED, now=later)

    assert order.status == OrderStatus.DELIVERED
    assert order.updated_at == later
