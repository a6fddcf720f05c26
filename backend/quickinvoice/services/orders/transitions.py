"""Order status state machine.

Which statuses exist is fixed by ``OrderStatus``; which moves between them
are allowed is a policy. Every status change goes through ``apply_status``
so the policy is enforced in one place.
"""

from datetime import datetime
from enum import StrEnum

from quickinvoice.config import settings
from quickinvoice.models.enums import OrderStatus
from quickinvoice.models.order import Order
from quickinvoice.services.orders.exceptions import StatusTransitionNotAllowed


class TransitionPolicy(StrEnum):
    """Status transition policies.

    ANY          - every status may follow every other (backward moves included)
    FORWARD_ONLY - rank may stay or grow: unpaid -> paid -> delivered
    """

    ANY = "any"
    FORWARD_ONLY = "forward_only"

    def allows(self, current: OrderStatus, requested: OrderStatus) -> bool:
        if self is TransitionPolicy.ANY:
            return True
        return requested.rank >= current.rank


def default_policy() -> TransitionPolicy:
    return TransitionPolicy(settings.status_transition_policy)


def allowed_transitions(current: OrderStatus, policy: TransitionPolicy | None = None) -> tuple[OrderStatus, ...]:
    """Statuses reachable from ``current`` under the policy, in lifecycle order."""
    active = policy or default_policy()
    return tuple(s for s in OrderStatus.ordered() if s != current and active.allows(current, s))


def apply_status(
    order: Order,
    new_status: OrderStatus,
    *,
    now: datetime,
    policy: TransitionPolicy | None = None,
) -> Order:
    """Set ``order.status`` and bump ``updated_at``.

    Mutates and returns the same order instance.

    Raises:
        StatusTransitionNotAllowed: The policy forbids the move.
    """
    active = policy or default_policy()
    if not active.allows(order.status, new_status):
        raise StatusTransitionNotAllowed(order.status, new_status)
    order.status = new_status
    order.updated_at = now
    return order
