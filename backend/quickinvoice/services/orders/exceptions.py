"""Order domain exceptions."""

from quickinvoice.models.enums import OrderStatus
from quickinvoice.services.exceptions import NotFoundError, ServiceError, ValidationError


class OrderNotFound(NotFoundError):
    """Order not found (or owned by another seller)."""

    pass


class InvalidOrder(ValidationError):
    """Order input rejected before sequencing or persistence."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__("; ".join(errors))


class SequenceUnavailable(ServiceError):
    """Order number could not be allocated after bounded retries.

    Retryable: nothing was persisted.
    """

    def __init__(self, seller_id: str, attempts: int):
        self.seller_id = seller_id
        self.attempts = attempts
        super().__init__(f"Could not allocate order number for seller {seller_id} after {attempts} attempts")


class StatusTransitionNotAllowed(ValidationError):
    """Status change rejected by the configured transition policy."""

    def __init__(self, current: OrderStatus, requested: OrderStatus):
        self.current = current
        self.requested = requested
        super().__init__(f"Cannot change status from {current.value} to {requested.value}")
