"""
Order status lifecycle rules.

This module defines the only allowed status transitions for orders.
No database access and no side effects: services consult it before writing.
"""

from typing import Union

from .entities import OrderStatus
from .exceptions import InvalidStatusTransitionException

INITIAL_STATE = OrderStatus.PENDING

TERMINAL_STATES = frozenset({OrderStatus.COMPLETED, OrderStatus.CANCELLED})

ALLOWED_TRANSITIONS = {
    OrderStatus.PENDING: frozenset({OrderStatus.COMPLETED, OrderStatus.CANCELLED}),
    OrderStatus.COMPLETED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}

StatusLike = Union[OrderStatus, str]


def can_transition(*, from_status: StatusLike, to_status: StatusLike) -> bool:
    from_status = OrderStatus(from_status)
    to_status = OrderStatus(to_status)

    if from_status in TERMINAL_STATES:
        return False

    return to_status in ALLOWED_TRANSITIONS.get(from_status, frozenset())


def validate_target(to_status: StatusLike) -> None:
    """Reject targets no order may ever move into, whatever its current status."""
    to_status = OrderStatus(to_status)
    if to_status == INITIAL_STATE:
        raise InvalidStatusTransitionException(current=None, target=to_status.value)


def validate_transition(*, from_status: StatusLike, to_status: StatusLike) -> None:
    if not can_transition(from_status=from_status, to_status=to_status):
        raise InvalidStatusTransitionException(
            current=OrderStatus(from_status).value, target=OrderStatus(to_status).value
        )


def is_valid_initial(status: StatusLike) -> bool:
    return OrderStatus(status) == INITIAL_STATE
