"""
Unit tests for the order status machine
"""

import pytest

from orderflow.domain import order_status
from orderflow.domain.entities import OrderStatus
from orderflow.domain.exceptions import InvalidStatusTransitionException

PENDING = OrderStatus.PENDING
COMPLETED = OrderStatus.COMPLETED
CANCELLED = OrderStatus.CANCELLED


class TestTransitionTable:
    """Test allowed and rejected transitions"""

    @pytest.mark.parametrize("target", [COMPLETED, CANCELLED])
    def test_pending_can_leave(self, target):
        """Test PENDING moves to either terminal state"""
        assert order_status.can_transition(from_status=PENDING, to_status=target) is True
        order_status.validate_transition(from_status=PENDING, to_status=target)

    @pytest.mark.parametrize("current", [COMPLETED, CANCELLED])
    @pytest.mark.parametrize("target", [PENDING, COMPLETED, CANCELLED])
    def test_terminal_states_never_move(self, current, target):
        """Test COMPLETED and CANCELLED are terminal"""
        assert order_status.can_transition(from_status=current, to_status=target) is False
        with pytest.raises(InvalidStatusTransitionException):
            order_status.validate_transition(from_status=current, to_status=target)

    def test_pending_to_pending_rejected(self):
        """Test PENDING to PENDING is not a transition"""
        assert order_status.can_transition(from_status=PENDING, to_status=PENDING) is False

    def test_accepts_status_names(self):
        """Test plain strings are accepted as states"""
        assert order_status.can_transition(from_status="PENDING", to_status="COMPLETED") is True

    def test_terminal_states_have_no_transitions(self):
        """Test the table agrees with the terminal set"""
        for state in order_status.TERMINAL_STATES:
            assert order_status.ALLOWED_TRANSITIONS[state] == frozenset()


class TestTargetAndInitialState:
    """Test target and initial-state rules"""

    def test_pending_target_always_rejected(self):
        """Test no order may be moved back to PENDING"""
        with pytest.raises(InvalidStatusTransitionException) as exc_info:
            order_status.validate_target(PENDING)
        assert exc_info.value.details["target"] == "PENDING"
        assert exc_info.value.details["current"] is None

    @pytest.mark.parametrize("target", [COMPLETED, CANCELLED])
    def test_terminal_targets_accepted(self, target):
        """Test COMPLETED and CANCELLED are valid targets"""
        order_status.validate_target(target)

    def test_initial_state(self):
        """Test only PENDING is a valid initial state"""
        assert order_status.is_valid_initial(PENDING) is True
        assert order_status.is_valid_initial(COMPLETED) is False
        assert order_status.is_valid_initial(CANCELLED) is False

    def test_transition_message(self):
        """Test the error names both states"""
        with pytest.raises(InvalidStatusTransitionException) as exc_info:
            order_status.validate_transition(from_status=COMPLETED, to_status=CANCELLED)
        assert exc_info.value.message == "Order status cannot change from COMPLETED to CANCELLED"
