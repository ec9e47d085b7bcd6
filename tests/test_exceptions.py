"""
Tests for business exceptions and storage failure translation
"""

from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

from orderflow.domain.exceptions import (
    AlreadyExistsException,
    BusinessRuleViolation,
    EntityInUseException,
    InvalidStatusTransitionException,
    NotFoundException,
    PersistenceFailure,
    ValidationException,
)

from conftest import CPF_BRUCE


def driver_error():
    return OperationalError(
        "SELECT tb_clients.id FROM tb_clients", {}, Exception("database disk image is malformed")
    )


class TestExceptionMessages:
    """Test messages and details of each business exception"""

    def test_validation(self):
        """Test field, value and reason"""
        exc = ValidationException("sku", "AB12CD3", "must have exactly 8 characters")
        assert exc.message == "Invalid sku: must have exactly 8 characters"
        assert exc.details == {
            "field": "sku",
            "value": "AB12CD3",
            "reason": "must have exactly 8 characters",
        }
        assert str(exc) == exc.message

    def test_validation_without_value(self):
        """Test a missing value stays None"""
        assert ValidationException("name", None, "is required").details["value"] is None

    def test_not_found_and_duplicates(self):
        """Test entity key messages"""
        assert (
            NotFoundException("Product", "sku", "ZZ99ZZ99").message
            == "Product not found for sku: ZZ99ZZ99"
        )
        assert (
            AlreadyExistsException("Client", "cpf", CPF_BRUCE).message
            == f"Client already registered with cpf: {CPF_BRUCE}"
        )

    def test_entity_in_use(self):
        """Test the referencing collection is named"""
        exc = EntityInUseException("Client", "cpf", CPF_BRUCE, referenced_by="orders")
        assert "orders" in exc.message
        assert exc.details["referenced_by"] == "orders"

    def test_status_transition(self):
        """Test both message forms"""
        assert (
            InvalidStatusTransitionException("COMPLETED", "CANCELLED").message
            == "Order status cannot change from COMPLETED to CANCELLED"
        )
        assert (
            InvalidStatusTransitionException(None, "PENDING").message
            == "Order status cannot be changed to PENDING"
        )

    def test_single_taxonomy(self):
        """Test every business exception shares one base class"""
        for exc in (
            ValidationException("name", "x", "is required"),
            NotFoundException("Order", "id", "1"),
            AlreadyExistsException("Product", "sku", "AB12CD34"),
            EntityInUseException("Product", "sku", "AB12CD34", referenced_by="order items"),
            InvalidStatusTransitionException("PENDING", "PENDING"),
            PersistenceFailure("save order"),
        ):
            assert isinstance(exc, BusinessRuleViolation)


class TestPersistenceFailure:
    """Test storage errors surface as opaque business failures"""

    def test_read_failure_is_wrapped(self, client_service):
        """Test the driver error is chained but not exposed"""
        with patch.object(client_service.clients, "find_by_cpf", side_effect=driver_error()):
            with pytest.raises(PersistenceFailure) as exc_info:
                client_service.find_by_cpf(CPF_BRUCE)

        exc = exc_info.value
        assert exc.message == "Failed to find client."
        assert exc.details == {"operation": "find client"}
        assert isinstance(exc.__cause__, OperationalError)
        assert "malformed" not in exc.message
        assert "tb_clients" not in exc.message

    def test_write_failure_rolls_back(self, order_service, saved_client):
        """Test a failing insert leaves nothing behind"""
        with patch.object(order_service.orders, "insert", side_effect=driver_error()):
            with pytest.raises(PersistenceFailure, match="Failed to save order."):
                order_service.save(client_id=saved_client.id, status="PENDING")

        assert order_service.find_page().total == 0

    def test_business_errors_are_not_wrapped(self, client_service):
        """Test validation failures propagate unchanged"""
        with pytest.raises(ValidationException):
            client_service.find_by_cpf("123")
