"""
Tests for the client service
"""

from datetime import date, timedelta
from unittest.mock import patch

import pytest

from orderflow.domain.exceptions import (
    AlreadyExistsException,
    EntityInUseException,
    NotFoundException,
    ValidationException,
)
from orderflow.models import ClientRecord

from conftest import CPF_ANA, CPF_BRUCE, CPF_JOAO, CPF_MARIA


class TestSaveClient:
    """Test client registration"""

    def test_save_client(self, client_service, db_session):
        """Test a valid client is stored with an assigned id"""
        client = client_service.save(
            name="  Bruce   Wayne ",
            email=" b@w.com",
            cpf="401.777.150-57",
            birth_date=date(1972, 2, 19),
        )

        assert client.id is not None
        assert client.name == "Bruce Wayne"
        assert client.email == "b@w.com"
        assert client.cpf == CPF_BRUCE
        assert db_session.query(ClientRecord).count() == 1

    def test_duplicate_cpf(self, client_service, saved_client):
        """Test re-saving the same CPF fails with a duplicate error"""
        with pytest.raises(AlreadyExistsException) as exc_info:
            client_service.save(
                name="Another Bruce",
                email="other@w.com",
                cpf=CPF_BRUCE,
                birth_date=date(1980, 1, 1),
            )
        assert exc_info.value.details["key"] == "cpf"

    def test_duplicate_email(self, client_service, saved_client):
        """Test a registered email is rejected before the CPF is looked at"""
        with pytest.raises(AlreadyExistsException) as exc_info:
            client_service.save(
                name="Alfred Pennyworth", email="b@w.com", cpf="bad", birth_date=None
            )
        assert exc_info.value.details["key"] == "email"

    def test_first_failure_wins(self, client_service):
        """Test checks stop at the first invalid field"""
        with pytest.raises(ValidationException) as exc_info:
            client_service.save(name="Bob", email="invalid", cpf="123", birth_date=None)
        assert exc_info.value.details["field"] == "name"

        with pytest.raises(ValidationException) as exc_info:
            client_service.save(name="Robert", email="invalid", cpf="123", birth_date=None)
        assert exc_info.value.details["field"] == "email"

        with pytest.raises(ValidationException) as exc_info:
            client_service.save(name="Robert", email="r@x.com", cpf="123", birth_date=None)
        assert exc_info.value.details["field"] == "cpf"

        with pytest.raises(ValidationException) as exc_info:
            client_service.save(name="Robert", email="r@x.com", cpf=CPF_MARIA, birth_date=None)
        assert exc_info.value.details["field"] == "birth_date"

    def test_future_birth_date(self, client_service):
        """Test birth date in the future"""
        with pytest.raises(ValidationException, match="future"):
            client_service.save(
                name="Future Kid",
                email="kid@future.com",
                cpf=CPF_MARIA,
                birth_date=date.today() + timedelta(days=30),
            )

    def test_unique_constraint_race(self, client_service, saved_client, db_session):
        """Test a conflict caught by the store gives the same duplicate error"""
        with patch.object(client_service.clients, "exists_by_email", side_effect=[False, True]):
            with pytest.raises(AlreadyExistsException) as exc_info:
                client_service.save(
                    name="Bruce Clone",
                    email="b@w.com",
                    cpf=CPF_JOAO,
                    birth_date=date(1972, 2, 19),
                )

        assert exc_info.value.message == "Client already registered with email: b@w.com"
        assert db_session.query(ClientRecord).count() == 1


class TestFindClient:
    """Test client lookups and listings"""

    def test_find_by_cpf(self, client_service, saved_client):
        """Test lookup with punctuation"""
        client = client_service.find_by_cpf("401.777.150-57")
        assert client.id == saved_client.id

    def test_find_by_cpf_not_found(self, client_service):
        """Test unknown CPF"""
        with pytest.raises(NotFoundException):
            client_service.find_by_cpf(CPF_MARIA)

    def test_find_by_email(self, client_service, saved_client):
        """Test lookup by email"""
        assert client_service.find_by_email("b@w.com").cpf == CPF_BRUCE
        with pytest.raises(NotFoundException):
            client_service.find_by_email("nobody@w.com")
        with pytest.raises(ValidationException):
            client_service.find_by_email("not-an-email")

    def test_find_page_filters(self, client_service, saved_client):
        """Test name, email and CPF filters"""
        client_service.save(
            name="Maria Silva", email="maria@example.com", cpf=CPF_MARIA,
            birth_date=date(1990, 5, 17),
        )

        assert client_service.find_page().total == 2
        assert client_service.find_page(name="wayne").total == 1
        assert client_service.find_page(email="example").items[0].cpf == CPF_MARIA
        assert client_service.find_page(cpf="529.982.247-25").total == 1
        assert client_service.find_page(
            birth_start=date(1980, 1, 1), birth_end=date(2000, 1, 1)
        ).total == 1

    def test_find_page_blank_filters_are_ignored(self, client_service, saved_client):
        """Test blank filters do not fail"""
        page = client_service.find_page(name=" ", email="", cpf="  ")
        assert page.total == 1

    def test_find_page_invalid_filters(self, client_service):
        """Test filter validation"""
        with pytest.raises(ValidationException):
            client_service.find_page(cpf="11111111111")
        with pytest.raises(ValidationException):
            client_service.find_page(birth_start=date(2000, 1, 1), birth_end=date(1990, 1, 1))
        with pytest.raises(ValidationException):
            client_service.find_page(birth_end=date.today() + timedelta(days=30))


class TestUpdateAndDeleteClient:
    """Test client updates and removal"""

    def test_update_by_cpf(self, client_service, saved_client):
        """Test name, email and birth date are replaced"""
        updated = client_service.update_by_cpf(
            CPF_BRUCE, name="Batman", email="bat@cave.com", birth_date=date(1972, 2, 20)
        )
        assert updated.id == saved_client.id
        assert updated.name == "Batman"
        assert client_service.find_by_email("bat@cave.com").cpf == CPF_BRUCE

    def test_update_keeps_own_email(self, client_service, saved_client):
        """Test a client may keep its email"""
        updated = client_service.update_by_cpf(
            CPF_BRUCE, name="Bruce T. Wayne", email="b@w.com", birth_date=date(1972, 2, 19)
        )
        assert updated.email == "b@w.com"

    def test_update_email_taken(self, client_service, saved_client):
        """Test another client's email is rejected"""
        client_service.save(
            name="Maria Silva", email="maria@example.com", cpf=CPF_MARIA,
            birth_date=date(1990, 5, 17),
        )
        with pytest.raises(AlreadyExistsException):
            client_service.update_by_cpf(
                CPF_BRUCE, name="Bruce Wayne", email="maria@example.com",
                birth_date=date(1972, 2, 19),
            )

    def test_update_unknown_cpf(self, client_service):
        """Test CPF must exist"""
        with pytest.raises(NotFoundException):
            client_service.update_by_cpf(
                CPF_ANA, name="Ana Lima", email="ana@x.com", birth_date=date(1999, 1, 1)
            )

    def test_delete_by_cpf(self, client_service, saved_client, db_session):
        """Test removal"""
        client_service.delete_by_cpf(CPF_BRUCE)
        assert db_session.query(ClientRecord).count() == 0
        with pytest.raises(NotFoundException):
            client_service.delete_by_cpf(CPF_BRUCE)

    def test_delete_client_with_orders(self, client_service, saved_order):
        """Test a client with orders cannot be removed"""
        with pytest.raises(EntityInUseException):
            client_service.delete_by_cpf(CPF_BRUCE)
