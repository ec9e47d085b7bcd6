"""
Client use cases.

Clients are identified externally by CPF and email; the numeric id is
assigned by the store and never changes.
"""

from datetime import date
from typing import Optional

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..domain.entities import Client, Page
from ..domain.exceptions import (
    AlreadyExistsException,
    EntityInUseException,
    NotFoundException,
)
from ..domain.filters import ClientFilter
from ..query import CATALOG, QueryCatalog
from ..repositories import ClientRepository, OrderRepository
from ..validators import (
    is_blank,
    optional_text,
    optional_token,
    validate_birth_date,
    validate_cpf,
    validate_email,
    validate_name,
    validate_period,
)
from .base import BaseService

logger = structlog.get_logger(__name__)

ENTITY = "Client"


class ClientService(BaseService):
    """Registration, lookup, update and removal of clients."""

    def __init__(self, db: Session, catalog: QueryCatalog = CATALOG):
        super().__init__(db, catalog)
        self.clients = ClientRepository(db, catalog)
        self.orders = OrderRepository(db, catalog)

    def save(
        self,
        name: Optional[str],
        email: Optional[str],
        cpf: Optional[str],
        birth_date: Optional[date],
    ) -> Client:
        """
        Register a new client.

        Checks run in order and stop at the first failure: name, email format,
        email uniqueness, CPF format and check digits, CPF uniqueness, birth date.

        Returns:
            The stored client, including its assigned id

        Raises:
            ValidationException: If a field is missing or malformed
            AlreadyExistsException: If the email or CPF is already registered
        """
        with self._unit_of_work("save client"):
            name = validate_name(name)
            email = validate_email(email)
            if self.clients.exists_by_email(email):
                raise AlreadyExistsException(ENTITY, "email", email)
            cpf = validate_cpf(cpf)
            if self.clients.exists_by_cpf(cpf):
                raise AlreadyExistsException(ENTITY, "cpf", cpf)
            birth_date = validate_birth_date(birth_date, self._today())

            try:
                client = self.clients.insert(
                    Client(name=name, email=email, cpf=cpf, birth_date=birth_date)
                )
            except IntegrityError:
                # A concurrent insert won the race after the checks above
                self.db.rollback()
                if self.clients.exists_by_email(email):
                    raise AlreadyExistsException(ENTITY, "email", email)
                if self.clients.exists_by_cpf(cpf):
                    raise AlreadyExistsException(ENTITY, "cpf", cpf)
                raise

        logger.info("client_saved", client_id=client.id)
        return client

    def find_by_cpf(self, cpf: Optional[str]) -> Client:
        with self._unit_of_work("find client", read_only=True):
            cpf = validate_cpf(cpf)
            client = self.clients.find_by_cpf(cpf)
            if client is None:
                raise NotFoundException(ENTITY, "cpf", cpf)
            return client

    def find_by_email(self, email: Optional[str]) -> Client:
        with self._unit_of_work("find client", read_only=True):
            email = validate_email(email)
            client = self.clients.find_by_email(email)
            if client is None:
                raise NotFoundException(ENTITY, "email", email)
            return client

    def find_page(
        self,
        name: Optional[str] = None,
        email: Optional[str] = None,
        cpf: Optional[str] = None,
        birth_start: Optional[date] = None,
        birth_end: Optional[date] = None,
        page: Optional[int] = None,
        lines_per_page: Optional[int] = None,
        direction: Optional[str] = None,
        order_by: Optional[str] = None,
    ) -> Page[Client]:
        """
        List clients matching every given filter.

        Name and email match by substring, CPF exactly. A CPF filter must
        still be a valid CPF and a birth period cannot reach into the future.
        """
        with self._unit_of_work("find clients", read_only=True):
            criteria = ClientFilter(
                name=optional_text(name),
                email=optional_token(email),
                cpf=None if is_blank(cpf) else validate_cpf(cpf),
                birth_start=birth_start,
                birth_end=birth_end,
            )
            validate_period("birth", criteria.birth_start, criteria.birth_end, self._today())

            request = self._page_request(
                self.catalog.clients, page, lines_per_page, direction, order_by
            )
            return self.clients.find_page(criteria, request)

    def update_by_cpf(
        self,
        cpf: Optional[str],
        name: Optional[str],
        email: Optional[str],
        birth_date: Optional[date],
    ) -> Client:
        """
        Replace the name, email and birth date of the client owning ``cpf``.

        Raises:
            NotFoundException: If no client has this CPF
            AlreadyExistsException: If the email belongs to another client
        """
        with self._unit_of_work("update client"):
            cpf = validate_cpf(cpf)
            if not self.clients.exists_by_cpf(cpf):
                raise NotFoundException(ENTITY, "cpf", cpf)
            name = validate_name(name)
            email = validate_email(email)
            if self.clients.exists_by_email(email, exclude_cpf=cpf):
                raise AlreadyExistsException(ENTITY, "email", email)
            birth_date = validate_birth_date(birth_date, self._today())

            try:
                self.clients.update_by_cpf(cpf, name=name, email=email, birth_date=birth_date)
            except IntegrityError:
                self.db.rollback()
                if self.clients.exists_by_email(email, exclude_cpf=cpf):
                    raise AlreadyExistsException(ENTITY, "email", email)
                raise
            client = self.clients.find_by_cpf(cpf)

        logger.info("client_updated", client_id=client.id)
        return client

    def delete_by_cpf(self, cpf: Optional[str]) -> None:
        """
        Remove a client that has no orders.

        Raises:
            NotFoundException: If no client has this CPF
            EntityInUseException: If the client still has orders
        """
        with self._unit_of_work("delete client"):
            cpf = validate_cpf(cpf)
            client = self.clients.find_by_cpf(cpf)
            if client is None:
                raise NotFoundException(ENTITY, "cpf", cpf)
            if self.orders.exists_by_client_id(client.id):
                raise EntityInUseException(ENTITY, "cpf", cpf, referenced_by="orders")
            self.clients.delete_by_cpf(cpf)

        logger.info("client_deleted", client_id=client.id)
