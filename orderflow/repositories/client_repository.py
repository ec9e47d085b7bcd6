"""
Client persistence.
"""

import logging
from datetime import date
from typing import Optional

from sqlalchemy import select

from ..domain.entities import Client, Page
from ..domain.filters import ClientFilter
from ..models import ClientRecord
from ..query import PageRequest, QueryBuilder
from ..query.executor import to_date, to_int
from .base import SqlAlchemyRepository

logger = logging.getLogger(__name__)


class ClientRepository(SqlAlchemyRepository):
    """SQLAlchemy repository for clients, keyed externally by CPF."""

    def exists_by_id(self, client_id: int) -> bool:
        return self._exists(ClientRecord.id, ClientRecord.id == client_id)

    def exists_by_cpf(self, cpf: str) -> bool:
        return self._exists(ClientRecord.id, ClientRecord.cpf == cpf)

    def exists_by_email(self, email: str, exclude_cpf: Optional[str] = None) -> bool:
        """
        Check whether an email is registered.

        Args:
            email: Normalized email address
            exclude_cpf: Ignore the client owning this CPF (used on update)
        """
        criteria = [ClientRecord.email == email]
        if exclude_cpf is not None:
            criteria.append(ClientRecord.cpf != exclude_cpf)
        return self._exists(ClientRecord.id, *criteria)

    def insert(self, client: Client) -> Client:
        record = ClientRecord(
            name=client.name,
            email=client.email,
            cpf=client.cpf,
            birth_date=client.birth_date,
        )
        self.db.add(record)
        self.db.flush()
        logger.info(f"Inserted client {record.id}")
        return self._map_to_entity(record)

    def find_by_cpf(self, cpf: str) -> Optional[Client]:
        record = self.db.query(ClientRecord).filter(ClientRecord.cpf == cpf).first()
        return self._map_to_entity(record) if record else None

    def find_by_email(self, email: str) -> Optional[Client]:
        record = self.db.query(ClientRecord).filter(ClientRecord.email == email).first()
        return self._map_to_entity(record) if record else None

    def find_page(self, criteria: ClientFilter, request: PageRequest) -> Page[Client]:
        builder = (
            QueryBuilder(select(ClientRecord))
            .contains(ClientRecord.name, criteria.name)
            .contains(ClientRecord.email, criteria.email)
            .equals(ClientRecord.cpf, criteria.cpf)
            .at_least(ClientRecord.birth_date, criteria.birth_start)
            .at_most(ClientRecord.birth_date, criteria.birth_end)
        )
        query = builder.build(self.catalog.clients, request)
        return self.executor.execute(query, lambda row: self._map_to_entity(row[0]))

    def update_by_cpf(self, cpf: str, name: str, email: str, birth_date: date) -> int:
        return (
            self.db.query(ClientRecord)
            .filter(ClientRecord.cpf == cpf)
            .update(
                {
                    ClientRecord.name: name,
                    ClientRecord.email: email,
                    ClientRecord.birth_date: birth_date,
                },
                synchronize_session="fetch",
            )
        )

    def delete_by_cpf(self, cpf: str) -> int:
        return (
            self.db.query(ClientRecord)
            .filter(ClientRecord.cpf == cpf)
            .delete(synchronize_session=False)
        )

    @staticmethod
    def _map_to_entity(record: ClientRecord) -> Client:
        return Client(
            id=to_int(record.id),
            name=record.name,
            email=record.email,
            cpf=record.cpf,
            birth_date=to_date(record.birth_date),
        )
