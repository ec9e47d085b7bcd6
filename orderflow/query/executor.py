"""
Page execution and row conversion.

Runs the count and page statements of a PagedQuery and maps each row into a
domain entity. Conversion helpers accept the representations database drivers
commonly return and raise TypeError for anything else: a mismatch there is a
programming error, not a business failure.
"""

import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Callable, TypeVar
from uuid import UUID

from sqlalchemy.engine import Row
from sqlalchemy.orm import Session

from ..domain.entities import Page
from .builder import PagedQuery

logger = logging.getLogger(__name__)

T = TypeVar("T")


def to_uuid(value: Any) -> UUID:
    if isinstance(value, UUID):
        return value
    if isinstance(value, str):
        return UUID(value)
    if isinstance(value, (bytes, bytearray)) and len(value) == 16:
        return UUID(bytes=bytes(value))
    raise TypeError(f"Cannot convert {type(value).__name__} to UUID")


def to_datetime(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        return datetime.fromisoformat(value)
    raise TypeError(f"Cannot convert {type(value).__name__} to datetime")


def to_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return date.fromisoformat(value)
    raise TypeError(f"Cannot convert {type(value).__name__} to date")


def to_float(value: Any) -> float:
    if isinstance(value, bool):
        raise TypeError("Cannot convert bool to float")
    if isinstance(value, (int, float, Decimal)):
        return float(value)
    raise TypeError(f"Cannot convert {type(value).__name__} to float")


def to_int(value: Any) -> int:
    if isinstance(value, bool):
        raise TypeError("Cannot convert bool to int")
    if isinstance(value, int):
        return value
    if isinstance(value, Decimal) and value == value.to_integral_value():
        return int(value)
    raise TypeError(f"Cannot convert {type(value).__name__} to int")


class PageExecutor:
    """Runs paged statements against a session."""

    def __init__(self, db: Session):
        self.db = db

    def execute(self, query: PagedQuery, mapper: Callable[[Row], T]) -> Page[T]:
        """
        Run the count statement, then the page statement when anything matches.

        Args:
            query: Page and count statements built from one predicate set
            mapper: Converts one result row into a domain entity

        Returns:
            Page with the unpaged total and the mapped rows of this page
        """
        total = to_int(self.db.execute(query.count).scalar_one())
        if total == 0:
            return Page(total=0, items=[])

        rows = self.db.execute(query.fetch).all()
        logger.debug(f"Fetched {len(rows)} of {total} rows")
        return Page(total=total, items=[mapper(row) for row in rows])
