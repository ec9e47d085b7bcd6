"""
Filtered, sorted and paged statement builder.

A QueryBuilder collects predicate fragments for the filters that are actually
present and produces two statements from the same predicate list: the page
statement (sorted, limited, offset) and the count statement (no paging).
All values travel as bound parameters.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional

from sqlalchemy import and_, func, select
from sqlalchemy.sql import Select
from sqlalchemy.sql.elements import ColumnElement

from .catalog import SortSpec


class Direction(str, Enum):
    """Sort direction."""

    ASC = "asc"
    DESC = "desc"

    @classmethod
    def parse(cls, value: Optional[str]) -> "Direction":
        """Case-insensitive parse; anything other than desc sorts ascending."""
        if value and value.strip().lower() == cls.DESC.value:
            return cls.DESC
        return cls.ASC


@dataclass(frozen=True)
class PageRequest:
    """
    Resolved paging and sorting parameters.

    Attributes:
        page: Zero-based page index, never negative
        lines_per_page: Page size, always positive
        direction: Sort direction
        order_by: Allow-listed sort key
    """

    page: int
    lines_per_page: int
    direction: Direction
    order_by: str

    @property
    def offset(self) -> int:
        return self.page * self.lines_per_page

    @classmethod
    def resolve(
        cls,
        sort: SortSpec,
        page: Optional[int] = None,
        lines_per_page: Optional[int] = None,
        direction: Optional[str] = None,
        order_by: Optional[str] = None,
        default_lines_per_page: int = 10,
    ) -> "PageRequest":
        """
        Clamp raw request values into a usable page request.

        Negative or missing pages become 0, non-positive or missing page sizes
        fall back to the default, and unknown sort keys fall back to the
        listing's default key.
        """
        return cls(
            page=page if page is not None and page > 0 else 0,
            lines_per_page=(
                lines_per_page
                if lines_per_page is not None and lines_per_page > 0
                else default_lines_per_page
            ),
            direction=Direction.parse(direction),
            order_by=sort.resolve(order_by),
        )


@dataclass(frozen=True)
class PagedQuery:
    """Page statement and count statement sharing one predicate set."""

    fetch: Select
    count: Select


def _present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return True


class QueryBuilder:
    """
    Accumulates optional filter fragments over a base SELECT.

    Each filter method ignores absent (None or blank) values and returns the
    builder, so filters can be chained unconditionally.
    """

    def __init__(self, statement: Select):
        self._statement = statement
        self._where: List[ColumnElement] = []
        self._having: List[ColumnElement] = []
        self._group_by: List[ColumnElement] = []

    @property
    def predicates(self) -> List[ColumnElement]:
        return list(self._where)

    @property
    def having_predicates(self) -> List[ColumnElement]:
        return list(self._having)

    def equals(self, column: ColumnElement, value: Any) -> "QueryBuilder":
        if _present(value):
            self._where.append(column == value)
        return self

    def contains(self, column: ColumnElement, value: Optional[str]) -> "QueryBuilder":
        """Case-insensitive substring match; LIKE wildcards in the value are escaped."""
        if _present(value):
            self._where.append(func.lower(column).contains(value.lower(), autoescape=True))
        return self

    def at_least(self, column: ColumnElement, value: Any) -> "QueryBuilder":
        if _present(value):
            self._where.append(column >= value)
        return self

    def at_most(self, column: ColumnElement, value: Any) -> "QueryBuilder":
        if _present(value):
            self._where.append(column <= value)
        return self

    def group_by(self, *columns: ColumnElement) -> "QueryBuilder":
        self._group_by.extend(columns)
        return self

    def having_at_least(self, expression: ColumnElement, value: Any) -> "QueryBuilder":
        if _present(value):
            self._having.append(expression >= value)
        return self

    def having_at_most(self, expression: ColumnElement, value: Any) -> "QueryBuilder":
        if _present(value):
            self._having.append(expression <= value)
        return self

    def filtered(self) -> Select:
        """Base statement with every collected WHERE, GROUP BY and HAVING clause."""
        statement = self._statement
        if self._where:
            statement = statement.where(and_(*self._where))
        if self._group_by:
            statement = statement.group_by(*self._group_by)
        if self._having:
            statement = statement.having(and_(*self._having))
        return statement

    def build(self, sort: SortSpec, request: PageRequest) -> PagedQuery:
        """
        Produce the page and count statements.

        The count wraps the filtered statement in a subquery, so grouped
        listings count groups rather than joined rows.

        Raises:
            LookupError: If the request's sort key has no column in ``sort``
        """
        filtered = self.filtered()

        column = sort.column(request.order_by)
        ordering = column.desc() if request.direction is Direction.DESC else column.asc()
        fetch = (
            filtered.order_by(ordering, sort.tiebreaker.asc())
            .limit(request.lines_per_page)
            .offset(request.offset)
        )
        count = select(func.count()).select_from(filtered.subquery())

        return PagedQuery(fetch=fetch, count=count)
