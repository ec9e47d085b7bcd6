"""
Unit of work and paging helpers shared by the services.
"""

from contextlib import contextmanager
from datetime import date, datetime, timezone
from typing import Iterator, Optional

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..domain.exceptions import BusinessRuleViolation, PersistenceFailure
from ..query import CATALOG, PageRequest, QueryCatalog, SortSpec

logger = structlog.get_logger(__name__)


class BaseService:
    """Base class wiring a session and the listing catalog into a service."""

    def __init__(self, db: Session, catalog: QueryCatalog = CATALOG):
        self.db = db
        self.catalog = catalog

    @contextmanager
    def _unit_of_work(self, operation: str, read_only: bool = False) -> Iterator[None]:
        """
        Run one use case as a single transaction.

        Commits on success unless ``read_only``. Any failure rolls back;
        business errors propagate unchanged, storage errors surface as
        PersistenceFailure with the original error as the cause.

        Args:
            operation: Short description used in the failure message ("save client")
            read_only: Skip the commit
        """
        try:
            yield
            if not read_only:
                self.db.commit()
        except BusinessRuleViolation:
            self.db.rollback()
            raise
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("persistence_failure", operation=operation, error=str(e))
            raise PersistenceFailure(operation) from e

    def _page_request(
        self,
        sort: SortSpec,
        page: Optional[int],
        lines_per_page: Optional[int],
        direction: Optional[str],
        order_by: Optional[str],
    ) -> PageRequest:
        return PageRequest.resolve(
            sort,
            page=page,
            lines_per_page=lines_per_page,
            direction=direction,
            order_by=order_by,
            default_lines_per_page=self.catalog.default_lines_per_page,
        )

    @staticmethod
    def _now() -> datetime:
        return datetime.now(timezone.utc).replace(tzinfo=None)

    def _today(self) -> date:
        return self._now().date()
