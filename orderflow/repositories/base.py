"""
Shared plumbing for the SQLAlchemy repositories.
"""

from typing import Any

from sqlalchemy.orm import Session

from ..query import CATALOG, PageExecutor, QueryCatalog


class SqlAlchemyRepository:
    """Base repository holding the session, the listing catalog and a page executor."""

    def __init__(self, db: Session, catalog: QueryCatalog = CATALOG):
        """
        Initialize repository.

        Args:
            db: SQLAlchemy database session
            catalog: Sortable column allow-lists for the paged listings
        """
        self.db = db
        self.catalog = catalog
        self.executor = PageExecutor(db)

    def _exists(self, column: Any, *criteria: Any) -> bool:
        return self.db.query(column).filter(*criteria).first() is not None
