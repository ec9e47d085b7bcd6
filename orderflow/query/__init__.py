"""
Dynamic filtered pagination.

The catalog holds the sortable columns of every listing, the builder turns
optional filters into one shared predicate set, and the executor runs the
count and page statements.
"""

from .builder import Direction, PagedQuery, PageRequest, QueryBuilder
from .catalog import CATALOG, QueryCatalog, SortSpec, build_catalog
from .executor import PageExecutor

__all__ = [
    "CATALOG",
    "Direction",
    "PageExecutor",
    "PageRequest",
    "PagedQuery",
    "QueryBuilder",
    "QueryCatalog",
    "SortSpec",
    "build_catalog",
]
