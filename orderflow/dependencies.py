"""
Shared dependencies for the application.

Provides request-scoped service factories used across routers.
"""

from fastapi import Depends
from sqlalchemy.orm import Session

from .database import get_db
from .query import CATALOG, QueryCatalog
from .services import ClientService, OrderItemService, OrderService, ProductService


def get_catalog() -> QueryCatalog:
    """Listing catalog, carrying the configured default page size."""
    return CATALOG


def get_client_service(
    db: Session = Depends(get_db), catalog: QueryCatalog = Depends(get_catalog)
) -> ClientService:
    return ClientService(db, catalog)


def get_product_service(
    db: Session = Depends(get_db), catalog: QueryCatalog = Depends(get_catalog)
) -> ProductService:
    return ProductService(db, catalog)


def get_order_service(
    db: Session = Depends(get_db), catalog: QueryCatalog = Depends(get_catalog)
) -> OrderService:
    return OrderService(db, catalog)


def get_order_item_service(
    db: Session = Depends(get_db), catalog: QueryCatalog = Depends(get_catalog)
) -> OrderItemService:
    return OrderItemService(db, catalog)
