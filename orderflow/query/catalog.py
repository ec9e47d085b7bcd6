"""
Sortable column allow-lists for every paged listing.

User-supplied ``order_by`` values are only ever used as keys into these
mappings; the SQL column comes from here, never from the request.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional

from sqlalchemy import distinct, func
from sqlalchemy.sql.elements import ColumnElement

from ..config import settings
from ..models import ClientRecord, OrderItemRecord, OrderRecord, ProductRecord

# Aggregates shared by the sales report select list and its sort keys
TOTAL_ORDERS = func.count(distinct(OrderRecord.id))
TOTAL_AMOUNT = func.coalesce(func.sum(OrderItemRecord.price * OrderItemRecord.quantity), 0.0)


@dataclass(frozen=True, eq=False)
class SortSpec:
    """
    Allowed sort keys of one listing.

    Attributes:
        columns: Read-only mapping of sort key to SQL expression
        default: Key used when the requested key is blank or unknown
        tiebreaker: Unique column appended to every ordering
    """

    columns: Mapping[str, ColumnElement]
    default: str
    tiebreaker: ColumnElement

    def __post_init__(self):
        if self.default not in self.columns:
            raise ValueError(f"Default sort key '{self.default}' is not an allowed column")
        object.__setattr__(self, "columns", MappingProxyType(dict(self.columns)))

    def resolve(self, order_by: Optional[str]) -> str:
        key = (order_by or "").strip().lower()
        return key if key in self.columns else self.default

    def column(self, key: str) -> ColumnElement:
        try:
            return self.columns[key]
        except KeyError:
            raise LookupError(f"Sort key '{key}' has no column in this listing") from None


@dataclass(frozen=True, eq=False)
class QueryCatalog:
    """Immutable set of listing sort specs, built once per process."""

    clients: SortSpec
    products: SortSpec
    orders: SortSpec
    order_items: SortSpec
    order_details: SortSpec
    order_item_details: SortSpec
    sales_report: SortSpec
    default_lines_per_page: int = field(default=10)


def build_catalog(default_lines_per_page: Optional[int] = None) -> QueryCatalog:
    """
    Build the listing catalog.

    Args:
        default_lines_per_page: Page size used when a request gives none or a
            non-positive one. Defaults to the configured value.
    """
    if default_lines_per_page is None:
        default_lines_per_page = settings.DEFAULT_LINES_PER_PAGE
    if default_lines_per_page <= 0:
        raise ValueError("default_lines_per_page must be greater than zero")

    return QueryCatalog(
        clients=SortSpec(
            columns={
                "name": ClientRecord.name,
                "email": ClientRecord.email,
                "cpf": ClientRecord.cpf,
                "birth_date": ClientRecord.birth_date,
            },
            default="name",
            tiebreaker=ClientRecord.id,
        ),
        products=SortSpec(
            columns={
                "name": ProductRecord.name,
                "sku": ProductRecord.sku,
                "price": ProductRecord.price,
                "expiration_date": ProductRecord.expiration_date,
            },
            default="name",
            tiebreaker=ProductRecord.id,
        ),
        orders=SortSpec(
            columns={
                "id": OrderRecord.id,
                "client_id": OrderRecord.client_id,
                "order_date": OrderRecord.order_date,
                "status": OrderRecord.status,
            },
            default="order_date",
            tiebreaker=OrderRecord.id,
        ),
        order_items=SortSpec(
            columns={
                "id": OrderItemRecord.id,
                "order_id": OrderItemRecord.order_id,
                "product_id": OrderItemRecord.product_id,
                "quantity": OrderItemRecord.quantity,
                "price": OrderItemRecord.price,
            },
            default="order_id",
            tiebreaker=OrderItemRecord.id,
        ),
        order_details=SortSpec(
            columns={
                "order_date": OrderRecord.order_date,
                "order_status": OrderRecord.status,
                "client_id": ClientRecord.id,
                "client_name": ClientRecord.name,
                "item_quantity": OrderItemRecord.quantity,
                "item_price": OrderItemRecord.price,
            },
            default="order_date",
            tiebreaker=OrderItemRecord.id,
        ),
        order_item_details=SortSpec(
            columns={
                "quantity": OrderItemRecord.quantity,
                "price": OrderItemRecord.price,
                "product_price": ProductRecord.price,
                "product_name": ProductRecord.name,
                "order_date": OrderRecord.order_date,
                "client_name": ClientRecord.name,
            },
            default="quantity",
            tiebreaker=OrderItemRecord.id,
        ),
        sales_report=SortSpec(
            columns={
                "client_id": ClientRecord.id,
                "client_name": ClientRecord.name,
                "total_orders": TOTAL_ORDERS,
                "total_amount": TOTAL_AMOUNT,
            },
            default="total_orders",
            tiebreaker=ClientRecord.id,
        ),
        default_lines_per_page=default_lines_per_page,
    )


CATALOG = build_catalog()
