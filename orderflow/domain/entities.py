"""
Domain entities for clients, products and orders.

Core business objects returned by the service layer. These entities are
framework-agnostic and carry no persistence state.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Generic, List, Optional, TypeVar
from uuid import UUID

T = TypeVar("T")


class OrderStatus(str, Enum):
    """Lifecycle states of an order."""

    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


@dataclass
class Client:
    """A registered client. The id is assigned by the store on insert."""

    name: str
    email: str
    cpf: str
    birth_date: date
    id: Optional[int] = None


@dataclass
class Product:
    """A product identified externally by its 8 character SKU."""

    name: str
    sku: str
    price: float
    expiration_date: date
    id: Optional[UUID] = None


@dataclass
class Order:
    """
    An order placed by a client.

    ``order_date`` is stamped when the order is saved and never changes.
    ``status`` only moves through the order status machine.
    """

    client_id: int
    status: OrderStatus
    order_date: Optional[datetime] = None
    id: Optional[UUID] = None


@dataclass
class OrderItem:
    """A line of an order. ``price`` is the product price when the line was saved."""

    order_id: UUID
    product_id: UUID
    quantity: int
    price: float
    id: Optional[UUID] = None


@dataclass
class Page(Generic[T]):
    """One page of a filtered listing plus the total number of matching rows."""

    total: int
    items: List[T] = field(default_factory=list)


@dataclass(frozen=True)
class OrderDetails:
    """An order line joined with its order and client."""

    order_id: UUID
    order_date: datetime
    status: OrderStatus
    client_id: int
    client_name: str
    client_email: str
    product_id: UUID
    quantity: int
    price: float
    total_amount: float


@dataclass(frozen=True)
class OrderItemDetails:
    """An order line with the full order, client and product it belongs to."""

    item: OrderItem
    order: Order
    client: Client
    product: Product


@dataclass(frozen=True)
class ClientSalesReport:
    """Aggregated order count and amount for a single client."""

    client_id: int
    client_name: str
    total_orders: int
    total_amount: float
