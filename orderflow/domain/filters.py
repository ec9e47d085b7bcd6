"""
Normalized filter criteria for the paged listings.

Services build these from raw request parameters after validation; every
field is optional and ``None`` means "no constraint".
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional
from uuid import UUID

from .entities import OrderStatus


@dataclass(frozen=True)
class ClientFilter:
    name: Optional[str] = None
    email: Optional[str] = None
    cpf: Optional[str] = None
    birth_start: Optional[date] = None
    birth_end: Optional[date] = None


@dataclass(frozen=True)
class ProductFilter:
    name: Optional[str] = None
    sku: Optional[str] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None


@dataclass(frozen=True)
class OrderFilter:
    order_id: Optional[UUID] = None
    client_id: Optional[int] = None
    date_start: Optional[datetime] = None
    date_end: Optional[datetime] = None
    status: Optional[OrderStatus] = None


@dataclass(frozen=True)
class OrderItemFilter:
    item_id: Optional[UUID] = None
    order_id: Optional[UUID] = None
    product_id: Optional[UUID] = None
    min_quantity: Optional[int] = None
    max_quantity: Optional[int] = None


@dataclass(frozen=True)
class OrderDetailsFilter:
    order_id: Optional[UUID] = None
    client_id: Optional[int] = None
    date_start: Optional[datetime] = None
    date_end: Optional[datetime] = None
    min_quantity: Optional[int] = None
    max_quantity: Optional[int] = None
    status: Optional[OrderStatus] = None


@dataclass(frozen=True)
class OrderItemDetailsFilter:
    item_id: Optional[UUID] = None
    product_id: Optional[UUID] = None
    order_id: Optional[UUID] = None
    client_id: Optional[int] = None


@dataclass(frozen=True)
class SalesReportFilter:
    date_start: Optional[datetime] = None
    date_end: Optional[datetime] = None
    min_orders: Optional[int] = None
    max_orders: Optional[int] = None
    status: Optional[OrderStatus] = None
