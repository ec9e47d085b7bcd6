"""
Order use cases.

Orders are created PENDING and afterwards only change status through the
order status machine. They are never deleted.
"""

from datetime import datetime
from typing import Optional, Union
from uuid import UUID

import structlog
from sqlalchemy.orm import Session

from ..domain import order_status
from ..domain.entities import ClientSalesReport, Order, OrderDetails, Page
from ..domain.exceptions import (
    InvalidStatusTransitionException,
    NotFoundException,
    ValidationException,
)
from ..domain.filters import OrderDetailsFilter, OrderFilter, SalesReportFilter
from ..query import CATALOG, QueryCatalog
from ..repositories import ClientRepository, OrderRepository
from ..validators import (
    is_blank,
    parse_int_id,
    parse_status,
    parse_uuid,
    validate_period,
    validate_range,
)
from .base import BaseService

logger = structlog.get_logger(__name__)

ENTITY = "Order"

OrderId = Union[UUID, str, None]
ClientId = Union[int, str, None]


class OrderService(BaseService):
    """Creation, lookup, status changes and reporting for orders."""

    def __init__(self, db: Session, catalog: QueryCatalog = CATALOG):
        super().__init__(db, catalog)
        self.orders = OrderRepository(db, catalog)
        self.clients = ClientRepository(db, catalog)

    def _existing_client_id(self, client_id: ClientId) -> int:
        client_id = parse_int_id("client_id", client_id)
        if not self.clients.exists_by_id(client_id):
            raise NotFoundException("Client", "id", client_id)
        return client_id

    def _existing_order_id(self, order_id: OrderId) -> UUID:
        order_id = parse_uuid("order_id", order_id)
        if not self.orders.exists_by_id(order_id):
            raise NotFoundException(ENTITY, "id", order_id)
        return order_id

    def save(self, client_id: ClientId, status: Optional[str]) -> Order:
        """
        Place a new order for an existing client.

        The order date is stamped here. The requested status must name the
        initial state.

        Raises:
            NotFoundException: If the client does not exist
            ValidationException: If the status is unknown or not PENDING
        """
        with self._unit_of_work("save order"):
            client_id = self._existing_client_id(client_id)
            status = parse_status(status)
            if not order_status.is_valid_initial(status):
                raise ValidationException(
                    "status", status.value, f"new orders must be {order_status.INITIAL_STATE.value}"
                )

            order = self.orders.insert(
                Order(client_id=client_id, status=status, order_date=self._now())
            )

        logger.info("order_saved", order_id=str(order.id), client_id=client_id)
        return order

    def find_by_id(self, order_id: OrderId) -> Order:
        with self._unit_of_work("find order", read_only=True):
            order_id = parse_uuid("order_id", order_id)
            order = self.orders.find_by_id(order_id)
            if order is None:
                raise NotFoundException(ENTITY, "id", order_id)
            return order

    def update_status(self, order_id: OrderId, status: Optional[str]) -> Order:
        """
        Move an order out of PENDING.

        The stored status is checked against the status machine first; the
        write itself only applies while the order is still PENDING, so a
        concurrent change makes this call fail instead of overwriting it.

        Raises:
            NotFoundException: If the order does not exist
            ValidationException: If the status name is unknown
            InvalidStatusTransitionException: If the transition is not allowed
        """
        with self._unit_of_work("update order status"):
            order_id = self._existing_order_id(order_id)
            target = parse_status(status)
            order_status.validate_target(target)
            current = self.orders.find_status(order_id)
            order_status.validate_transition(from_status=current, to_status=target)

            if self.orders.update_status_if_pending(order_id, target) == 0:
                current = self.orders.find_status(order_id)
                raise InvalidStatusTransitionException(
                    current=current.value if current else None, target=target.value
                )
            order = self.orders.find_by_id(order_id)

        logger.info("order_status_updated", order_id=str(order_id), status=target.value)
        return order

    def find_page(
        self,
        order_id: OrderId = None,
        client_id: ClientId = None,
        date_start: Optional[datetime] = None,
        date_end: Optional[datetime] = None,
        status: Optional[str] = None,
        page: Optional[int] = None,
        lines_per_page: Optional[int] = None,
        direction: Optional[str] = None,
        order_by: Optional[str] = None,
    ) -> Page[Order]:
        with self._unit_of_work("find orders", read_only=True):
            order_id = None if is_blank(order_id) else self._existing_order_id(order_id)
            client_id = None if is_blank(client_id) else self._existing_client_id(client_id)
            date_start, date_end = validate_period("date", date_start, date_end, self._now())
            criteria = OrderFilter(
                order_id=order_id,
                client_id=client_id,
                date_start=date_start,
                date_end=date_end,
                status=None if is_blank(status) else parse_status(status),
            )

            request = self._page_request(
                self.catalog.orders, page, lines_per_page, direction, order_by
            )
            return self.orders.find_page(criteria, request)

    def find_details_page(
        self,
        order_id: OrderId = None,
        client_id: ClientId = None,
        date_start: Optional[datetime] = None,
        date_end: Optional[datetime] = None,
        min_quantity: Optional[int] = None,
        max_quantity: Optional[int] = None,
        status: Optional[str] = None,
        page: Optional[int] = None,
        lines_per_page: Optional[int] = None,
        direction: Optional[str] = None,
        order_by: Optional[str] = None,
    ) -> Page[OrderDetails]:
        """List order lines joined with their order and client."""
        with self._unit_of_work("find order details", read_only=True):
            min_quantity, max_quantity = validate_range(
                "quantity", min_quantity, max_quantity, whole=True
            )
            order_id = None if is_blank(order_id) else self._existing_order_id(order_id)
            client_id = None if is_blank(client_id) else self._existing_client_id(client_id)
            date_start, date_end = validate_period("date", date_start, date_end, self._now())
            criteria = OrderDetailsFilter(
                order_id=order_id,
                client_id=client_id,
                date_start=date_start,
                date_end=date_end,
                min_quantity=min_quantity,
                max_quantity=max_quantity,
                status=None if is_blank(status) else parse_status(status),
            )

            request = self._page_request(
                self.catalog.order_details, page, lines_per_page, direction, order_by
            )
            return self.orders.find_details_page(criteria, request)

    def find_sales_report(
        self,
        date_start: Optional[datetime] = None,
        date_end: Optional[datetime] = None,
        min_orders: Optional[int] = None,
        max_orders: Optional[int] = None,
        status: Optional[str] = None,
        page: Optional[int] = None,
        lines_per_page: Optional[int] = None,
        direction: Optional[str] = None,
        order_by: Optional[str] = None,
    ) -> Page[ClientSalesReport]:
        """
        Order count and amount per client.

        Date and status filters narrow the orders that are aggregated;
        ``min_orders``/``max_orders`` then filter clients by their order count.
        """
        with self._unit_of_work("find client sales report", read_only=True):
            date_start, date_end = validate_period("date", date_start, date_end, self._now())
            min_orders, max_orders = validate_range("orders", min_orders, max_orders, whole=True)
            criteria = SalesReportFilter(
                date_start=date_start,
                date_end=date_end,
                min_orders=min_orders,
                max_orders=max_orders,
                status=None if is_blank(status) else parse_status(status),
            )

            request = self._page_request(
                self.catalog.sales_report, page, lines_per_page, direction, order_by
            )
            return self.orders.find_sales_report_page(criteria, request)
