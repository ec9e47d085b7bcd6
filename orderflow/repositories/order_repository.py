"""
Order persistence, including the order reporting queries.
"""

import logging
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.engine import Row

from ..domain.entities import (
    ClientSalesReport,
    Order,
    OrderDetails,
    OrderStatus,
    Page,
)
from ..domain.filters import OrderDetailsFilter, OrderFilter, SalesReportFilter
from ..domain.order_status import INITIAL_STATE
from ..models import ClientRecord, OrderItemRecord, OrderRecord
from ..query import PageRequest, QueryBuilder
from ..query.catalog import TOTAL_AMOUNT, TOTAL_ORDERS
from ..query.executor import to_datetime, to_float, to_int, to_uuid
from .base import SqlAlchemyRepository

logger = logging.getLogger(__name__)


class OrderRepository(SqlAlchemyRepository):
    """SQLAlchemy repository for orders."""

    def exists_by_id(self, order_id: UUID) -> bool:
        return self._exists(OrderRecord.id, OrderRecord.id == order_id)

    def exists_by_client_id(self, client_id: int) -> bool:
        return self._exists(OrderRecord.id, OrderRecord.client_id == client_id)

    def insert(self, order: Order) -> Order:
        record = OrderRecord(
            id=order.id or uuid4(),
            client_id=order.client_id,
            order_date=order.order_date,
            status=OrderStatus(order.status).value,
        )
        self.db.add(record)
        self.db.flush()
        logger.info(f"Inserted order {record.id} for client {record.client_id}")
        return self._map_to_entity(record)

    def find_by_id(self, order_id: UUID) -> Optional[Order]:
        record = self.db.query(OrderRecord).filter(OrderRecord.id == order_id).first()
        return self._map_to_entity(record) if record else None

    def find_status(self, order_id: UUID) -> Optional[OrderStatus]:
        status = self.db.query(OrderRecord.status).filter(OrderRecord.id == order_id).scalar()
        return OrderStatus(status) if status is not None else None

    def update_status_if_pending(self, order_id: UUID, status: OrderStatus) -> int:
        """
        Change the status only while the stored status is still PENDING.

        The check and the write happen in one UPDATE statement, so concurrent
        callers cannot both leave the initial state.

        Returns:
            Number of rows updated (0 or 1)
        """
        return (
            self.db.query(OrderRecord)
            .filter(OrderRecord.id == order_id, OrderRecord.status == INITIAL_STATE.value)
            .update({OrderRecord.status: status.value}, synchronize_session="fetch")
        )

    def find_page(self, criteria: OrderFilter, request: PageRequest) -> Page[Order]:
        builder = (
            QueryBuilder(select(OrderRecord))
            .equals(OrderRecord.id, criteria.order_id)
            .equals(OrderRecord.client_id, criteria.client_id)
            .at_least(OrderRecord.order_date, criteria.date_start)
            .at_most(OrderRecord.order_date, criteria.date_end)
            .equals(OrderRecord.status, criteria.status.value if criteria.status else None)
        )
        query = builder.build(self.catalog.orders, request)
        return self.executor.execute(query, lambda row: self._map_to_entity(row[0]))

    def find_details_page(
        self, criteria: OrderDetailsFilter, request: PageRequest
    ) -> Page[OrderDetails]:
        """Order lines joined with their order and client."""
        statement = (
            select(
                OrderRecord.id.label("order_id"),
                OrderRecord.order_date,
                OrderRecord.status,
                ClientRecord.id.label("client_id"),
                ClientRecord.name.label("client_name"),
                ClientRecord.email.label("client_email"),
                OrderItemRecord.product_id,
                OrderItemRecord.quantity,
                OrderItemRecord.price,
            )
            .select_from(OrderRecord)
            .join(ClientRecord, OrderRecord.client_id == ClientRecord.id)
            .join(OrderItemRecord, OrderItemRecord.order_id == OrderRecord.id)
        )
        builder = (
            QueryBuilder(statement)
            .equals(OrderRecord.id, criteria.order_id)
            .equals(ClientRecord.id, criteria.client_id)
            .at_least(OrderRecord.order_date, criteria.date_start)
            .at_most(OrderRecord.order_date, criteria.date_end)
            .at_least(OrderItemRecord.quantity, criteria.min_quantity)
            .at_most(OrderItemRecord.quantity, criteria.max_quantity)
            .equals(OrderRecord.status, criteria.status.value if criteria.status else None)
        )
        query = builder.build(self.catalog.order_details, request)
        return self.executor.execute(query, self._map_details)

    def find_sales_report_page(
        self, criteria: SalesReportFilter, request: PageRequest
    ) -> Page[ClientSalesReport]:
        """Order count and amount per client, filtered on the aggregated order count."""
        statement = (
            select(
                ClientRecord.id.label("client_id"),
                ClientRecord.name.label("client_name"),
                TOTAL_ORDERS.label("total_orders"),
                TOTAL_AMOUNT.label("total_amount"),
            )
            .select_from(ClientRecord)
            .join(OrderRecord, OrderRecord.client_id == ClientRecord.id)
            .outerjoin(OrderItemRecord, OrderItemRecord.order_id == OrderRecord.id)
        )
        builder = (
            QueryBuilder(statement)
            .at_least(OrderRecord.order_date, criteria.date_start)
            .at_most(OrderRecord.order_date, criteria.date_end)
            .equals(OrderRecord.status, criteria.status.value if criteria.status else None)
            .group_by(ClientRecord.id, ClientRecord.name)
            .having_at_least(TOTAL_ORDERS, criteria.min_orders)
            .having_at_most(TOTAL_ORDERS, criteria.max_orders)
        )
        query = builder.build(self.catalog.sales_report, request)
        return self.executor.execute(query, self._map_sales_report)

    @staticmethod
    def _map_to_entity(record: OrderRecord) -> Order:
        return Order(
            id=to_uuid(record.id),
            client_id=to_int(record.client_id),
            order_date=to_datetime(record.order_date),
            status=OrderStatus(record.status),
        )

    @staticmethod
    def _map_details(row: Row) -> OrderDetails:
        quantity = to_int(row.quantity)
        price = to_float(row.price)
        return OrderDetails(
            order_id=to_uuid(row.order_id),
            order_date=to_datetime(row.order_date),
            status=OrderStatus(row.status),
            client_id=to_int(row.client_id),
            client_name=row.client_name,
            client_email=row.client_email,
            product_id=to_uuid(row.product_id),
            quantity=quantity,
            price=price,
            total_amount=round(price * quantity, 2),
        )

    @staticmethod
    def _map_sales_report(row: Row) -> ClientSalesReport:
        return ClientSalesReport(
            client_id=to_int(row.client_id),
            client_name=row.client_name,
            total_orders=to_int(row.total_orders),
            total_amount=round(to_float(row.total_amount), 2),
        )
