"""
Order item persistence.
"""

import logging
from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.engine import Row

from ..domain.entities import OrderItem, OrderItemDetails, Page
from ..domain.filters import OrderItemDetailsFilter, OrderItemFilter
from ..models import ClientRecord, OrderItemRecord, OrderRecord, ProductRecord
from ..query import PageRequest, QueryBuilder
from ..query.executor import to_float, to_int, to_uuid
from .base import SqlAlchemyRepository
from .client_repository import ClientRepository
from .order_repository import OrderRepository
from .product_repository import ProductRepository

logger = logging.getLogger(__name__)


class OrderItemRepository(SqlAlchemyRepository):
    """SQLAlchemy repository for order lines. Lines are written once and never updated."""

    def exists_by_product_id(self, product_id: UUID) -> bool:
        return self._exists(OrderItemRecord.id, OrderItemRecord.product_id == product_id)

    def insert(self, item: OrderItem) -> OrderItem:
        record = OrderItemRecord(
            id=item.id or uuid4(),
            order_id=item.order_id,
            product_id=item.product_id,
            quantity=item.quantity,
            price=item.price,
        )
        self.db.add(record)
        self.db.flush()
        logger.info(f"Inserted item {record.id} into order {record.order_id}")
        return self._map_to_entity(record)

    def find_page(self, criteria: OrderItemFilter, request: PageRequest) -> Page[OrderItem]:
        builder = (
            QueryBuilder(select(OrderItemRecord))
            .equals(OrderItemRecord.id, criteria.item_id)
            .equals(OrderItemRecord.order_id, criteria.order_id)
            .equals(OrderItemRecord.product_id, criteria.product_id)
            .at_least(OrderItemRecord.quantity, criteria.min_quantity)
            .at_most(OrderItemRecord.quantity, criteria.max_quantity)
        )
        query = builder.build(self.catalog.order_items, request)
        return self.executor.execute(query, lambda row: self._map_to_entity(row[0]))

    def find_details_page(
        self, criteria: OrderItemDetailsFilter, request: PageRequest
    ) -> Page[OrderItemDetails]:
        """Order lines with their order, client and product."""
        statement = (
            select(OrderItemRecord, OrderRecord, ClientRecord, ProductRecord)
            .select_from(OrderItemRecord)
            .join(OrderRecord, OrderItemRecord.order_id == OrderRecord.id)
            .join(ClientRecord, OrderRecord.client_id == ClientRecord.id)
            .join(ProductRecord, OrderItemRecord.product_id == ProductRecord.id)
        )
        builder = (
            QueryBuilder(statement)
            .equals(OrderItemRecord.id, criteria.item_id)
            .equals(ProductRecord.id, criteria.product_id)
            .equals(OrderRecord.id, criteria.order_id)
            .equals(ClientRecord.id, criteria.client_id)
        )
        query = builder.build(self.catalog.order_item_details, request)
        return self.executor.execute(query, self._map_details)

    @staticmethod
    def _map_to_entity(record: OrderItemRecord) -> OrderItem:
        return OrderItem(
            id=to_uuid(record.id),
            order_id=to_uuid(record.order_id),
            product_id=to_uuid(record.product_id),
            quantity=to_int(record.quantity),
            price=to_float(record.price),
        )

    @classmethod
    def _map_details(cls, row: Row) -> OrderItemDetails:
        item, order, client, product = row
        return OrderItemDetails(
            item=cls._map_to_entity(item),
            order=OrderRepository._map_to_entity(order),
            client=ClientRepository._map_to_entity(client),
            product=ProductRepository._map_to_entity(product),
        )
