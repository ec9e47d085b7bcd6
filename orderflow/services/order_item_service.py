"""
Order item use cases.
"""

from typing import Optional, Union
from uuid import UUID

import structlog
from sqlalchemy.orm import Session

from ..domain.entities import OrderItem, OrderItemDetails, Page
from ..domain.exceptions import NotFoundException
from ..domain.filters import OrderItemDetailsFilter, OrderItemFilter
from ..query import CATALOG, QueryCatalog
from ..repositories import (
    ClientRepository,
    OrderItemRepository,
    OrderRepository,
    ProductRepository,
)
from ..validators import is_blank, parse_int_id, parse_uuid, validate_quantity, validate_range
from .base import BaseService

logger = structlog.get_logger(__name__)

Identifier = Union[UUID, str, None]


class OrderItemService(BaseService):
    """Adds lines to orders and lists them."""

    def __init__(self, db: Session, catalog: QueryCatalog = CATALOG):
        super().__init__(db, catalog)
        self.items = OrderItemRepository(db, catalog)
        self.orders = OrderRepository(db, catalog)
        self.products = ProductRepository(db, catalog)
        self.clients = ClientRepository(db, catalog)

    def _existing_order_id(self, order_id: Identifier) -> UUID:
        order_id = parse_uuid("order_id", order_id)
        if not self.orders.exists_by_id(order_id):
            raise NotFoundException("Order", "id", order_id)
        return order_id

    def _existing_product_id(self, product_id: Identifier) -> UUID:
        product_id = parse_uuid("product_id", product_id)
        if not self.products.exists_by_id(product_id):
            raise NotFoundException("Product", "id", product_id)
        return product_id

    def save(
        self, order_id: Identifier, product_id: Identifier, quantity: Optional[int]
    ) -> OrderItem:
        """
        Add a line to an existing order.

        The line price is the product's price at this moment; later product
        price changes do not touch it.

        Raises:
            NotFoundException: If the order or the product does not exist
            ValidationException: If the quantity is missing or not positive
        """
        with self._unit_of_work("save order item"):
            order_id = self._existing_order_id(order_id)
            product_id = parse_uuid("product_id", product_id)
            product = self.products.find_by_id(product_id)
            if product is None:
                raise NotFoundException("Product", "id", product_id)
            quantity = validate_quantity(quantity)

            item = self.items.insert(
                OrderItem(
                    order_id=order_id,
                    product_id=product_id,
                    quantity=quantity,
                    price=product.price,
                )
            )

        logger.info(
            "order_item_saved",
            item_id=str(item.id),
            order_id=str(order_id),
            quantity=quantity,
        )
        return item

    def find_page(
        self,
        item_id: Identifier = None,
        order_id: Identifier = None,
        product_id: Identifier = None,
        min_quantity: Optional[int] = None,
        max_quantity: Optional[int] = None,
        page: Optional[int] = None,
        lines_per_page: Optional[int] = None,
        direction: Optional[str] = None,
        order_by: Optional[str] = None,
    ) -> Page[OrderItem]:
        with self._unit_of_work("find order items", read_only=True):
            min_quantity, max_quantity = validate_range(
                "quantity", min_quantity, max_quantity, whole=True
            )
            criteria = OrderItemFilter(
                item_id=None if is_blank(item_id) else parse_uuid("item_id", item_id),
                order_id=None if is_blank(order_id) else self._existing_order_id(order_id),
                product_id=(
                    None if is_blank(product_id) else self._existing_product_id(product_id)
                ),
                min_quantity=min_quantity,
                max_quantity=max_quantity,
            )
            request = self._page_request(
                self.catalog.order_items, page, lines_per_page, direction, order_by
            )
            return self.items.find_page(criteria, request)

    def find_details_page(
        self,
        item_id: Identifier = None,
        product_id: Identifier = None,
        order_id: Identifier = None,
        client_id: Union[int, str, None] = None,
        page: Optional[int] = None,
        lines_per_page: Optional[int] = None,
        direction: Optional[str] = None,
        order_by: Optional[str] = None,
    ) -> Page[OrderItemDetails]:
        """List order lines with their order, client and product."""
        with self._unit_of_work("find order item details", read_only=True):
            existing_client_id = None
            if not is_blank(client_id):
                existing_client_id = parse_int_id("client_id", client_id)
                if not self.clients.exists_by_id(existing_client_id):
                    raise NotFoundException("Client", "id", existing_client_id)

            criteria = OrderItemDetailsFilter(
                item_id=None if is_blank(item_id) else parse_uuid("item_id", item_id),
                product_id=(
                    None if is_blank(product_id) else self._existing_product_id(product_id)
                ),
                order_id=None if is_blank(order_id) else self._existing_order_id(order_id),
                client_id=existing_client_id,
            )
            request = self._page_request(
                self.catalog.order_item_details, page, lines_per_page, direction, order_by
            )
            return self.items.find_details_page(criteria, request)
