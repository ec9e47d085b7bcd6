"""
Product use cases.

Products are identified externally by their 8 character SKU.
"""

from datetime import date
from typing import Optional

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..domain.entities import Page, Product
from ..domain.exceptions import (
    AlreadyExistsException,
    EntityInUseException,
    NotFoundException,
)
from ..domain.filters import ProductFilter
from ..query import CATALOG, QueryCatalog
from ..repositories import OrderItemRepository, ProductRepository
from ..validators import (
    is_blank,
    optional_text,
    validate_expiration_date,
    validate_name,
    validate_price,
    validate_range,
    validate_sku,
)
from .base import BaseService

logger = structlog.get_logger(__name__)

ENTITY = "Product"


class ProductService(BaseService):
    """Registration, lookup, update and removal of products."""

    def __init__(self, db: Session, catalog: QueryCatalog = CATALOG):
        super().__init__(db, catalog)
        self.products = ProductRepository(db, catalog)
        self.items = OrderItemRepository(db, catalog)

    def save(
        self,
        name: Optional[str],
        price: Optional[float],
        expiration_date: Optional[date],
        sku: Optional[str],
    ) -> Product:
        """
        Register a new product.

        Checks run in order: name, price, expiration date, SKU format,
        SKU uniqueness.

        Raises:
            ValidationException: If a field is missing or malformed
            AlreadyExistsException: If the SKU is already registered
        """
        with self._unit_of_work("save product"):
            name = validate_name(name)
            price = validate_price(price)
            expiration_date = validate_expiration_date(expiration_date, self._today())
            sku = validate_sku(sku)
            if self.products.exists_by_sku(sku):
                raise AlreadyExistsException(ENTITY, "sku", sku)

            try:
                product = self.products.insert(
                    Product(name=name, sku=sku, price=price, expiration_date=expiration_date)
                )
            except IntegrityError:
                self.db.rollback()
                if self.products.exists_by_sku(sku):
                    raise AlreadyExistsException(ENTITY, "sku", sku)
                raise

        logger.info("product_saved", product_id=str(product.id), sku=product.sku)
        return product

    def find_by_sku(self, sku: Optional[str]) -> Product:
        with self._unit_of_work("find product", read_only=True):
            sku = validate_sku(sku)
            product = self.products.find_by_sku(sku)
            if product is None:
                raise NotFoundException(ENTITY, "sku", sku)
            return product

    def find_page(
        self,
        name: Optional[str] = None,
        sku: Optional[str] = None,
        min_price: Optional[float] = None,
        max_price: Optional[float] = None,
        page: Optional[int] = None,
        lines_per_page: Optional[int] = None,
        direction: Optional[str] = None,
        order_by: Optional[str] = None,
    ) -> Page[Product]:
        with self._unit_of_work("find products", read_only=True):
            min_price, max_price = validate_range("price", min_price, max_price)
            criteria = ProductFilter(
                name=optional_text(name),
                sku=None if is_blank(sku) else validate_sku(sku),
                min_price=min_price,
                max_price=max_price,
            )
            request = self._page_request(
                self.catalog.products, page, lines_per_page, direction, order_by
            )
            return self.products.find_page(criteria, request)

    def update_by_sku(
        self,
        sku: Optional[str],
        name: Optional[str],
        price: Optional[float],
        expiration_date: Optional[date],
    ) -> Product:
        """
        Replace the name, price and expiration date of the product with ``sku``.

        Existing order lines keep the price they were saved with.
        """
        with self._unit_of_work("update product"):
            name = validate_name(name)
            price = validate_price(price)
            expiration_date = validate_expiration_date(expiration_date, self._today())
            sku = validate_sku(sku)
            if not self.products.exists_by_sku(sku):
                raise NotFoundException(ENTITY, "sku", sku)

            self.products.update_by_sku(
                sku, name=name, price=price, expiration_date=expiration_date
            )
            product = self.products.find_by_sku(sku)

        logger.info("product_updated", product_id=str(product.id), sku=product.sku)
        return product

    def delete_by_sku(self, sku: Optional[str]) -> None:
        """
        Remove a product no order line refers to.

        Raises:
            NotFoundException: If no product has this SKU
            EntityInUseException: If an order line references the product
        """
        with self._unit_of_work("delete product"):
            sku = validate_sku(sku)
            product = self.products.find_by_sku(sku)
            if product is None:
                raise NotFoundException(ENTITY, "sku", sku)
            if self.items.exists_by_product_id(product.id):
                raise EntityInUseException(ENTITY, "sku", sku, referenced_by="order items")
            self.products.delete_by_sku(sku)

        logger.info("product_deleted", product_id=str(product.id), sku=sku)
