"""
Product persistence.
"""

import logging
from datetime import date
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import select

from ..domain.entities import Page, Product
from ..domain.filters import ProductFilter
from ..models import ProductRecord
from ..query import PageRequest, QueryBuilder
from ..query.executor import to_date, to_float, to_uuid
from .base import SqlAlchemyRepository

logger = logging.getLogger(__name__)


class ProductRepository(SqlAlchemyRepository):
    """SQLAlchemy repository for products, keyed externally by SKU."""

    def exists_by_id(self, product_id: UUID) -> bool:
        return self._exists(ProductRecord.id, ProductRecord.id == product_id)

    def exists_by_sku(self, sku: str) -> bool:
        return self._exists(ProductRecord.id, ProductRecord.sku == sku)

    def insert(self, product: Product) -> Product:
        record = ProductRecord(
            id=product.id or uuid4(),
            name=product.name,
            sku=product.sku,
            price=product.price,
            expiration_date=product.expiration_date,
        )
        self.db.add(record)
        self.db.flush()
        logger.info(f"Inserted product {record.id}")
        return self._map_to_entity(record)

    def find_by_id(self, product_id: UUID) -> Optional[Product]:
        record = self.db.query(ProductRecord).filter(ProductRecord.id == product_id).first()
        return self._map_to_entity(record) if record else None

    def find_by_sku(self, sku: str) -> Optional[Product]:
        record = self.db.query(ProductRecord).filter(ProductRecord.sku == sku).first()
        return self._map_to_entity(record) if record else None

    def find_page(self, criteria: ProductFilter, request: PageRequest) -> Page[Product]:
        builder = (
            QueryBuilder(select(ProductRecord))
            .contains(ProductRecord.name, criteria.name)
            .equals(ProductRecord.sku, criteria.sku)
            .at_least(ProductRecord.price, criteria.min_price)
            .at_most(ProductRecord.price, criteria.max_price)
        )
        query = builder.build(self.catalog.products, request)
        return self.executor.execute(query, lambda row: self._map_to_entity(row[0]))

    def update_by_sku(self, sku: str, name: str, price: float, expiration_date: date) -> int:
        return (
            self.db.query(ProductRecord)
            .filter(ProductRecord.sku == sku)
            .update(
                {
                    ProductRecord.name: name,
                    ProductRecord.price: price,
                    ProductRecord.expiration_date: expiration_date,
                },
                synchronize_session="fetch",
            )
        )

    def delete_by_sku(self, sku: str) -> int:
        return (
            self.db.query(ProductRecord)
            .filter(ProductRecord.sku == sku)
            .delete(synchronize_session=False)
        )

    @staticmethod
    def _map_to_entity(record: ProductRecord) -> Product:
        return Product(
            id=to_uuid(record.id),
            name=record.name,
            sku=record.sku,
            price=to_float(record.price),
            expiration_date=to_date(record.expiration_date),
        )
