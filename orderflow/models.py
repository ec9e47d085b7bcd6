"""
Database models for the orderflow service.

SQLAlchemy ORM models for clients, products, orders and order items. Unique
constraints on email, CPF and SKU back the service-level duplicate checks.
"""

import uuid
from typing import Any

from sqlalchemy import Column, Date, DateTime, Float, ForeignKey, Integer, String, Uuid
from sqlalchemy.orm import declarative_base

Base: Any = declarative_base()


class ClientRecord(Base):
    """
    Registered client.

    Attributes:
        id: Store-assigned primary key
        name: Normalized client name
        email: Unique email address
        cpf: Unique 11 digit CPF
        birth_date: Date of birth
    """

    __tablename__ = "tb_clients"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False, index=True)
    email = Column(String(255), nullable=False, unique=True)
    cpf = Column(String(11), nullable=False, unique=True)
    birth_date = Column(Date, nullable=False)

    def __repr__(self) -> str:
        return f"<ClientRecord(id={self.id}, cpf={self.cpf})>"


class ProductRecord(Base):
    """
    Product available for ordering.

    Attributes:
        id: UUID assigned on creation
        name: Normalized product name
        sku: Unique 8 character alphanumeric code
        price: Current unit price
        expiration_date: Date after which the product cannot be sold
    """

    __tablename__ = "tb_products"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False, index=True)
    sku = Column(String(8), nullable=False, unique=True)
    price = Column(Float, nullable=False)
    expiration_date = Column(Date, nullable=False)

    def __repr__(self) -> str:
        return f"<ProductRecord(id={self.id}, sku={self.sku})>"


class OrderRecord(Base):
    """
    Order placed by a client.

    Attributes:
        id: UUID assigned on creation
        client_id: Owning client
        order_date: Creation timestamp (naive UTC)
        status: PENDING, COMPLETED or CANCELLED
    """

    __tablename__ = "tb_orders"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    client_id = Column(Integer, ForeignKey("tb_clients.id"), nullable=False, index=True)
    order_date = Column(DateTime, nullable=False, index=True)
    status = Column(String(20), nullable=False, index=True)

    def __repr__(self) -> str:
        return f"<OrderRecord(id={self.id}, status={self.status})>"


class OrderItemRecord(Base):
    """
    Line of an order.

    Attributes:
        id: UUID assigned on creation
        order_id: Order the line belongs to
        product_id: Ordered product
        quantity: Number of units
        price: Unit price copied from the product when the line was saved
    """

    __tablename__ = "tb_item_orders"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    order_id = Column(Uuid, ForeignKey("tb_orders.id"), nullable=False, index=True)
    product_id = Column(Uuid, ForeignKey("tb_products.id"), nullable=False, index=True)
    quantity = Column(Integer, nullable=False)
    price = Column(Float, nullable=False)

    def __repr__(self) -> str:
        return f"<OrderItemRecord(id={self.id}, order_id={self.order_id})>"
