"""
Repository layer - Data access.

SQLAlchemy repositories for each aggregate. Repositories never commit and
never translate storage errors; the service unit of work owns both.
"""

from .client_repository import ClientRepository
from .order_item_repository import OrderItemRepository
from .order_repository import OrderRepository
from .product_repository import ProductRepository

__all__ = [
    "ClientRepository",
    "OrderItemRepository",
    "OrderRepository",
    "ProductRepository",
]
