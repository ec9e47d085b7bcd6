"""
Service layer - Business use cases.

Each public service method validates its input in a fixed order, talks to the
repositories inside one unit of work and returns a domain value or raises a
BusinessRuleViolation.
"""

from .client_service import ClientService
from .order_item_service import OrderItemService
from .order_service import OrderService
from .product_service import ProductService

__all__ = ["ClientService", "OrderItemService", "OrderService", "ProductService"]
