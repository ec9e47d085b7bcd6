"""
HTTP routers. Each router only parses parameters and delegates to a service.
"""

from . import clients, health, order_items, orders, products

__all__ = ["clients", "health", "order_items", "orders", "products"]
