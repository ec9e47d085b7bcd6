"""
Domain layer - Core business entities and rules.

Entities, filters, the order status machine and the business exceptions live
here, independent of any infrastructure or framework concerns.
"""
