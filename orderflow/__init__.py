"""
Orderflow: client, product and order registration with filtered queries.
"""

__version__ = "1.0.0"
