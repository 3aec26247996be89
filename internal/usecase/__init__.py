"""
Use case package for the Merchandise Catalog Service.

Contains business logic for catalog products.
"""
from .product_service import (
    EventPublisher,
    ProductRepository,
    ProductService,
    STOCK_ZERO_TOPIC,
)

__all__ = [
    "EventPublisher",
    "ProductRepository",
    "ProductService",
    "STOCK_ZERO_TOPIC",
]
