"""
Metrics infrastructure package.
"""
from .prometheus import (
    HTTP_REQUESTS_TOTAL,
    HTTP_REQUEST_DURATION,
    PRODUCT_OPERATIONS,
    STOCK_ZERO_NOTIFICATIONS,
)

__all__ = [
    "HTTP_REQUESTS_TOTAL",
    "HTTP_REQUEST_DURATION",
    "PRODUCT_OPERATIONS",
    "STOCK_ZERO_NOTIFICATIONS",
]
