"""
Domain package for the Merchandise Catalog Service.

Contains domain entities and domain errors.
"""
from .product import Product, ProductInput
from .errors import (
    DomainError,
    DomainValidationError,
    ProductNotFoundError,
    ProductAlreadyExistsError,
    ProductConflictError,
    PersistenceError,
    ConstraintViolationError,
    EventPublishError,
)

__all__ = [
    "Product",
    "ProductInput",
    "DomainError",
    "DomainValidationError",
    "ProductNotFoundError",
    "ProductAlreadyExistsError",
    "ProductConflictError",
    "PersistenceError",
    "ConstraintViolationError",
    "EventPublishError",
]
