"""
Domain-specific exceptions.

Custom exceptions for validation, business rule violations and
persistence failures surfaced by the product service.
"""
from uuid import UUID


class DomainError(Exception):
    """Base exception for domain errors."""

    def __init__(self, message: str) -> None:
        """
        Initialize domain error.

        Args:
            message: Error message describing the issue.
        """
        self.message = message
        super().__init__(self.message)


class DomainValidationError(DomainError):
    """Exception raised when domain validation fails."""
    pass


class ProductNotFoundError(DomainError):
    """Exception raised when a product is not found."""

    def __init__(self, product_id: UUID) -> None:
        """
        Initialize product not found error.

        Args:
            product_id: The ID of the product that was not found.
        """
        super().__init__(f"Product with ID {product_id} not found")
        self.product_id = product_id


class ProductAlreadyExistsError(DomainError):
    """Exception raised when a product with the same name already exists."""

    def __init__(self, name: str) -> None:
        """
        Initialize product already exists error.

        Args:
            name: The product name that already exists.
        """
        super().__init__(f"Product with name '{name}' already exists")
        self.name = name


class ProductConflictError(DomainError):
    """Exception raised when the store rejects a write on a constraint."""

    def __init__(self, name: str) -> None:
        """
        Initialize product conflict error.

        Args:
            name: Name of the product being saved.
        """
        super().__init__(
            f"Could not save product '{name}': "
            "duplicate name or constraint violation"
        )
        self.name = name


class PersistenceError(DomainError):
    """Exception raised when saving a product fails unexpectedly."""

    def __init__(self, cause: Exception) -> None:
        """
        Initialize persistence error.

        Args:
            cause: The underlying exception, kept for diagnostics only.
        """
        super().__init__("An unexpected error occurred while saving the product")
        self.cause = cause


class ConstraintViolationError(DomainError):
    """Raised by persistence adapters on a uniqueness or integrity breach."""
    pass


class EventPublishError(DomainError):
    """Exception raised when event publishing fails."""

    def __init__(self, event_type: str, reason: str) -> None:
        """
        Initialize event publish error.

        Args:
            event_type: Type of event that failed to publish.
            reason: The reason for the failure.
        """
        super().__init__(f"Failed to publish event '{event_type}': {reason}")
        self.event_type = event_type
        self.reason = reason
