"""
Domain model for catalog products.

Contains the persisted Product entity and the ProductInput payload used to
create or overwrite it.
"""
from dataclasses import dataclass, field, replace
from decimal import Decimal, InvalidOperation
from typing import Any, Optional
from uuid import UUID

from .errors import DomainValidationError


NAME_MAX_LENGTH = 255

# Storage is NUMERIC(12, 2) and INTEGER
PRICE_MAX_DIGITS = 12
PRICE_DECIMAL_PLACES = 2
PRICE_LIMIT = Decimal(10) ** (PRICE_MAX_DIGITS - PRICE_DECIMAL_PLACES)
QUANTITY_MAX = 2**31 - 1


def _to_decimal(value: Any) -> Decimal:
    """
    Normalise a price value to Decimal.

    Floats go through str() so 1999.99 stays 1999.99.

    Raises:
        DomainValidationError: If the value is not a number.
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise DomainValidationError("price must be a number")
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError) as e:
        raise DomainValidationError(f"price must be a number, got {value!r}") from e


def _validate_fields(name: str, price: Decimal, quantity: int) -> None:
    """
    Validate the fields shared by Product and ProductInput.

    Raises:
        DomainValidationError: If validation fails.
    """
    if not isinstance(name, str) or not name.strip():
        raise DomainValidationError("name is required")
    if len(name) > NAME_MAX_LENGTH:
        raise DomainValidationError(f"name must be <= {NAME_MAX_LENGTH} characters")
    if not price.is_finite():
        raise DomainValidationError("price must be a finite number")
    if price < 0:
        raise DomainValidationError("price cannot be negative")
    if price >= PRICE_LIMIT:
        raise DomainValidationError(f"price must be less than {PRICE_LIMIT}")
    if price != price.quantize(Decimal(1).scaleb(-PRICE_DECIMAL_PLACES)):
        raise DomainValidationError(
            f"price must have at most {PRICE_DECIMAL_PLACES} decimal places"
        )
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise DomainValidationError("quantity must be an integer")
    if quantity < 0:
        raise DomainValidationError("quantity cannot be negative")
    if quantity > QUANTITY_MAX:
        raise DomainValidationError(f"quantity must be <= {QUANTITY_MAX}")


@dataclass
class ProductInput:
    """
    Payload for creating or updating a product.

    Carries no identifier: identity is assigned by the store on creation
    and resolved by the service on update.

    Attributes:
        name: Product name, unique across the catalog.
        price: Unit price, non-negative.
        quantity: Units in stock, non-negative.
        description: Optional free-text description.
    """
    name: str
    price: Decimal
    quantity: int
    description: Optional[str] = None

    def __post_init__(self) -> None:
        """Normalise price and validate after initialization."""
        self.price = _to_decimal(self.price)
        _validate_fields(self.name, self.price, self.quantity)


@dataclass
class Product:
    """
    Product is the aggregate root of the catalog.

    Attributes:
        name: Product name, unique across the catalog.
        price: Unit price, non-negative.
        quantity: Units in stock; 0 means out of stock.
        description: Optional free-text description.
        id: Identifier assigned by the store on first save.
    """
    name: str
    price: Decimal
    quantity: int
    description: Optional[str] = None
    id: Optional[UUID] = field(default=None)

    def __post_init__(self) -> None:
        """Validate domain invariants after initialization."""
        self.price = _to_decimal(self.price)
        _validate_fields(self.name, self.price, self.quantity)

    @classmethod
    def from_input(cls, input_dto: ProductInput) -> "Product":
        """Build a not-yet-persisted product from an input payload."""
        return cls(
            name=input_dto.name,
            price=input_dto.price,
            quantity=input_dto.quantity,
            description=input_dto.description,
        )

    @property
    def is_persisted(self) -> bool:
        return self.id is not None

    @property
    def is_out_of_stock(self) -> bool:
        return self.quantity == 0

    def with_input(self, input_dto: ProductInput) -> "Product":
        """
        Return a copy carrying the input's values under this product's id.

        The receiver is left unchanged.

        Args:
            input_dto: New values for name, price, description and quantity.
        """
        return replace(
            self,
            name=input_dto.name,
            price=input_dto.price,
            description=input_dto.description,
            quantity=input_dto.quantity,
        )
