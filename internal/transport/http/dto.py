"""
Data Transfer Objects for the Merchandise Catalog API.

Contains Pydantic models for request/response validation.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from internal.domain.product import (
    NAME_MAX_LENGTH,
    PRICE_DECIMAL_PLACES,
    PRICE_MAX_DIGITS,
    QUANTITY_MAX,
    Product,
    ProductInput,
)


class ProductRequest(BaseModel):
    """Request body for creating or updating a product."""

    name: str = Field(
        ...,
        min_length=1,
        max_length=NAME_MAX_LENGTH,
        description="Product name, unique across the catalog",
    )
    price: Decimal = Field(
        ...,
        ge=0,
        max_digits=PRICE_MAX_DIGITS,
        decimal_places=PRICE_DECIMAL_PLACES,
        description="Unit price",
    )
    description: Optional[str] = Field(None, description="Free-text description")
    quantity: int = Field(..., ge=0, le=QUANTITY_MAX, description="Units in stock")

    class Config:
        json_schema_extra = {
            "example": {
                "name": "Smartphone X",
                "price": "1999.99",
                "description": "Flagship smartphone",
                "quantity": 50,
            }
        }

    def to_input(self) -> ProductInput:
        """Convert to the domain input payload."""
        return ProductInput(
            name=self.name,
            price=self.price,
            description=self.description,
            quantity=self.quantity,
        )


class ProductResponse(BaseModel):
    """Response body for a product."""

    id: UUID = Field(..., description="Unique identifier")
    name: str = Field(..., description="Product name")
    description: Optional[str] = Field(None, description="Free-text description")
    price: Decimal = Field(..., description="Unit price")
    quantity: int = Field(..., description="Units in stock")

    class Config:
        json_schema_extra = {
            "example": {
                "id": "550e8400-e29b-41d4-a716-446655440000",
                "name": "Smartphone X",
                "description": None,
                "price": "1999.99",
                "quantity": 50,
            }
        }

    @classmethod
    def from_entity(cls, product: Product) -> "ProductResponse":
        """Build the response from a persisted product."""
        return cls(
            id=product.id,
            name=product.name,
            description=product.description,
            price=product.price,
            quantity=product.quantity,
        )


class ErrorResponse(BaseModel):
    """Error response body."""

    detail: str
