"""
Pytest configuration and fixtures.
"""
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock
from uuid import UUID

import pytest

from internal.domain.product import Product, ProductInput

from fakes import NEW_PRODUCT_ID, InMemoryProductRepository


@pytest.fixture
def smartphone():
    """Persisted product used across service and API tests."""
    return Product(
        id=UUID("11111111-1111-1111-1111-111111111111"),
        name="Smartphone X",
        description=None,
        price=Decimal("1999.99"),
        quantity=50,
    )


@pytest.fixture
def smartwatch():
    """Second persisted product."""
    return Product(
        id=UUID("22222222-2222-2222-2222-222222222222"),
        name="Smartwatch Z",
        description="A smart watch",
        price=Decimal("800.00"),
        quantity=30,
    )


@pytest.fixture
def laptop_input():
    """Valid creation payload with an unused name."""
    return ProductInput(
        name="Laptop Y",
        price=Decimal("3500.00"),
        description="A laptop for productivity",
        quantity=20,
    )


@pytest.fixture
def mock_repository():
    """Mock repository: empty store whose save assigns NEW_PRODUCT_ID."""
    async def save(product: Product) -> Product:
        if product.id is None:
            product.id = NEW_PRODUCT_ID
        return product

    repo = MagicMock()
    repo.exists_by_name = AsyncMock(return_value=False)
    repo.exists_by_id = AsyncMock(return_value=False)
    repo.find_by_id = AsyncMock(return_value=None)
    repo.find_all = AsyncMock(return_value=[])
    repo.save = AsyncMock(side_effect=save)
    repo.delete_by_id = AsyncMock(return_value=None)
    return repo


@pytest.fixture
def mock_publisher():
    """Mock event publisher."""
    publisher = MagicMock()
    publisher.publish = AsyncMock(return_value=None)
    return publisher


@pytest.fixture
def in_memory_repository(smartphone, smartwatch):
    """In-memory repository seeded with two products."""
    return InMemoryProductRepository([smartphone, smartwatch])
