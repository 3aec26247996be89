"""
PostgreSQL Product Repository.

Implements the repository pattern for Product persistence with asyncpg.
The UNIQUE constraint on products.name is the authoritative guard for name
uniqueness; integrity failures are reported as ConstraintViolationError.
"""

from decimal import Decimal
from typing import Optional
from uuid import UUID

import asyncpg
from asyncpg import Pool

from internal.domain.errors import ConstraintViolationError, ProductNotFoundError
from internal.domain.product import Product
from pkg.logger.logger import get_logger


logger = get_logger(__name__)


_PRODUCT_COLUMNS = "id, name, description, price, quantity"


class PostgresProductRepository:
    """
    PostgreSQL implementation of the Product Repository.

    Uses asyncpg for async database operations. Identifiers are generated
    by the database on insert.
    """

    def __init__(self, pool: Pool) -> None:
        """
        Initialize the repository.

        Args:
            pool: asyncpg connection pool.
        """
        self._pool = pool

    async def exists_by_name(self, name: str) -> bool:
        """
        Check whether a product with the given name exists.

        Args:
            name: Exact product name.

        Returns:
            True if a product has this name.
        """
        async with self._pool.acquire() as conn:
            return await conn.fetchval(
                "SELECT EXISTS(SELECT 1 FROM products WHERE name = $1)",
                name,
            )

    async def exists_by_id(self, product_id: UUID) -> bool:
        """
        Check whether a product with the given id exists.

        Args:
            product_id: Product identifier.

        Returns:
            True if the product exists.
        """
        async with self._pool.acquire() as conn:
            return await conn.fetchval(
                "SELECT EXISTS(SELECT 1 FROM products WHERE id = $1)",
                product_id,
            )

    async def find_by_id(self, product_id: UUID) -> Optional[Product]:
        """
        Get a product by id.

        Args:
            product_id: Product identifier.

        Returns:
            Product if found, None otherwise.
        """
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(
                f"SELECT {_PRODUCT_COLUMNS} FROM products WHERE id = $1",
                product_id,
            )

            if not row:
                return None

            return self._row_to_entity(row)

    async def find_all(self) -> list[Product]:
        """
        Get all products, oldest first.

        Returns:
            List of products.
        """
        async with self._pool.acquire() as conn:
            rows = await conn.fetch(
                f"SELECT {_PRODUCT_COLUMNS} FROM products ORDER BY created_at, id"
            )

            return [self._row_to_entity(row) for row in rows]

    async def save(self, product: Product) -> Product:
        """
        Insert a new product or update an existing one.

        A product without an id is inserted and receives the id generated
        by the database. A product with an id overwrites its row.

        Args:
            product: The product to persist.

        Returns:
            The persisted product as stored.

        Raises:
            ConstraintViolationError: On a unique or check constraint breach.
            ProductNotFoundError: If the row to update no longer exists.
        """
        try:
            async with self._pool.acquire() as conn:
                if not product.is_persisted:
                    row = await conn.fetchrow(
                        f"""
                        INSERT INTO products (name, description, price, quantity)
                        VALUES ($1, $2, $3, $4)
                        RETURNING {_PRODUCT_COLUMNS}
                        """,
                        product.name,
                        product.description,
                        product.price,
                        product.quantity,
                    )
                else:
                    row = await conn.fetchrow(
                        f"""
                        UPDATE products
                        SET name = $2,
                            description = $3,
                            price = $4,
                            quantity = $5,
                            updated_at = NOW()
                        WHERE id = $1
                        RETURNING {_PRODUCT_COLUMNS}
                        """,
                        product.id,
                        product.name,
                        product.description,
                        product.price,
                        product.quantity,
                    )
        except asyncpg.IntegrityConstraintViolationError as e:
            logger.warning(
                "Integrity constraint violated",
                product_name=product.name,
                constraint=getattr(e, "constraint_name", None),
            )
            raise ConstraintViolationError(
                f"Constraint violated while saving product '{product.name}'"
            ) from e

        if row is None:
            raise ProductNotFoundError(product.id)

        return self._row_to_entity(row)

    async def delete_by_id(self, product_id: UUID) -> None:
        """
        Delete a product by id.

        Args:
            product_id: Product identifier.
        """
        async with self._pool.acquire() as conn:
            await conn.execute("DELETE FROM products WHERE id = $1", product_id)

    def _row_to_entity(self, row: asyncpg.Record) -> Product:
        """
        Convert a database row to a Product entity.

        Args:
            row: Database row.

        Returns:
            Product entity.
        """
        return Product(
            id=row["id"],
            name=row["name"],
            description=row["description"],
            price=Decimal(str(row["price"])),
            quantity=row["quantity"],
        )


async def create_pool(dsn: str, min_size: int = 2, max_size: int = 10) -> Pool:
    """
    Create an asyncpg connection pool.

    Args:
        dsn: Database connection string.
        min_size: Minimum pool size.
        max_size: Maximum pool size.

    Returns:
        asyncpg connection pool.
    """
    return await asyncpg.create_pool(
        dsn=dsn,
        min_size=min_size,
        max_size=max_size,
    )
