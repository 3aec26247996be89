"""
Product Service.

Validates and routes catalog operations to the persistence gateway and
emits a best-effort stock-zero notification when an update empties stock.
"""
import asyncio
from typing import Optional, Protocol, Sequence
from uuid import UUID

from internal.domain.errors import (
    ConstraintViolationError,
    PersistenceError,
    ProductAlreadyExistsError,
    ProductConflictError,
    ProductNotFoundError,
)
from internal.domain.product import Product, ProductInput
from internal.infrastructure.metrics import PRODUCT_OPERATIONS, STOCK_ZERO_NOTIFICATIONS
from pkg.logger.logger import get_logger


logger = get_logger(__name__)


STOCK_ZERO_TOPIC = "stock-zero-queue"


class ProductRepository(Protocol):
    """Protocol for product persistence operations."""

    async def exists_by_name(self, name: str) -> bool:
        ...

    async def exists_by_id(self, product_id: UUID) -> bool:
        ...

    async def find_by_id(self, product_id: UUID) -> Optional[Product]:
        ...

    async def find_all(self) -> Sequence[Product]:
        ...

    async def save(self, product: Product) -> Product:
        """
        Insert a new product or update an existing one.

        Raises:
            ConstraintViolationError: On a uniqueness or integrity breach.
        """
        ...

    async def delete_by_id(self, product_id: UUID) -> None:
        ...


class EventPublisher(Protocol):
    """Protocol for fire-and-forget event publishing."""

    async def publish(self, topic: str, payload: str) -> None:
        ...


class ProductService:
    """
    Service for managing catalog products.

    Stateless between calls. Name uniqueness is pre-checked for a friendly
    error, but the store's unique constraint is what actually guards it:
    a write that loses the race surfaces as ProductConflictError.
    """

    def __init__(
        self,
        repository: ProductRepository,
        publisher: Optional[EventPublisher] = None,
        stock_zero_topic: str = STOCK_ZERO_TOPIC,
    ) -> None:
        """
        Initialize the service.

        Args:
            repository: Product persistence gateway.
            publisher: Optional event publisher for stock-zero notifications.
            stock_zero_topic: Topic the stock-zero notification goes to.
        """
        self._repository = repository
        self._publisher = publisher
        self._stock_zero_topic = stock_zero_topic
        self._pending_notifications: set[asyncio.Task] = set()

    async def create_product(self, input_dto: ProductInput) -> Product:
        """
        Create a new product.

        Args:
            input_dto: Values for the new product.

        Returns:
            The persisted product with its assigned id.

        Raises:
            ProductAlreadyExistsError: If a product with the same name exists.
            ProductConflictError: If the store rejected the write on a constraint.
            PersistenceError: If the store failed for any other reason.
        """
        if await self._repository.exists_by_name(input_dto.name):
            logger.warning("Product name already in use", product_name=input_dto.name)
            PRODUCT_OPERATIONS.labels(operation="create", outcome="duplicate").inc()
            raise ProductAlreadyExistsError(input_dto.name)

        product = await self._save(Product.from_input(input_dto), operation="create")

        logger.info("Product created", product_id=str(product.id), product_name=product.name)
        PRODUCT_OPERATIONS.labels(operation="create", outcome="success").inc()
        return product

    async def update_product(self, product_id: UUID, input_dto: ProductInput) -> Product:
        """
        Overwrite an existing product, keeping its id.

        Schedules a stock-zero notification when the new quantity is 0.

        Args:
            product_id: Identifier of the product to update.
            input_dto: New values for the product.

        Returns:
            The updated product.

        Raises:
            ProductNotFoundError: If no product has the given id.
            ProductConflictError: If the store rejected the write on a constraint.
            PersistenceError: If the store failed for any other reason.
        """
        if not await self._repository.exists_by_id(product_id):
            PRODUCT_OPERATIONS.labels(operation="update", outcome="not_found").inc()
            raise ProductNotFoundError(product_id)

        product = await self._repository.find_by_id(product_id)
        if product is None:
            # Deleted between the existence check and the load
            PRODUCT_OPERATIONS.labels(operation="update", outcome="not_found").inc()
            raise ProductNotFoundError(product_id)

        updated = await self._save(product.with_input(input_dto), operation="update")

        logger.info(
            "Product updated",
            product_id=str(updated.id),
            quantity=updated.quantity,
        )
        PRODUCT_OPERATIONS.labels(operation="update", outcome="success").inc()

        if updated.is_out_of_stock:
            self._notify_stock_zero(updated)

        return updated

    async def get_product(self, product_id: UUID) -> Product:
        """
        Get a product by id.

        Raises:
            ProductNotFoundError: If no product has the given id.
        """
        product = await self._repository.find_by_id(product_id)
        if product is None:
            PRODUCT_OPERATIONS.labels(operation="get", outcome="not_found").inc()
            raise ProductNotFoundError(product_id)
        return product

    async def list_products(self) -> list[Product]:
        """List all products in the order the store returns them."""
        return list(await self._repository.find_all())

    async def delete_product(self, product_id: UUID) -> None:
        """
        Delete a product by id.

        Raises:
            ProductNotFoundError: If no product has the given id.
        """
        if not await self._repository.exists_by_id(product_id):
            PRODUCT_OPERATIONS.labels(operation="delete", outcome="not_found").inc()
            raise ProductNotFoundError(product_id)

        await self._repository.delete_by_id(product_id)

        logger.info("Product deleted", product_id=str(product_id))
        PRODUCT_OPERATIONS.labels(operation="delete", outcome="success").inc()

    async def wait_for_notifications(self) -> None:
        """Wait until every scheduled stock-zero notification has finished."""
        while self._pending_notifications:
            await asyncio.gather(*self._pending_notifications, return_exceptions=True)

    async def _save(self, product: Product, operation: str) -> Product:
        """
        Save through the repository, translating store failures.

        Raises:
            ProductConflictError: On a constraint violation.
            ProductNotFoundError: If the row vanished before an update landed.
            PersistenceError: On any other failure.
        """
        try:
            return await self._repository.save(product)
        except ConstraintViolationError as e:
            logger.warning(
                "Constraint violation while saving product",
                product_name=product.name,
                operation=operation,
                error=e.message,
            )
            PRODUCT_OPERATIONS.labels(operation=operation, outcome="conflict").inc()
            raise ProductConflictError(product.name) from e
        except ProductNotFoundError:
            PRODUCT_OPERATIONS.labels(operation=operation, outcome="not_found").inc()
            raise
        except Exception as e:
            logger.error(
                "Unexpected error while saving product",
                product_name=product.name,
                operation=operation,
                error=str(e),
                exc_info=True,
            )
            PRODUCT_OPERATIONS.labels(operation=operation, outcome="error").inc()
            raise PersistenceError(e) from e

    def _notify_stock_zero(self, product: Product) -> None:
        if self._publisher is None:
            logger.warning(
                "No event publisher configured, stock-zero notification skipped",
                product_id=str(product.id),
                product_name=product.name,
            )
            STOCK_ZERO_NOTIFICATIONS.labels(status="skipped").inc()
            return

        task = asyncio.create_task(self._publish_stock_zero(product.name))
        self._pending_notifications.add(task)
        task.add_done_callback(self._pending_notifications.discard)

    async def _publish_stock_zero(self, name: str) -> None:
        try:
            await self._publisher.publish(self._stock_zero_topic, name)
        except Exception as e:
            logger.error(
                "Failed to publish stock-zero notification",
                product_name=name,
                topic=self._stock_zero_topic,
                error=str(e),
            )
            STOCK_ZERO_NOTIFICATIONS.labels(status="failed").inc()
            return

        logger.info("Stock-zero notification sent", product_name=name, topic=self._stock_zero_topic)
        STOCK_ZERO_NOTIFICATIONS.labels(status="sent").inc()
