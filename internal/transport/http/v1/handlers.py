"""
FastAPI HTTP Handlers for the Merchandise Catalog API v1.

Implements REST endpoints for product operations and maps domain errors to
HTTP status codes.
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Path, status
from fastapi.responses import Response
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST

from internal.domain.errors import (
    DomainValidationError,
    PersistenceError,
    ProductAlreadyExistsError,
    ProductConflictError,
    ProductNotFoundError,
)
from internal.transport.http.dto import ErrorResponse, ProductRequest, ProductResponse
from internal.usecase.product_service import ProductService
from pkg.logger.logger import get_logger

logger = get_logger(__name__)


router = APIRouter(prefix="/api/v1", tags=["products"])


class Dependencies:
    """Container for handler dependencies."""

    product_service: Optional[ProductService] = None


_deps = Dependencies()


def get_product_service() -> ProductService:
    """Get ProductService instance."""
    if _deps.product_service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service not initialized",
        )
    return _deps.product_service


def set_dependencies(product_service: Optional[ProductService]) -> None:
    """
    Set handler dependencies.

    Called during application startup, and with None on shutdown.
    """
    _deps.product_service = product_service


def _raise_for_write_error(error: Exception) -> None:
    """Translate a write-path domain error into an HTTPException."""
    if isinstance(error, ProductNotFoundError):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=error.message)
    if isinstance(error, (ProductAlreadyExistsError, ProductConflictError)):
        logger.warning("Product conflict", error=error.message)
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=error.message)
    if isinstance(error, DomainValidationError):
        logger.warning("Validation error", error=error.message)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=error.message)
    if isinstance(error, PersistenceError):
        logger.error("Persistence failure", error=str(error.cause))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=error.message,
        )
    raise error


@router.post(
    "/products",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        201: {"description": "Product created successfully"},
        400: {"model": ErrorResponse, "description": "Validation error"},
        409: {"model": ErrorResponse, "description": "Product name already in use"},
        500: {"model": ErrorResponse, "description": "Unexpected persistence error"},
        503: {"model": ErrorResponse, "description": "Service unavailable"},
    },
)
async def create_product(
    request: ProductRequest,
    service: ProductService = Depends(get_product_service),
) -> ProductResponse:
    """
    Register a new product.

    Fails with 409 when another product already uses the name.
    """
    logger.info("Creating product", product_name=request.name)

    try:
        product = await service.create_product(request.to_input())
    except (
        DomainValidationError,
        ProductAlreadyExistsError,
        ProductConflictError,
        PersistenceError,
    ) as e:
        _raise_for_write_error(e)

    return ProductResponse.from_entity(product)


@router.get(
    "/products",
    response_model=list[ProductResponse],
    responses={200: {"description": "All products"}},
)
async def list_products(
    service: ProductService = Depends(get_product_service),
) -> list[ProductResponse]:
    """Get every product in the catalog."""
    products = await service.list_products()
    return [ProductResponse.from_entity(p) for p in products]


@router.get(
    "/products/{product_id}",
    response_model=ProductResponse,
    responses={
        200: {"description": "Product found"},
        404: {"model": ErrorResponse, "description": "Product not found"},
    },
)
async def get_product(
    product_id: UUID = Path(..., description="Product ID"),
    service: ProductService = Depends(get_product_service),
) -> ProductResponse:
    """Get a product by ID."""
    try:
        product = await service.get_product(product_id)
    except ProductNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)

    return ProductResponse.from_entity(product)


@router.put(
    "/products/{product_id}",
    response_model=ProductResponse,
    responses={
        200: {"description": "Product updated successfully"},
        400: {"model": ErrorResponse, "description": "Validation error"},
        404: {"model": ErrorResponse, "description": "Product not found"},
        409: {"model": ErrorResponse, "description": "Product name already in use"},
        500: {"model": ErrorResponse, "description": "Unexpected persistence error"},
    },
)
async def update_product(
    request: ProductRequest,
    product_id: UUID = Path(..., description="Product ID"),
    service: ProductService = Depends(get_product_service),
) -> ProductResponse:
    """
    Overwrite a product's name, price, description and quantity.

    Setting the quantity to 0 emits a stock-zero notification.
    """
    logger.info("Updating product", product_id=str(product_id))

    try:
        product = await service.update_product(product_id, request.to_input())
    except (
        DomainValidationError,
        ProductNotFoundError,
        ProductConflictError,
        PersistenceError,
    ) as e:
        _raise_for_write_error(e)

    return ProductResponse.from_entity(product)


@router.delete(
    "/products/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={
        204: {"description": "Product deleted"},
        404: {"model": ErrorResponse, "description": "Product not found"},
    },
)
async def delete_product(
    product_id: UUID = Path(..., description="Product ID"),
    service: ProductService = Depends(get_product_service),
) -> Response:
    """Delete a product by ID."""
    logger.info("Deleting product", product_id=str(product_id))

    try:
        await service.delete_product(product_id)
    except ProductNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)

    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/health")
async def health_check() -> dict:
    """
    Health check endpoint.

    Returns:
        Health status.
    """
    return {"status": "healthy", "service": "merchandise-catalog-service"}


@router.get("/metrics")
async def metrics():
    """
    Prometheus metrics endpoint.

    Returns:
        Prometheus metrics in text format.
    """
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )
