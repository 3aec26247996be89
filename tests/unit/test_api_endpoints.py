"""
Unit tests for product API endpoints.
"""
import pytest
import pytest_asyncio
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

from fastapi import FastAPI
from httpx import AsyncClient, ASGITransport

from internal.domain.errors import PersistenceError, ProductConflictError
from internal.transport.http.middleware import MetricsMiddleware, RequestIdMiddleware
from internal.transport.http.v1.handlers import router, set_dependencies
from internal.usecase.product_service import ProductService


def _build_app() -> FastAPI:
    app = FastAPI()
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIdMiddleware)
    app.include_router(router)
    return app


@pytest.fixture
def service(in_memory_repository, mock_publisher):
    """Product service wired into the handlers."""
    product_service = ProductService(repository=in_memory_repository, publisher=mock_publisher)
    set_dependencies(product_service=product_service)
    yield product_service
    set_dependencies(product_service=None)


@pytest_asyncio.fixture
async def client(service):
    async with AsyncClient(transport=ASGITransport(app=_build_app()), base_url="http://test") as c:
        yield c


class TestCreateProductEndpoint:
    """Tests for POST /api/v1/products."""

    @pytest.mark.asyncio
    async def test_create_returns_201_with_id(self, client):
        response = await client.post(
            "/api/v1/products",
            json={"name": "Laptop Y", "price": "3500.00", "quantity": 20},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["id"]
        assert data["name"] == "Laptop Y"
        assert Decimal(data["price"]) == Decimal("3500.00")
        assert data["quantity"] == 20
        assert data["description"] is None

    @pytest.mark.asyncio
    async def test_create_duplicate_name_returns_409(self, client):
        response = await client.post(
            "/api/v1/products",
            json={"name": "Smartphone X", "price": 2000, "quantity": 10},
        )

        assert response.status_code == 409
        assert "Smartphone X" in response.json()["detail"]

    @pytest.mark.asyncio
    async def test_create_negative_price_returns_422(self, client):
        response = await client.post(
            "/api/v1/products",
            json={"name": "Laptop Y", "price": -1, "quantity": 20},
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_create_price_with_three_decimals_returns_422(self, client):
        response = await client.post(
            "/api/v1/products",
            json={"name": "Laptop Y", "price": "1.999", "quantity": 20},
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_create_price_over_storage_limit_returns_422(self, client):
        response = await client.post(
            "/api/v1/products",
            json={"name": "Big", "price": "123456789012.99", "quantity": 1},
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_create_quantity_over_int32_returns_422(self, client):
        response = await client.post(
            "/api/v1/products",
            json={"name": "Big", "price": "1.00", "quantity": 2**40},
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_create_at_upper_bounds_returns_201(self, client):
        response = await client.post(
            "/api/v1/products",
            json={"name": "Big", "price": "9999999999.99", "quantity": 2**31 - 1},
        )

        assert response.status_code == 201
        assert response.json()["quantity"] == 2**31 - 1

    @pytest.mark.asyncio
    async def test_create_blank_name_returns_400(self, client):
        response = await client.post(
            "/api/v1/products",
            json={"name": "   ", "price": 1, "quantity": 1},
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "name is required"

    @pytest.mark.asyncio
    async def test_create_persistence_failure_returns_500_without_details(self):
        product_service = MagicMock(spec=ProductService)
        product_service.create_product = AsyncMock(
            side_effect=PersistenceError(RuntimeError("password authentication failed"))
        )
        set_dependencies(product_service=product_service)
        try:
            async with AsyncClient(
                transport=ASGITransport(app=_build_app()), base_url="http://test"
            ) as client:
                response = await client.post(
                    "/api/v1/products",
                    json={"name": "Laptop Y", "price": 1, "quantity": 1},
                )
        finally:
            set_dependencies(product_service=None)

        assert response.status_code == 500
        assert "password" not in response.json()["detail"]

    @pytest.mark.asyncio
    async def test_create_conflict_on_save_returns_409(self):
        product_service = MagicMock(spec=ProductService)
        product_service.create_product = AsyncMock(side_effect=ProductConflictError("Laptop Y"))
        set_dependencies(product_service=product_service)
        try:
            async with AsyncClient(
                transport=ASGITransport(app=_build_app()), base_url="http://test"
            ) as client:
                response = await client.post(
                    "/api/v1/products",
                    json={"name": "Laptop Y", "price": 1, "quantity": 1},
                )
        finally:
            set_dependencies(product_service=None)

        assert response.status_code == 409


class TestReadEndpoints:
    """Tests for GET /api/v1/products and /api/v1/products/{id}."""

    @pytest.mark.asyncio
    async def test_list_returns_all_products(self, client):
        response = await client.get("/api/v1/products")

        assert response.status_code == 200
        names = [p["name"] for p in response.json()]
        assert names == ["Smartphone X", "Smartwatch Z"]

    @pytest.mark.asyncio
    async def test_get_existing_product(self, client, smartphone):
        response = await client.get(f"/api/v1/products/{smartphone.id}")

        assert response.status_code == 200
        data = response.json()
        assert data["id"] == str(smartphone.id)
        assert data["name"] == "Smartphone X"

    @pytest.mark.asyncio
    async def test_get_missing_product_returns_404(self, client):
        missing_id = uuid4()

        response = await client.get(f"/api/v1/products/{missing_id}")

        assert response.status_code == 404
        assert str(missing_id) in response.json()["detail"]

    @pytest.mark.asyncio
    async def test_get_with_malformed_id_returns_422(self, client):
        response = await client.get("/api/v1/products/not-a-uuid")

        assert response.status_code == 422


class TestUpdateProductEndpoint:
    """Tests for PUT /api/v1/products/{id}."""

    @pytest.mark.asyncio
    async def test_update_returns_updated_product(self, client, smartphone):
        response = await client.put(
            f"/api/v1/products/{smartphone.id}",
            json={
                "name": "Smartphone Xtreme",
                "price": "2500.00",
                "description": "Improved model",
                "quantity": 60,
            },
        )

        assert response.status_code == 200
        data = response.json()
        assert data["id"] == str(smartphone.id)
        assert data["name"] == "Smartphone Xtreme"
        assert data["quantity"] == 60

    @pytest.mark.asyncio
    async def test_update_to_zero_publishes_notification(
        self, client, service, mock_publisher, smartphone
    ):
        response = await client.put(
            f"/api/v1/products/{smartphone.id}",
            json={"name": "Smartphone X", "price": "1999.99", "quantity": 0},
        )
        await service.wait_for_notifications()

        assert response.status_code == 200
        assert response.json()["quantity"] == 0
        mock_publisher.publish.assert_awaited_once_with("stock-zero-queue", "Smartphone X")

    @pytest.mark.asyncio
    async def test_update_missing_product_returns_404(self, client):
        response = await client.put(
            f"/api/v1/products/{uuid4()}",
            json={"name": "Ghost", "price": 1, "quantity": 1},
        )

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_update_quantity_over_int32_returns_422(self, client, smartphone):
        response = await client.put(
            f"/api/v1/products/{smartphone.id}",
            json={"name": "Smartphone X", "price": "1999.99", "quantity": 2**31},
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_update_onto_taken_name_returns_409(self, client, smartphone):
        response = await client.put(
            f"/api/v1/products/{smartphone.id}",
            json={"name": "Smartwatch Z", "price": 1, "quantity": 1},
        )

        assert response.status_code == 409

        response = await client.get(f"/api/v1/products/{smartphone.id}")
        assert response.json()["name"] == "Smartphone X"


class TestDeleteProductEndpoint:
    """Tests for DELETE /api/v1/products/{id}."""

    @pytest.mark.asyncio
    async def test_delete_then_get_returns_404(self, client, smartphone):
        response = await client.delete(f"/api/v1/products/{smartphone.id}")
        assert response.status_code == 204

        response = await client.get(f"/api/v1/products/{smartphone.id}")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_delete_missing_product_returns_404(self, client):
        response = await client.delete(f"/api/v1/products/{uuid4()}")

        assert response.status_code == 404


class TestServiceEndpoints:
    """Tests for health, metrics and request id handling."""

    @pytest.mark.asyncio
    async def test_uninitialized_service_returns_503(self):
        set_dependencies(product_service=None)
        async with AsyncClient(
            transport=ASGITransport(app=_build_app()), base_url="http://test"
        ) as client:
            response = await client.get("/api/v1/products")

        assert response.status_code == 503

    @pytest.mark.asyncio
    async def test_health(self, client):
        response = await client.get("/api/v1/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    @pytest.mark.asyncio
    async def test_metrics_exposes_http_counters(self, client):
        await client.get("/api/v1/products")

        response = await client.get("/api/v1/metrics")

        assert response.status_code == 200
        assert "http_requests_total" in response.text

    @pytest.mark.asyncio
    async def test_request_id_is_echoed(self, client):
        response = await client.get("/api/v1/health", headers={"X-Request-ID": "req-42"})

        assert response.headers["X-Request-ID"] == "req-42"

    @pytest.mark.asyncio
    async def test_request_id_is_generated_when_missing(self, client):
        response = await client.get("/api/v1/health")

        assert response.headers["X-Request-ID"]
