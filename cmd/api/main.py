"""
FastAPI Application Entry Point.

REST API server for the Merchandise Catalog Service.
"""
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config.settings import get_settings
from internal.infrastructure.kafka.producer import KafkaProducer
from internal.infrastructure.postgres.repository import (
    PostgresProductRepository,
    create_pool,
)
from internal.transport.http.middleware import MetricsMiddleware, RequestIdMiddleware
from internal.transport.http.v1.handlers import router, set_dependencies
from internal.usecase.product_service import ProductService
from pkg.logger.logger import setup_logging, get_logger


# Load environment variables
load_dotenv()

settings = get_settings()

setup_logging(
    level=settings.log_level,
    json_format=settings.log_format == "json",
    service=settings.app_name,
)

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    Handles startup and shutdown of resources.
    """
    logger.info("Starting Merchandise Catalog API...")

    try:
        db_pool = await create_pool(
            settings.database_url,
            min_size=settings.db_pool_min_size,
            max_size=settings.db_pool_max_size,
        )
        logger.info("Database pool created")
    except Exception as e:
        logger.error("Failed to create database pool", error=str(e))
        raise

    # Stock-zero notifications are best-effort: run without them if Kafka is down
    producer = KafkaProducer(
        bootstrap_servers=settings.kafka_bootstrap_servers,
        client_id=settings.kafka_client_id,
    )
    try:
        await producer.start()
    except Exception as e:
        logger.warning(
            "Failed to connect to Kafka, stock-zero notifications disabled",
            error=str(e),
        )
        producer = None

    product_service = ProductService(
        repository=PostgresProductRepository(db_pool),
        publisher=producer,
        stock_zero_topic=settings.kafka_stock_zero_topic,
    )
    set_dependencies(product_service=product_service)

    logger.info("Merchandise Catalog API started successfully")

    yield

    logger.info("Shutting down Merchandise Catalog API...")

    set_dependencies(product_service=None)
    await product_service.wait_for_notifications()

    if producer:
        await producer.stop()

    await db_pool.close()

    logger.info("Merchandise Catalog API shutdown complete")


app = FastAPI(
    title="Merchandise Catalog API",
    description="API for managing merchandise: registration, editing and deletion of products",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(MetricsMiddleware)
app.add_middleware(RequestIdMiddleware)

app.include_router(router)


@app.get("/")
async def root() -> dict:
    """Root endpoint with service information."""
    return {
        "service": settings.app_name,
        "version": "1.0.0",
        "status": "running",
    }


def main() -> None:
    """Run the API server."""
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
