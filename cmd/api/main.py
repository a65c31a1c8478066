"""
FastAPI Application Entry Point.

REST API server for the product review service.
"""
import uuid
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Union

import uvicorn
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv

from config import Settings, get_settings
from internal.transport.http.v1.handlers import router, set_dependencies
from internal.transport.http.middleware import MetricsMiddleware
from internal.infrastructure.kafka import KafkaEventPublisher
from internal.infrastructure.postgres import (
    PostgresAuditRepository,
    PostgresProductRepository,
    create_pool,
)
from internal.infrastructure.redis import RedisEventPublisher
from internal.usecase import (
    ApproveProductUseCase,
    CreateProductUseCase,
    GetAllProductsUseCase,
    GetProductAuditTrailUseCase,
    GetProductUseCase,
    UpdateProductUseCase,
)
from pkg.logger.logger import setup_logging, get_logger, set_actor_role, set_request_id


# Load environment variables
load_dotenv()

settings = get_settings()

# Setup logging
setup_logging(
    level=settings.log_level,
    json_format=settings.log_format == "json",
    service=settings.app_name,
)

logger = get_logger(__name__)


def build_publisher(settings: Settings) -> Union[KafkaEventPublisher, RedisEventPublisher]:
    """
    Create the event publisher selected by EVENT_TRANSPORT.

    Args:
        settings: Application settings.

    Returns:
        Publisher that still has to be started.
    """
    if settings.event_transport == "redis":
        return RedisEventPublisher(redis_url=settings.redis_url)
    return KafkaEventPublisher(
        bootstrap_servers=settings.kafka_bootstrap_servers,
        client_id=settings.kafka_client_id,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    Handles startup and shutdown of resources.
    """
    logger.info("Starting Product Service API...", event_transport=settings.event_transport)

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

    publisher = build_publisher(settings)
    try:
        await publisher.start()
    except Exception as e:
        logger.error("Failed to start event publisher", error=str(e))
        await db_pool.close()
        raise

    repository = PostgresProductRepository(db_pool)
    audit_repository = PostgresAuditRepository(db_pool)
    topic = settings.events_topic

    set_dependencies(
        create_use_case=CreateProductUseCase(repository, audit_repository, publisher, topic),
        update_use_case=UpdateProductUseCase(repository, audit_repository, publisher, topic),
        approve_use_case=ApproveProductUseCase(repository, audit_repository, publisher, topic),
        get_use_case=GetProductUseCase(repository),
        list_use_case=GetAllProductsUseCase(repository),
        audit_trail_use_case=GetProductAuditTrailUseCase(repository, audit_repository),
    )

    logger.info("Product Service API started successfully")

    try:
        yield
    finally:
        logger.info("Shutting down Product Service API...")
        await publisher.stop()
        await db_pool.close()
        logger.info("Product Service API shutdown complete")


# Create FastAPI application
app = FastAPI(
    title="Product Review Service API",
    description="Product catalog with provider submissions and editor review",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Metrics middleware
app.add_middleware(MetricsMiddleware)


# Request ID middleware
@app.middleware("http")
async def request_id_middleware(request: Request, call_next) -> Response:
    """
    Add request ID to context for logging and tracing.
    """
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())

    set_request_id(request_id)
    set_actor_role(None)

    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id

    return response


# Include routers
app.include_router(router)


# Root endpoint
@app.get("/")
async def root() -> dict:
    """Root endpoint with service information."""
    return {
        "service": settings.app_name,
        "version": "1.0.0",
        "status": "running",
    }


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
    )
