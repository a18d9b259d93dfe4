"""Storefront API - FastAPI application entry point.

Invariants:
    - Routes registered explicitly, one router per resource
    - Global error handlers map StorefrontError to structured JSON responses
    - CORS configured from settings
    - Every request passes through the access-log middleware (X-Request-Id)
    - Database initialized on startup and disposed on shutdown via lifespan
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import storefront.infrastructure.database as database
from storefront.api.error_handlers import register_error_handlers
from storefront.api.routes import (
    calculators, categories, contact_messages, health, invoices, products, proposals,
    seo, store_settings, wishlists,
)
from storefront.config import get_settings
from storefront.infrastructure.observability import log_requests, setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    manager = database.init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
        echo=settings.database_echo,
    )
    if settings.database_auto_create:
        await manager.create_schema()
        logger.info("Database schema created from models")
    logger.info("Storefront API started")
    yield
    if database.db_manager is not None:
        await database.db_manager.dispose()
    logger.info("Storefront API shutting down")


app = FastAPI(title="Storefront API", version="1.0.0", lifespan=lifespan)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.middleware("http")(log_requests)

app.include_router(health.router)
app.include_router(categories.router)
app.include_router(products.router)
app.include_router(seo.router)
app.include_router(store_settings.router)
app.include_router(calculators.router)
app.include_router(contact_messages.router)
app.include_router(proposals.router)
app.include_router(invoices.router)
app.include_router(wishlists.router)

register_error_handlers(app)
