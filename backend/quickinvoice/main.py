"""FastAPI application entry point."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from quickinvoice.api.v1 import health, orders, sellers
from quickinvoice.config import settings
from quickinvoice.db import dispose_engine
from quickinvoice.logging import setup_logging

# Configure logging before anything else
setup_logging()

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan handler for startup/shutdown events."""
    logger.info("Starting QuickInvoice API", debug=settings.debug, product=settings.product_name)

    yield

    logger.info("Shutting down QuickInvoice API")
    await dispose_engine()
    logger.info("Database connections disposed")


app = FastAPI(
    title="QuickInvoice API",
    description="Orders, invoice PDFs and share links for small sellers",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.backend_cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition", "X-Invoice-Warnings", "Retry-After"],
)

# API routes
app.include_router(health.router, prefix="/api/v1", tags=["health"])
app.include_router(sellers.router, prefix="/api/v1")
app.include_router(orders.router, prefix="/api/v1")
