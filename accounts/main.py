"""Accounts service: FastAPI application."""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import logging

from accounts.config import settings
from accounts.database import async_engine, create_schema

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

SERVICE_NAME = "accounts-service"
SERVICE_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting accounts service...")

    if settings.CREATE_SCHEMA:
        await create_schema()
        logger.info("Database schema created")

    # Verify DB connection
    try:
        async with async_engine.begin() as conn:
            await conn.exec_driver_sql("SELECT 1")
        logger.info("Database connection verified")
    except Exception as e:
        logger.error(f"Database connection failed: {e}")

    logger.info("Accounts service started successfully")
    yield

    # Shutdown
    await async_engine.dispose()
    logger.info("Accounts service shut down")


app = FastAPI(
    title="Accounts Service",
    description="Account management with balances and credit/debit transactions",
    version=SERVICE_VERSION,
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Per-request logging for the account routes
from accounts.middleware.request_logging import RequestLoggingMiddleware

app.add_middleware(RequestLoggingMiddleware, prefixes=["/accounts"])

# Import and register routers
from accounts.routes import accounts

app.include_router(accounts.router)


@app.get("/health")
async def health_check():
    return {"status": "healthy", "service": SERVICE_NAME, "version": SERVICE_VERSION}
