"""Bookkeeping API -- FastAPI application."""
from contextlib import asynccontextmanager
from datetime import datetime, timezone
import logging

from fastapi import FastAPI

from bookkeeper import __version__
from bookkeeper.config import settings
from bookkeeper.database import async_engine
from bookkeeper.errors import register_error_handlers
from bookkeeper.middleware.http import CORSPreflightMiddleware, RequestLogMiddleware

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Starting Bookkeeping API ({settings.ENVIRONMENT})...")

    # Verify DB connection
    try:
        async with async_engine.begin() as conn:
            await conn.exec_driver_sql("SELECT 1")
        logger.info("Database connection verified")
    except Exception as e:
        logger.error(f"Database connection failed: {e}")

    yield

    await async_engine.dispose()
    logger.info("Bookkeeping API shut down")


app = FastAPI(
    title="Bookkeeping API",
    description="International bookkeeping -- organizations, chart of accounts, journal entries and audit trail",
    version=__version__,
    lifespan=lifespan,
)

# Last added runs first: preflights are answered before logging and routing
app.add_middleware(RequestLogMiddleware)
app.add_middleware(CORSPreflightMiddleware)

register_error_handlers(app)

# Import and register routers
from bookkeeper.routes import (
    accounts,
    audit_logs,
    auth,
    custom_fields,
    datev,
    fiscal_periods,
    journal,
    organizations,
    reference,
    reports,
)

app.include_router(auth.router)
app.include_router(reference.router)
app.include_router(organizations.router)
app.include_router(journal.router)
app.include_router(fiscal_periods.router)
app.include_router(custom_fields.org_router)
app.include_router(custom_fields.router)
app.include_router(reports.router)
app.include_router(datev.router)
app.include_router(accounts.router)
app.include_router(audit_logs.router)


@app.get("/api/health")
async def health_check():
    return {
        "status": "ok",
        "message": "Bookkeeping Backend API",
        "version": __version__,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "dataStatus": {"journalEntries": 0, "accounts": 0},
    }
