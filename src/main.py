"""FastAPI application entry point — wires everything together.

Usage:
    python -m src.main

Starts the API with the audit hook installed and, unless disabled, seeds
the fixed roles and their default claims.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
import uvicorn
from fastapi import FastAPI

from src.api.errors import register_exception_handlers
from src.api.routes import router as api_router
from src.authorization.claims import ClaimsService
from src.authorization.context import SYSTEM_CONTEXT
from src.authorization.store import SqlAlchemyRoleClaimStore
from src.config import settings
from src.db.cache import RedisCache
from src.db.engine import db_lifespan, redis_client, session_scope
from src.db.seeder import DatabaseSeeder

# ── Logging setup ────────────────────────────────────────────────────

logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s %(levelname)-8s %(name)s — %(message)s",
    stream=sys.stdout,
)
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.dev.ConsoleRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
)

logger = logging.getLogger(__name__)


async def seed_database() -> None:
    """Create missing roles and assign default claims."""
    # Seeding has no actor, so it leaves no audit records.
    async with session_scope(SYSTEM_CONTEXT) as db:
        store = SqlAlchemyRoleClaimStore(db)
        seeder = DatabaseSeeder(store, ClaimsService(store, RedisCache(redis_client)))
        report = await seeder.seed()
    if report.missing_roles:
        logger.warning("Roles missing during claim seeding: %s", sorted(report.missing_roles))


# ── FastAPI lifespan ─────────────────────────────────────────────────


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application startup and shutdown lifecycle."""
    logger.info("Starting Odary API (env=%s)", settings.environment)

    async with db_lifespan():
        logger.info("Database initialized, audit listener installed")

        if settings.seed_on_startup:
            await seed_database()
            logger.info("Roles and default claims seeded")
        else:
            logger.info("SEED_ON_STARTUP disabled — skipping seeding")

        try:
            yield
        finally:
            logger.info("Shutting down Odary API...")

    logger.info("Odary API shutdown complete")


# ── FastAPI app ──────────────────────────────────────────────────────

app = FastAPI(
    title="Odary API",
    description="Multi-tenant dental practice management",
    version="0.1.0",
    lifespan=lifespan,
)
register_exception_handlers(app)
app.include_router(api_router)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {
        "status": "ok",
        "environment": settings.environment,
    }


# ── Entry point ──────────────────────────────────────────────────────

if __name__ == "__main__":
    uvicorn.run(
        "src.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.environment == "development",
        log_level=settings.log_level.lower(),
    )
