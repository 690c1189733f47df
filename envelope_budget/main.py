"""
Envelope Budget: FastAPI Application.

This is the entry point for the application.
All routers are registered here.
"""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from envelope_budget.config import get_settings
from envelope_budget.logging_config import configure_logging
from envelope_budget.models import Base
from envelope_budget.models.base import SessionLocal, engine
from envelope_budget.services.seed import seed_defaults
from envelope_budget.api.health import router as health_router
from envelope_budget.api.accounts import router as accounts_router
from envelope_budget.api.envelopes import router as envelopes_router
from envelope_budget.api.transactions import router as transactions_router
from envelope_budget.api.reports import router as reports_router

settings = get_settings()
logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings.LOG_LEVEL, json=settings.LOG_JSON)
    if settings.AUTO_CREATE_TABLES:
        Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        if seed_defaults(db, settings):
            db.commit()
    finally:
        db.close()

    logger.info("startup_complete", environment=settings.ENVIRONMENT)
    yield


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Double-entry envelope budgeting ledger",
    lifespan=lifespan,
)

# Register routers
app.include_router(health_router)
app.include_router(accounts_router)
app.include_router(envelopes_router)
app.include_router(transactions_router)
app.include_router(reports_router)
