"""FastAPI application entry point."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.api.routes import accounts, health, meter_reading_uploads
from app.core.config import settings
from app.core.database import Base, SessionLocal, engine
from app.core.logging import configure_logging

# Import models for Base.metadata.create_all - order matters for foreign keys
from app.models import (
    account,  # noqa: F401
    meter_reading,  # noqa: F401
)
from app.services.account_seed import seed_accounts_from_csv

configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan manager."""
    # Startup: create tables and load seed accounts
    if settings.CREATE_TABLES_ON_STARTUP:
        Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        seed_accounts_from_csv(db, settings.SEED_ACCOUNTS_FILE)
    finally:
        db.close()
    logger.info("%s %s started", settings.PROJECT_NAME, settings.VERSION)
    yield


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    description="API endpoints for uploading meter readings.",
    lifespan=lifespan,
)


@app.get("/")
def root() -> dict[str, str]:
    """Service name and version."""
    return {"message": settings.PROJECT_NAME, "version": settings.VERSION}


# Include API routers
app.include_router(health.router, prefix="/api", tags=["health"])
app.include_router(accounts.router, prefix="/api")
app.include_router(meter_reading_uploads.router, prefix="/api")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )
