"""API dependencies."""

from functools import partial

from fastapi import Depends
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import get_db
from app.repositories.account_repository import AccountRepository
from app.services.meter_reading_csv import parse_meter_readings
from app.services.meter_reading_upload import MeterReadingUploadService


def get_account_repository(db: Session = Depends(get_db)) -> AccountRepository:
    """Account repository bound to the request's database session."""
    return AccountRepository(db)


def get_upload_service(
    repository: AccountRepository = Depends(get_account_repository),
) -> MeterReadingUploadService:
    """Upload service using the configured CSV encoding."""
    return MeterReadingUploadService(
        repository,
        parser=partial(parse_meter_readings, encoding=settings.CSV_ENCODING),
    )
