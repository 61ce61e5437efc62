"""Seed script to populate the database with accounts from a CSV file."""

import sys

from app.core.config import settings
from app.core.database import Base, SessionLocal, engine
from app.core.logging import configure_logging
from app.models import account, meter_reading  # noqa: F401
from app.services.account_seed import seed_accounts_from_csv


def seed_database(path: str) -> None:
    """Create tables if needed and load accounts from ``path``."""
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        added = seed_accounts_from_csv(db, path)
    finally:
        db.close()
    print(f"Seeded {added} accounts from {path}")


if __name__ == "__main__":
    configure_logging(settings.LOG_LEVEL)
    seed_database(sys.argv[1] if len(sys.argv) > 1 else settings.SEED_ACCOUNTS_FILE)
