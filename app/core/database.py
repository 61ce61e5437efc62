"""Database engine and sessions for the meter reading store (accounts and their readings)."""

from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from app.core.config import settings

# Create SQLAlchemy engine
engine = create_engine(
    settings.DATABASE_URL,
    connect_args={"check_same_thread": False},  # Needed for SQLite
)

# Nothing is written before an explicit commit
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


# Base class for models
class Base(DeclarativeBase):
    """Declarative base for the account and meter reading tables."""

    pass


def get_db():
    """Request-scoped session; an upload stages its readings here until the batch commit."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
