"""Tests for database session configuration."""

from sqlalchemy.orm import Session

from app.core.database import SessionLocal, get_db


def test_sessions_do_not_autoflush():
    """Test staged readings stay out of the database until the batch commit."""
    assert SessionLocal.kw["autoflush"] is False


def test_get_db_yields_and_closes_session():
    """Test the request dependency yields a session and closes it afterwards."""
    dependency = get_db()
    db = next(dependency)

    assert isinstance(db, Session)
    dependency.close()
    assert not db.in_transaction()
