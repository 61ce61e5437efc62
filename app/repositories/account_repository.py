"""Account repository backed by a SQLAlchemy session."""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from app.models.account import Account
from app.services.exceptions import BatchCommitError

logger = logging.getLogger(__name__)


class AccountRepository:
    """Database operations for accounts and their readings."""

    def __init__(self, db: Session) -> None:
        self._db = db

    def get_by_id(self, account_id: int) -> Account | None:
        """Get an account with its readings loaded."""
        return (
            self._db.query(Account)
            .options(selectinload(Account.readings))
            .filter(Account.account_id == account_id)
            .first()
        )

    def exists(self, account_id: int) -> bool:
        """Check whether an account exists."""
        return (
            self._db.query(Account.account_id)
            .filter(Account.account_id == account_id)
            .first()
            is not None
        )

    def add(self, account: Account) -> None:
        """Stage a new account."""
        self._db.add(account)

    def update(self, account: Account) -> None:
        """Stage an account, including readings added to it, for the next commit."""
        self._db.add(account)

    def save_changes(self) -> None:
        """
        Commit all staged accounts in one transaction.

        Raises:
            BatchCommitError: If the commit fails. Nothing staged is kept.

        """
        try:
            self._db.commit()
        except SQLAlchemyError as exc:
            self._db.rollback()
            logger.error("A database error occurred while saving changes: %s", exc)
            raise BatchCommitError(str(exc)) from exc

    def discard_changes(self) -> None:
        """Drop everything staged since the last commit."""
        self._db.rollback()
