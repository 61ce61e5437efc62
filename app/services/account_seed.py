"""Account seeding from a CSV file."""

import csv
import logging
import pathlib

from sqlalchemy.orm import Session

from app.models.account import Account
from app.repositories.account_repository import AccountRepository

logger = logging.getLogger(__name__)


def seed_accounts_from_csv(db: Session, path: str | pathlib.Path) -> int:
    """
    Load accounts from an ``AccountId,FirstName,LastName`` CSV file.

    Rows that cannot be turned into an account and accounts that already
    exist are skipped. Returns the number of accounts added.
    """
    path_obj = pathlib.Path(path)
    if not path_obj.exists():
        logger.warning("Seed file not found at %s. Skipping account seeding.", path_obj)
        return 0

    repository = AccountRepository(db)
    added = 0
    seen: set[int] = set()
    with path_obj.open("r", encoding="utf-8-sig", newline="") as handle:
        reader = csv.DictReader(handle)
        for row in reader:
            account = _to_account(row)
            if account is None:
                logger.warning("Skipping malformed account row %s in %s", reader.line_num, path_obj)
                continue
            if account.account_id in seen or repository.exists(account.account_id):
                continue
            seen.add(account.account_id)
            repository.add(account)
            added += 1

    repository.save_changes()
    logger.info("Seeded %s accounts from %s", added, path_obj)
    return added


def _to_account(row: dict[str, str | None]) -> Account | None:
    account_id = (row.get("AccountId") or "").strip()
    if not account_id.isascii() or not account_id.isdigit():
        return None
    try:
        return Account(
            account_id=int(account_id),
            first_name=(row.get("FirstName") or "").strip(),
            last_name=(row.get("LastName") or "").strip(),
        )
    except ValueError:
        return None
