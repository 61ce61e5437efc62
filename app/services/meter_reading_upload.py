"""Meter reading upload service - validates CSV rows and commits them as one batch."""

import logging
import re
import threading
from collections.abc import Callable, Iterable
from datetime import datetime
from typing import BinaryIO

from app.models.account import MAX_ACCOUNT_ID, Account
from app.repositories.account_repository import AccountRepository
from app.schemas.meter_reading_upload import MeterReadingCsvRow, MeterReadingUploadResult
from app.services.exceptions import UploadCanceledError
from app.services.meter_reading_csv import parse_meter_readings

logger = logging.getLogger(__name__)

READING_DATETIME_FORMAT = "%d/%m/%Y %H:%M"
_READING_DATETIME_PATTERN = re.compile(r"[0-9]{2}/[0-9]{2}/[0-9]{4} [0-9]{2}:[0-9]{2}")
_ACCOUNT_ID_PATTERN = re.compile(r"[0-9]+")

RowParser = Callable[[BinaryIO], Iterable[MeterReadingCsvRow]]


def parse_account_id(text: str | None) -> int | None:
    """Parse an account id in ``1..MAX_ACCOUNT_ID``, or return None."""
    if text is None or not _ACCOUNT_ID_PATTERN.fullmatch(text):
        return None
    account_id = int(text)
    return account_id if 0 < account_id <= MAX_ACCOUNT_ID else None


def parse_reading_datetime(text: str | None) -> datetime | None:
    """Parse an exact ``dd/mm/yyyy HH:MM`` timestamp, or return None."""
    if text is None or not _READING_DATETIME_PATTERN.fullmatch(text):
        return None
    try:
        return datetime.strptime(text, READING_DATETIME_FORMAT)
    except ValueError:
        return None


def format_error_prefix(row: MeterReadingCsvRow) -> str:
    """Prefix identifying a row in error messages."""
    account_id, reading_datetime, read_value = (
        "NULL" if field is None else field for field in row.raw_fields
    )
    return (
        f"Row {row.row_number} (AccId: {account_id}, "
        f"ReadDate: {reading_datetime}, ReadVal: {read_value}):"
    )


class MeterReadingUploadService:
    """Processes an uploaded CSV of meter readings against account aggregates."""

    def __init__(
        self,
        repository: AccountRepository,
        parser: RowParser = parse_meter_readings,
    ) -> None:
        self._repository = repository
        self._parser = parser

    def process_upload(
        self,
        stream: BinaryIO,
        file_name: str,
        cancel_event: threading.Event | None = None,
    ) -> MeterReadingUploadResult:
        """
        Validate every row of an uploaded CSV and save accepted readings.

        Rows are checked in file order and each failure is recorded against
        its row without stopping the upload. Accepted readings are committed
        together at the end; if that commit fails nothing is saved and every
        row counts as failed.

        Args:
            stream: Binary CSV stream
            file_name: Original name of the uploaded file
            cancel_event: Checked between rows; when set the upload is abandoned

        Returns:
            Saved/failed counts and the error messages

        Raises:
            UploadCanceledError: If ``cancel_event`` is set before the commit

        """
        result = MeterReadingUploadResult(file_name=file_name)
        accounts: dict[int, Account | None] = {}
        dirty_accounts: dict[int, Account] = {}
        batch_keys: set[tuple[int, datetime, str]] = set()

        total_rows = 0
        syntax_failed = 0
        domain_failed = 0
        accepted = 0

        for row in self._parser(stream):
            self._check_canceled(cancel_event, file_name)
            total_rows += 1
            prefix = format_error_prefix(row)

            if not row.is_parsed:
                syntax_failed += 1
                result.errors.append(f"{prefix} Parse Error - {row.parse_error}")
                logger.warning(
                    "Parsing failed for row %s in [%s]: %s",
                    row.row_number,
                    file_name,
                    row.parse_error,
                )
                continue

            account_id = parse_account_id(row.account_id_text)
            if account_id is None:
                syntax_failed += 1
                result.errors.append(f"{prefix} Invalid Account ID format [{row.account_id_text}].")
                continue

            reading_timestamp = parse_reading_datetime(row.reading_datetime_text)
            if reading_timestamp is None:
                syntax_failed += 1
                result.errors.append(
                    f"{prefix} Invalid Meter Reading Date Time format "
                    f"[{row.reading_datetime_text}]. Expected dd/MM/yyyy HH:mm."
                )
                continue

            raw_value = row.read_value_text
            if raw_value is None or not raw_value.strip():
                syntax_failed += 1
                result.errors.append(f"{prefix} Meter Read Value is missing.")
                continue

            batch_key = (account_id, reading_timestamp, raw_value)
            if batch_key in batch_keys:
                syntax_failed += 1
                result.errors.append(f"{prefix} Duplicate entry within this batch.")
                continue
            batch_keys.add(batch_key)

            if account_id not in accounts:
                accounts[account_id] = self._repository.get_by_id(account_id)
            account = accounts[account_id]
            if account is None:
                syntax_failed += 1
                result.errors.append(f"{prefix} Invalid Account ID [{account_id}]")
                continue

            try:
                outcome = account.add_meter_reading(reading_timestamp, raw_value)
            except Exception as exc:  # noqa: BLE001
                domain_failed += 1
                result.errors.append(f"{prefix} Unexpected domain error: {exc}")
                logger.exception(
                    "Unexpected domain error for row %s, Account [%s] in [%s]",
                    row.row_number,
                    account_id,
                    file_name,
                )
                continue

            if not outcome.accepted:
                domain_failed += 1
                result.errors.append(f"{prefix} {outcome.reason}")
                logger.warning(
                    "Domain validation failed for row %s, Account [%s] in [%s]: %s",
                    row.row_number,
                    account_id,
                    file_name,
                    outcome.reason,
                )
                continue

            accepted += 1
            dirty_accounts.setdefault(account_id, account)

        self._check_canceled(cancel_event, file_name)
        result.failed_count = syntax_failed + domain_failed

        if dirty_accounts:
            logger.info(
                "Saving changes for %s accounts from [%s].", len(dirty_accounts), file_name
            )
            try:
                for account in dirty_accounts.values():
                    self._repository.update(account)
                self._repository.save_changes()
            except Exception as exc:  # noqa: BLE001
                logger.exception("Failed to save batch for accounts from [%s].", file_name)
                result.errors.append(
                    "Critical Error: Failed to save meter readings to the database "
                    f"due to a batch update failure: {exc}"
                )
                result.saved_count = 0
                result.failed_count = total_rows
            else:
                result.saved_count = accepted
                logger.info(
                    "Saved changes for accounts from [%s]. Total readings saved: %s",
                    file_name,
                    accepted,
                )
        else:
            logger.info("No accounts required updates after processing file [%s].", file_name)
            result.saved_count = accepted

        logger.info(
            "[%s] processed. Total Rows: %s, Saved Readings: %s, Failed Readings: %s",
            file_name,
            total_rows,
            result.saved_count,
            result.failed_count,
        )
        return result

    def _check_canceled(self, cancel_event: threading.Event | None, file_name: str) -> None:
        if cancel_event is None or not cancel_event.is_set():
            return
        logger.warning("Upload for [%s] was canceled; discarding staged changes.", file_name)
        self._repository.discard_changes()
        raise UploadCanceledError(f"Upload of [{file_name}] was canceled.")
