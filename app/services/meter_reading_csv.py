"""Lazy CSV parsing of meter reading uploads."""

import csv
import io
import logging
from collections.abc import Iterator
from typing import BinaryIO

from app.schemas.meter_reading_upload import MeterReadingCsvRow

logger = logging.getLogger(__name__)

ACCOUNT_ID_COLUMN = "AccountId"
READING_DATETIME_COLUMN = "MeterReadingDateTime"
READ_VALUE_COLUMN = "MeterReadValue"
REQUIRED_COLUMNS = (ACCOUNT_ID_COLUMN, READING_DATETIME_COLUMN, READ_VALUE_COLUMN)

EMPTY_FIELDS_ERROR = "one or more fields are empty"
MISSING_FIELD_ERROR = "Missing field"


def parse_meter_readings(
    stream: BinaryIO,
    encoding: str = "utf-8-sig",
) -> Iterator[MeterReadingCsvRow]:
    """
    Yield one row record per CSV data row, in file order.

    The header row is row 1, so data rows are numbered from 2. Columns are
    matched by name, ignoring case and surrounding whitespace; extra columns
    are ignored. Rows that cannot be read are yielded with a parse error
    instead of raising, and never end the sequence early. When the header
    lacks a required column every data row carries a missing-field error
    and no fields.

    The caller's stream is left open.
    """
    text = io.TextIOWrapper(stream, encoding=encoding, errors="replace", newline="")
    try:
        reader = csv.reader(text)
        header = _read_header(reader)
        if header is None:
            return

        positions = _column_positions(header)
        missing = [name for name in REQUIRED_COLUMNS if name not in positions]
        missing_error = None
        if missing:
            missing_error = f"{MISSING_FIELD_ERROR}: {', '.join(missing)}"
            logger.warning("CSV header is missing required columns %s", missing)

        row_number = 1
        while True:
            try:
                values = next(reader)
            except StopIteration:
                break
            except csv.Error as exc:
                row_number += 1
                logger.warning("CSV parsing error at data row %s: %s", row_number, exc)
                yield MeterReadingCsvRow(
                    row_number=row_number,
                    parse_error=f"CSV parsing error: {exc}",
                )
                continue

            if not values:
                continue

            row_number += 1
            if missing_error is not None:
                # No field can be read by name, so none are extracted
                yield MeterReadingCsvRow(row_number=row_number, parse_error=missing_error)
                continue
            yield _build_row(row_number, values, positions)
    finally:
        text.detach()


def _read_header(reader: Iterator[list[str]]) -> list[str] | None:
    for values in reader:
        if not _is_blank(values):
            return values
    return None


def _column_positions(header: list[str]) -> dict[str, int]:
    normalized = {name.strip().lower(): pos for pos, name in reversed(list(enumerate(header)))}
    return {
        name: normalized[name.lower()]
        for name in REQUIRED_COLUMNS
        if name.lower() in normalized
    }


def _build_row(
    row_number: int,
    values: list[str],
    positions: dict[str, int],
) -> MeterReadingCsvRow:
    account_id, reading_datetime, read_value = (
        _field(values, positions.get(name)) for name in REQUIRED_COLUMNS
    )

    parse_error = None
    if any(not field for field in (account_id, reading_datetime, read_value)):
        parse_error = EMPTY_FIELDS_ERROR
        logger.warning("CSV data row %s has empty fields", row_number)

    return MeterReadingCsvRow(
        row_number=row_number,
        account_id_text=account_id,
        reading_datetime_text=reading_datetime,
        read_value_text=read_value,
        parse_error=parse_error,
    )


def _field(values: list[str], position: int | None) -> str | None:
    if position is None or position >= len(values):
        return None
    return values[position].strip()


def _is_blank(values: list[str]) -> bool:
    return not any(value.strip() for value in values)
