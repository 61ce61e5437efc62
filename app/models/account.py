"""Account database model - aggregate root for meter readings."""

import re
from dataclasses import dataclass
from datetime import UTC, datetime

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from app.core.database import Base
from app.models.enums import ReadingOutcome
from app.models.meter_reading import MeterReading

READ_VALUE_PATTERN = re.compile(r"[0-9]{1,5}")
DISPLAY_DATETIME_FORMAT = "%d/%m/%Y %H:%M"
MAX_ACCOUNT_ID = 2**31 - 1  # INTEGER column range


@dataclass(frozen=True)
class AddReadingResult:
    """Outcome of ``Account.add_meter_reading``."""

    outcome: ReadingOutcome
    reason: str | None = None
    reading: MeterReading | None = None

    @property
    def accepted(self) -> bool:
        return self.outcome == ReadingOutcome.ACCEPTED

    @classmethod
    def rejected(cls, outcome: ReadingOutcome, reason: str) -> "AddReadingResult":
        return cls(outcome=outcome, reason=reason)


class Account(Base):
    """Account entity - owns its meter readings and enforces their rules."""

    __tablename__ = "accounts"

    account_id: Mapped[int] = mapped_column(primary_key=True, autoincrement=False)
    first_name: Mapped[str] = mapped_column(String(100))
    last_name: Mapped[str] = mapped_column(String(100))

    # Metadata
    created_at: Mapped[datetime] = mapped_column(default=lambda: datetime.now(UTC))

    # Relationships
    readings: Mapped[list["MeterReading"]] = relationship(
        back_populates="account",
        cascade="all, delete-orphan",
    )

    @validates("account_id")
    def validate_account_id(self, key: str, value: int) -> int:
        """Validate the account id is a positive integer the store can hold."""
        if value is None or not 0 < value <= MAX_ACCOUNT_ID:
            raise ValueError(f"Invalid Account Id: '{value}'")
        return value

    @validates("first_name", "last_name")
    def validate_name(self, key: str, value: str) -> str:
        """Validate first/last names are not blank."""
        if not value or not value.strip():
            raise ValueError("First name / Last name cannot be empty.")
        return value

    def latest_reading(self) -> MeterReading | None:
        """Return the reading with the latest timestamp, if any."""
        if not self.readings:
            return None
        return max(self.readings, key=lambda r: r.reading_timestamp)

    def add_meter_reading(self, reading_timestamp: datetime, raw_value: str) -> AddReadingResult:
        """
        Offer a new reading to the account.

        Rules are checked in order and the first failing one decides the
        outcome: chronological order against the latest held reading, the
        NNNNN value format, then duplicate (account, timestamp, value).
        Rejected readings leave the account untouched.

        Args:
            reading_timestamp: When the reading was taken
            raw_value: Reading value as it appeared in the source

        Returns:
            The outcome, with the new reading when accepted

        """
        latest = self.latest_reading()
        if latest is not None and reading_timestamp < latest.reading_timestamp:
            return AddReadingResult.rejected(
                ReadingOutcome.REJECTED_ORDER,
                f"New meter reading date ({reading_timestamp:{DISPLAY_DATETIME_FORMAT}}) "
                "is older than the latest existing meter reading date "
                f"({latest.reading_timestamp:{DISPLAY_DATETIME_FORMAT}}).",
            )

        if raw_value is None or not READ_VALUE_PATTERN.fullmatch(raw_value):
            return AddReadingResult.rejected(
                ReadingOutcome.REJECTED_FORMAT,
                f"Invalid meter read value format: '{raw_value}'. Must be NNNNN (1-5 digits).",
            )

        try:
            value = int(raw_value)
        except ValueError:
            return AddReadingResult.rejected(
                ReadingOutcome.REJECTED_FORMAT,
                f"Meter read value '{raw_value}' is not an integer.",
            )

        identity = (self.account_id, reading_timestamp, value)
        if any(r.identity == identity for r in self.readings):
            return AddReadingResult.rejected(
                ReadingOutcome.REJECTED_DUPLICATE,
                "Duplicate meter reading.",
            )

        reading = MeterReading(
            account_id=self.account_id,
            reading_timestamp=reading_timestamp,
            value=value,
        )
        self.readings.append(reading)
        return AddReadingResult(outcome=ReadingOutcome.ACCEPTED, reading=reading)
