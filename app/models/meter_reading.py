"""MeterReading database model - a single reading owned by an account."""

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base

if TYPE_CHECKING:
    from app.models.account import Account


class MeterReading(Base):
    """Meter reading entry. Never modified once created."""

    __tablename__ = "meter_readings"
    __table_args__ = (
        UniqueConstraint(
            "account_id",
            "reading_timestamp",
            "value",
            name="uq_meter_readings_account_timestamp_value",
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)

    account_id: Mapped[int] = mapped_column(
        ForeignKey("accounts.account_id", ondelete="CASCADE"),
        index=True,
    )
    reading_timestamp: Mapped[datetime] = mapped_column(index=True)  # Minute precision
    value: Mapped[int]  # 0..99999

    created_at: Mapped[datetime] = mapped_column(default=lambda: datetime.now(UTC))

    # Relationships
    account: Mapped["Account"] = relationship(back_populates="readings")

    @property
    def identity(self) -> tuple[int, datetime, int]:
        """Natural key used for duplicate detection."""
        return (self.account_id, self.reading_timestamp, self.value)

    def __repr__(self) -> str:
        return (
            f"MeterReading(account_id={self.account_id!r}, "
            f"reading_timestamp={self.reading_timestamp!r}, value={self.value!r})"
        )
