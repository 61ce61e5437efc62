"""Enum definitions for meter reading outcomes."""

from enum import Enum


class ReadingOutcome(str, Enum):
    """Result of offering a new reading to an account."""

    ACCEPTED = "accepted"
    REJECTED_ORDER = "rejected_order"  # Older than the latest held reading
    REJECTED_FORMAT = "rejected_format"  # Value is not NNNNN
    REJECTED_DUPLICATE = "rejected_duplicate"  # Same account, timestamp and value
