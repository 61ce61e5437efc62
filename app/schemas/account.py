"""Account Pydantic schemas for responses."""

from datetime import datetime

from pydantic import BaseModel


class MeterReadingResponse(BaseModel):
    """Schema for a meter reading in an account response."""

    reading_timestamp: datetime
    value: int

    model_config = {"from_attributes": True}


class AccountResponse(BaseModel):
    """Schema for account response including its readings."""

    account_id: int
    first_name: str
    last_name: str
    readings: list[MeterReadingResponse]

    model_config = {"from_attributes": True}
