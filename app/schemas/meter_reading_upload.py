"""Schemas for CSV meter reading uploads."""

from pydantic import BaseModel, ConfigDict, Field, model_validator


class MeterReadingCsvRow(BaseModel):
    """One CSV data row as raw, untyped text."""

    model_config = ConfigDict(frozen=True)

    row_number: int = Field(ge=2)  # Header is row 1
    account_id_text: str | None = None
    reading_datetime_text: str | None = None
    read_value_text: str | None = None
    parse_error: str | None = None

    @model_validator(mode="after")
    def validate_fields_present(self) -> "MeterReadingCsvRow":
        """A row without a parse error must carry all three fields."""
        if self.parse_error is None and None in self.raw_fields:
            raise ValueError("Parsed rows must have all fields present")
        return self

    @property
    def raw_fields(self) -> tuple[str | None, str | None, str | None]:
        return (self.account_id_text, self.reading_datetime_text, self.read_value_text)

    @property
    def is_parsed(self) -> bool:
        """True when the row was decoded and every field is present."""
        return self.parse_error is None


class MeterReadingUploadResult(BaseModel):
    """Summary of one meter reading upload."""

    file_name: str
    saved_count: int = Field(default=0, ge=0)
    failed_count: int = Field(default=0, ge=0)
    errors: list[str] = Field(default_factory=list)
