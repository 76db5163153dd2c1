"""Customer record as produced by the S3 Select query and stored in DynamoDB."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .exceptions import RecordDecodeError


class CustomerRecord(BaseModel):
    """
    One customer row.

    Attribute names on the wire (query output) and in the table are the
    camelCase column names of the CSV header.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    customer_id: str = Field(..., alias="customerId")
    first_name: str = Field(..., alias="firstName")
    last_name: str = Field(..., alias="lastName")
    phone_number: str = Field(..., alias="phoneNumber")
    address: str = Field(..., alias="address")

    @classmethod
    def decode_line(cls, line: str | bytes, line_number: int = 0) -> "CustomerRecord":
        """
        Decode one JSON line of query output.

        Args:
            line: Raw JSON of a single record, text or UTF-8 bytes
            line_number: 1-based position of the line in the object output

        Raises:
            RecordDecodeError: If the line is not valid UTF-8 or not a JSON
                object with every field
        """
        if isinstance(line, bytes):
            try:
                line = line.decode("utf-8")
            except UnicodeDecodeError as e:
                text = line.decode("utf-8", errors="replace")
                raise RecordDecodeError(line_number, text, f"invalid UTF-8: {e.reason}") from e

        try:
            return cls.model_validate_json(line)
        except ValidationError as e:
            reasons = "; ".join(
                f"{'.'.join(str(p) for p in err['loc']) or 'line'}: {err['msg']}"
                for err in e.errors()
            )
            raise RecordDecodeError(line_number, line, reasons) from e

    def to_item(self) -> dict[str, Any]:
        """Table item keyed by the camelCase attribute names."""
        return self.model_dump(by_alias=True)

    def to_json_line(self) -> str:
        """One line of query output, as S3 Select would emit it."""
        return self.model_dump_json(by_alias=True)
