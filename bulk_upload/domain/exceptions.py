"""Domain errors raised while loading customer uploads."""


class BulkUploadError(Exception):
    """Base class for bulk upload failures."""

    pass


class RecordDecodeError(BulkUploadError):
    """Raised when a query result line cannot be decoded into a customer."""

    def __init__(self, line_number: int, line: str, reason: str) -> None:
        self.line_number = line_number
        self.line = line
        self.reason = reason
        super().__init__(f"Cannot decode line {line_number}: {reason}")


class UnprocessedItemsError(BulkUploadError):
    """Raised when DynamoDB still reports unprocessed items after all retries."""

    def __init__(self, table_name: str, count: int) -> None:
        self.table_name = table_name
        self.count = count
        super().__init__(f"{count} item(s) left unprocessed in table {table_name}")


class RecordProcessingError(BulkUploadError):
    """Raised after isolated processing when one or more objects failed."""

    def __init__(self, failures: list[dict]) -> None:
        self.failures = failures
        super().__init__(f"{len(failures)} upload record(s) failed")
