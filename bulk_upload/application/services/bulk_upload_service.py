"""
Application service for loading one uploaded object into the customer table.

This service reads the query output of an object, decodes it into customers
and stores them as one batch. It depends on abstractions (ports), not
concrete implementations.
"""

from dataclasses import dataclass
from typing import Literal

import structlog

from ...domain.customer import CustomerRecord
from ...domain.exceptions import RecordDecodeError
from ...domain.ports import CustomerRepository, RecordSource

logger = structlog.get_logger()

DecodeErrorPolicy = Literal["abort", "skip"]


@dataclass
class ObjectResult:
    """Outcome of processing one uploaded object."""

    bucket: str
    key: str
    decoded: int = 0
    skipped: int = 0
    written: int = 0


class BulkUploadService:
    """
    Application service that extracts customers from an object and writes them.

    Per object the pipeline is linear: query, stream lines, decode,
    accumulate, then write once if anything was decoded.
    """

    def __init__(
        self,
        source: RecordSource,
        repository: CustomerRepository,
        decode_error_policy: DecodeErrorPolicy = "abort",
    ) -> None:
        """
        Initialize with port implementations.

        Args:
            source: Implementation of the RecordSource port
            repository: Implementation of the CustomerRepository port
            decode_error_policy: "abort" to fail the object on the first bad
                line, "skip" to log the line and continue
        """
        if decode_error_policy not in ("abort", "skip"):
            raise ValueError(f"Unknown decode error policy: {decode_error_policy}")

        self._source = source
        self._repository = repository
        self._decode_error_policy = decode_error_policy

    def process_object(self, bucket: str, key: str) -> ObjectResult:
        """
        Load one object into the customer table.

        Args:
            bucket: Bucket holding the uploaded object
            key: Object key

        Returns:
            ObjectResult with decoded, skipped and written counts

        Raises:
            RecordDecodeError: On a bad line when the policy is "abort"
        """
        result = ObjectResult(bucket=bucket, key=key)
        customers: list[CustomerRecord] = []

        with self._source.open_lines(bucket, key) as lines:
            for line_number, line in enumerate(lines, start=1):
                logger.info(
                    "Input data",
                    line_number=line_number,
                    data=line.decode("utf-8", errors="replace"),
                )
                try:
                    customers.append(CustomerRecord.decode_line(line, line_number))
                except RecordDecodeError as e:
                    if self._decode_error_policy == "abort":
                        logger.error(
                            "Invalid record, aborting object",
                            bucket=bucket,
                            key=key,
                            line_number=e.line_number,
                            reason=e.reason,
                        )
                        raise
                    logger.warning(
                        "Skipping invalid record",
                        bucket=bucket,
                        key=key,
                        line_number=e.line_number,
                        reason=e.reason,
                    )
                    result.skipped += 1

        result.decoded = len(customers)
        if customers:
            result.written = self._repository.put_batch(customers)
        else:
            logger.info("No records decoded, nothing to write", bucket=bucket, key=key)

        return result
