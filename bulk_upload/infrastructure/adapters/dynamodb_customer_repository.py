"""
DynamoDB implementation of the CustomerRepository port.

Customers are written with BatchWriteItem put requests. Repeated customer
ids collapse to their last row, batches are split to respect the per-call
item limit and unprocessed items are retried with exponential backoff.
"""

import time
from collections.abc import Callable, Sequence
from typing import Any

import structlog
from botocore.exceptions import ClientError

from ...domain.customer import CustomerRecord
from ...domain.exceptions import UnprocessedItemsError
from ...domain.ports import CustomerRepository

logger = structlog.get_logger()

# BatchWriteItem accepts at most 25 put/delete requests per call
MAX_BATCH_SIZE = 25


class DynamoDbCustomerRepository(CustomerRepository):
    """DynamoDB implementation of CustomerRepository."""

    def __init__(
        self,
        dynamodb: Any,
        table_name: str = "CustomerData",
        batch_size: int = MAX_BATCH_SIZE,
        max_attempts: int = 5,
        base_delay: float = 0.05,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """
        Initialize with a DynamoDB service resource.

        Args:
            dynamodb: boto3 DynamoDB service resource
            table_name: Destination table, hash-keyed on customerId
            batch_size: Items per BatchWriteItem call (1-25)
            max_attempts: Calls per chunk before giving up on unprocessed items
            base_delay: First retry delay in seconds, doubled on each retry
            sleep: Delay function
        """
        if not 1 <= batch_size <= MAX_BATCH_SIZE:
            raise ValueError(f"batch_size must be between 1 and {MAX_BATCH_SIZE}")
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")

        self._dynamodb = dynamodb
        self._table_name = table_name
        self._batch_size = batch_size
        self._max_attempts = max_attempts
        self._base_delay = base_delay
        self._sleep = sleep

    def put_batch(self, records: Sequence[CustomerRecord]) -> int:
        """
        Write all records, one BatchWriteItem call per chunk.

        A customer id repeated in the batch keeps only its last row, the
        same result as sequential puts. BatchWriteItem rejects a call whose
        requests share a key.
        """
        items = overwrite_by_pkey(records)
        if len(items) < len(records):
            logger.info(
                "Collapsed repeated customer ids",
                table=self._table_name,
                rows=len(records),
                items=len(items),
            )

        written = 0
        for start in range(0, len(items), self._batch_size):
            chunk = items[start : start + self._batch_size]
            requests = [{"PutRequest": {"Item": item}} for item in chunk]
            self._write_chunk(requests)
            written += len(requests)

        logger.info(
            "Customer batch written",
            table=self._table_name,
            items=written,
        )
        return written

    def _write_chunk(self, requests: list[dict]) -> None:
        """Send one chunk and retry whatever DynamoDB leaves unprocessed."""
        pending = {self._table_name: requests}

        for attempt in range(self._max_attempts):
            if attempt:
                delay = self._base_delay * 2 ** (attempt - 1)
                logger.warning(
                    "Retrying unprocessed items",
                    table=self._table_name,
                    items=len(pending[self._table_name]),
                    attempt=attempt + 1,
                    delay_s=delay,
                )
                self._sleep(delay)

            try:
                response = self._dynamodb.batch_write_item(RequestItems=pending)
            except ClientError as e:
                logger.error(
                    "BatchWriteItem failed",
                    table=self._table_name,
                    error_code=e.response.get("Error", {}).get("Code", ""),
                    error=str(e),
                )
                raise

            unprocessed = response.get("UnprocessedItems") or {}
            if not unprocessed.get(self._table_name):
                return
            pending = {self._table_name: unprocessed[self._table_name]}

        left = len(pending[self._table_name])
        logger.error(
            "Unprocessed items after retries",
            table=self._table_name,
            items=left,
            attempts=self._max_attempts,
        )
        raise UnprocessedItemsError(self._table_name, left)


def overwrite_by_pkey(records: Sequence[CustomerRecord]) -> list[dict[str, Any]]:
    """
    Table items with one entry per customer id, the last row winning.

    A replaced item moves to the position of the row that replaced it, as
    with boto3's ``batch_writer(overwrite_by_pkeys=...)``.
    """
    items: dict[str, dict[str, Any]] = {}
    for record in records:
        items.pop(record.customer_id, None)
        items[record.customer_id] = record.to_item()
    return list(items.values())
