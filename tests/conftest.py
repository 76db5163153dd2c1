from unittest.mock import MagicMock

import pytest

from bulk_upload.domain import CustomerRecord
from bulk_upload.domain.ports import CustomerRepository


class FakeEventStream:
    """Stand-in for the botocore EventStream returned by S3 Select."""

    def __init__(self, events: list[dict]) -> None:
        self._events = events
        self.closed = False

    def __iter__(self):
        return iter(self._events)

    def close(self) -> None:
        self.closed = True


def records_event(payload: str | bytes) -> dict:
    if isinstance(payload, str):
        payload = payload.encode("utf-8")
    return {"Records": {"Payload": payload}}


def select_response(*payloads: str | bytes) -> dict:
    """Build a select_object_content response with Records, Stats and End events."""
    events = [records_event(p) for p in payloads]
    events.append({"Stats": {"Details": {"BytesScanned": 100, "BytesReturned": 80}}})
    events.append({"End": {}})
    return {"Payload": FakeEventStream(events)}


def s3_event(*objects: tuple[str, str]) -> dict:
    """Build a Lambda S3 ObjectCreated notification for (bucket, key) pairs."""
    return {
        "Records": [
            {
                "eventVersion": "2.1",
                "eventSource": "aws:s3",
                "eventName": "ObjectCreated:Put",
                "s3": {
                    "bucket": {"name": bucket},
                    "object": {"key": key, "size": 128},
                },
            }
            for bucket, key in objects
        ]
    }


@pytest.fixture
def ann() -> CustomerRecord:
    return CustomerRecord(
        customerId="C1",
        firstName="Ann",
        lastName="Lee",
        phoneNumber="555-1000",
        address="1 Main St",
    )


@pytest.fixture
def bob() -> CustomerRecord:
    return CustomerRecord(
        customerId="C2",
        firstName="Bob",
        lastName="Ray",
        phoneNumber="555-2000",
        address="2 Oak Ave",
    )


@pytest.fixture
def mock_s3():
    return MagicMock()


@pytest.fixture
def mock_repository():
    repository = MagicMock(spec=CustomerRepository)
    repository.put_batch.side_effect = lambda records: len(records)
    return repository


@pytest.fixture
def make_s3_event():
    return s3_event


@pytest.fixture
def make_select_response():
    return select_response
