"""S3 upload notification as delivered to the Lambda handler."""

from collections.abc import Iterator
from dataclasses import dataclass, field
from urllib.parse import unquote_plus

import structlog

logger = structlog.get_logger()


@dataclass(frozen=True)
class UploadRecord:
    """A single uploaded object named by a notification."""

    bucket: str
    key: str
    event_name: str = ""
    size: int | None = None

    @classmethod
    def from_record(cls, record: dict) -> "UploadRecord":
        s3 = record["s3"]
        return cls(
            bucket=s3["bucket"]["name"],
            # Keys arrive URL-encoded in S3 event notifications
            key=unquote_plus(s3["object"]["key"]),
            event_name=record.get("eventName", ""),
            size=s3["object"].get("size"),
        )


@dataclass(frozen=True)
class UploadNotification:
    """Transient list of upload records for one invocation."""

    records: list[UploadRecord] = field(default_factory=list)

    @classmethod
    def from_event(cls, event: dict) -> "UploadNotification":
        """
        Build a notification from a Lambda S3 event.

        An event without records is valid and yields an empty notification.
        Entries without an ``s3`` section are skipped.
        """
        records = []
        for raw in event.get("Records") or []:
            if "s3" not in raw:
                logger.warning(
                    "Skipping notification entry without s3 section",
                    event_source=raw.get("eventSource"),
                    event_name=raw.get("eventName"),
                )
                continue
            records.append(UploadRecord.from_record(raw))
        return cls(records=records)

    def __len__(self) -> int:
        """Number of records to process."""
        return len(self.records)

    def __iter__(self) -> Iterator[UploadRecord]:
        """Records in delivery order."""
        return iter(self.records)
