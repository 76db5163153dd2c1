"""
Dispatcher for S3 upload notifications.

Each upload record is handed to the BulkUploadService in delivery order,
one object fully processed before the next begins.
"""

import json
from dataclasses import asdict, dataclass, field

import structlog

from ...domain.exceptions import RecordProcessingError
from ...domain.notification import UploadNotification
from ...infrastructure.logging import Timer
from .bulk_upload_service import BulkUploadService, ObjectResult

logger = structlog.get_logger()


@dataclass
class DispatchSummary:
    """Outcome of one invocation."""

    records: int = 0
    objects: list[ObjectResult] = field(default_factory=list)
    failures: list[dict] = field(default_factory=list)

    @property
    def items_written(self) -> int:
        return sum(o.written for o in self.objects)

    def to_dict(self) -> dict:
        return {
            "records": self.records,
            "processedObjects": len(self.objects),
            "itemsWritten": self.items_written,
            "objects": [asdict(o) for o in self.objects],
            "failures": self.failures,
        }


class EventDispatcher:
    """
    Routes notification records to the BulkUploadService.

    With ``isolate_failures`` off, the first failure propagates and the
    remaining records are not processed. With it on, every record is
    attempted and RecordProcessingError is raised at the end if any failed,
    so the invocation still reports failure to the host.
    """

    def __init__(self, service: BulkUploadService, isolate_failures: bool = False) -> None:
        self._service = service
        self._isolate_failures = isolate_failures

    def dispatch(self, event: dict) -> DispatchSummary:
        """
        Process every upload record of a notification.

        Args:
            event: Lambda S3 notification event

        Returns:
            DispatchSummary with per-object results
        """
        logger.info("S3 event received", notification=json.dumps(event, default=str))

        notification = UploadNotification.from_event(event)
        summary = DispatchSummary(records=len(notification))

        for record in notification:
            with structlog.contextvars.bound_contextvars(bucket=record.bucket, key=record.key):
                try:
                    with Timer() as t:
                        result = self._service.process_object(record.bucket, record.key)
                except Exception as e:
                    if not self._isolate_failures:
                        raise
                    logger.error(
                        "Upload record failed",
                        error_type=type(e).__name__,
                        error=str(e),
                    )
                    summary.failures.append(
                        {"bucket": record.bucket, "key": record.key, "error": str(e)}
                    )
                    continue

                summary.objects.append(result)
                logger.info(
                    "Object processed",
                    decoded=result.decoded,
                    skipped=result.skipped,
                    written=result.written,
                    duration_ms=t.duration_ms,
                )

        if summary.failures:
            raise RecordProcessingError(summary.failures)

        return summary
