from .bulk_upload_service import BulkUploadService, ObjectResult
from .event_dispatcher import DispatchSummary, EventDispatcher

__all__ = [
    "BulkUploadService",
    "DispatchSummary",
    "EventDispatcher",
    "ObjectResult",
]
