from .customer import CustomerRecord
from .exceptions import (
    BulkUploadError,
    RecordDecodeError,
    RecordProcessingError,
    UnprocessedItemsError,
)
from .notification import UploadNotification, UploadRecord

__all__ = [
    "BulkUploadError",
    "CustomerRecord",
    "RecordDecodeError",
    "RecordProcessingError",
    "UnprocessedItemsError",
    "UploadNotification",
    "UploadRecord",
]
