from .customer_repository import CustomerRepository
from .record_source import RecordSource

__all__ = [
    "CustomerRepository",
    "RecordSource",
]
