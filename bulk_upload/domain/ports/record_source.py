"""
Outbound port for reading query results from an uploaded object.

Implementations live in the infrastructure layer.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterator
from contextlib import AbstractContextManager


class RecordSource(ABC):
    """
    Outbound port for streaming the records of an uploaded object.

    The application layer reads lines without knowing which service runs
    the query or how the result is transported.
    """

    @abstractmethod
    def open_lines(self, bucket: str, key: str) -> AbstractContextManager[Iterator[bytes]]:
        """
        Open the query result of an object as a stream of lines.

        Args:
            bucket: Bucket holding the object
            key: Object key

        Returns:
            Context manager yielding a lazy, single-pass iterator of UTF-8
            encoded lines.
            The underlying stream is released when the context exits.
        """
        ...
