"""
S3 Select implementation of the RecordSource port.

Runs a server-side SQL projection over a CSV object and exposes the JSON
output as a lazy stream of lines.
"""

from collections.abc import Iterable, Iterator
from contextlib import closing, contextmanager
from typing import Any

import structlog
from botocore.exceptions import ClientError

from ...domain.ports import RecordSource

logger = structlog.get_logger()

SELECT_EXPRESSION = "SELECT * FROM s3object s"


class S3SelectRecordSource(RecordSource):
    """
    S3 Select implementation of RecordSource.

    The query reads the object as CSV with a header row and returns one
    JSON object per line. Only ``Records`` events carry data; ``Stats``,
    ``Progress``, ``Cont`` and ``End`` events are not part of the output.
    """

    def __init__(self, s3_client: Any) -> None:
        """
        Initialize with an S3 client.

        Args:
            s3_client: boto3 S3 client
        """
        self._s3 = s3_client

    @contextmanager
    def open_lines(self, bucket: str, key: str) -> Iterator[Iterator[bytes]]:
        """Run the query and yield its output lines; the stream is closed on exit."""
        try:
            response = self._s3.select_object_content(
                Bucket=bucket,
                Key=key,
                Expression=SELECT_EXPRESSION,
                ExpressionType="SQL",
                InputSerialization={"CSV": {"FileHeaderInfo": "USE"}},
                OutputSerialization={"JSON": {}},
            )
        except ClientError as e:
            logger.error(
                "S3 Select request failed",
                bucket=bucket,
                key=key,
                error_code=e.response.get("Error", {}).get("Code", ""),
                error=str(e),
            )
            raise

        with closing(response["Payload"]) as stream:
            yield iter_lines(stream)


def iter_lines(events: Iterable[dict]) -> Iterator[bytes]:
    """
    Split the payload of ``Records`` events into raw lines.

    A record may be cut across two events, so the trailing partial line of
    each payload is carried over to the next one. Blank lines are dropped.
    Lines stay UTF-8 bytes; decoding belongs to the record decoder.
    """
    pending = b""
    for event in events:
        if "Records" in event:
            pending += event["Records"]["Payload"]
            *complete, pending = pending.split(b"\n")
            for raw in complete:
                line = raw.strip()
                if line:
                    yield line
        elif "Stats" in event:
            details = event["Stats"].get("Details", {})
            logger.debug(
                "S3 Select stats",
                bytes_scanned=details.get("BytesScanned"),
                bytes_returned=details.get("BytesReturned"),
            )

    tail = pending.strip()
    if tail:
        yield tail
