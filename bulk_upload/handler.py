"""Lambda handler for S3 upload notifications."""

import boto3
import structlog

from .application.services import BulkUploadService, EventDispatcher
from .config import settings
from .infrastructure.adapters import DynamoDbCustomerRepository, S3SelectRecordSource
from .infrastructure.logging import configure_logging, set_correlation_id

configure_logging(settings.service_name, settings.log_level)

logger = structlog.get_logger()

# Global instance, reused across warm invocations
_dispatcher: EventDispatcher | None = None


def _client_kwargs() -> dict:
    kwargs = {"region_name": settings.aws_region}
    if settings.aws_endpoint_url:
        kwargs["endpoint_url"] = settings.aws_endpoint_url
    return kwargs


def create_dispatcher(s3_client=None, dynamodb=None) -> EventDispatcher:
    """
    Wire up the dispatcher (composition root).

    Args:
        s3_client: boto3 S3 client, created from settings if omitted
        dynamodb: boto3 DynamoDB resource, created from settings if omitted
    """
    if s3_client is None:
        s3_client = boto3.client("s3", **_client_kwargs())
    if dynamodb is None:
        dynamodb = boto3.resource("dynamodb", **_client_kwargs())

    repository = DynamoDbCustomerRepository(
        dynamodb,
        table_name=settings.table_name,
        batch_size=settings.batch_size,
        max_attempts=settings.max_write_attempts,
        base_delay=settings.retry_base_delay,
    )
    service = BulkUploadService(
        source=S3SelectRecordSource(s3_client),
        repository=repository,
        decode_error_policy=settings.decode_error_policy,
    )
    return EventDispatcher(service, isolate_failures=settings.isolate_record_failures)


def get_dispatcher() -> EventDispatcher:
    """Get or create the global dispatcher."""
    global _dispatcher
    if _dispatcher is None:
        logger.info(
            "Initializing bulk upload dispatcher",
            table=settings.table_name,
            region=settings.aws_region,
        )
        _dispatcher = create_dispatcher()
    return _dispatcher


def reset_dispatcher() -> None:
    """Drop the global dispatcher so the next invocation rebuilds it."""
    global _dispatcher
    _dispatcher = None


def handler(event: dict, context) -> dict:
    """AWS Lambda handler for S3 ObjectCreated notifications."""
    request_id = getattr(context, "aws_request_id", "") or ""
    set_correlation_id(request_id)

    summary = get_dispatcher().dispatch(event)
    return summary.to_dict()
