from .dynamodb_customer_repository import DynamoDbCustomerRepository
from .s3_select_source import S3SelectRecordSource

__all__ = [
    "DynamoDbCustomerRepository",
    "S3SelectRecordSource",
]
