from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Bulk upload settings loaded from environment."""

    # Service
    service_name: str = "bulk-upload"
    log_level: str = "INFO"

    # AWS
    aws_region: str = "us-east-1"
    aws_endpoint_url: str | None = None  # For LocalStack

    # DynamoDB
    table_name: str = "CustomerData"
    batch_size: int = Field(default=25, ge=1, le=25)  # BatchWriteItem limit
    max_write_attempts: int = Field(default=5, ge=1)
    retry_base_delay: float = Field(default=0.05, ge=0)

    # Failure policies
    decode_error_policy: Literal["abort", "skip"] = "abort"
    isolate_record_failures: bool = False

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
