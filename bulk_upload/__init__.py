"""S3 to DynamoDB customer bulk upload Lambda."""
