"""Helpers for reporting botocore client errors."""
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError

# Errors worth a retry by the caller's own redelivery; logged at warning.
THROTTLING_CODES = frozenset({
    "ProvisionedThroughputExceededException",
    "RequestLimitExceeded",
    "ThrottlingException",
    "TransactionConflictException",
})

AWS_ERRORS = (ClientError, BotoCoreError)


def error_code(error: Exception) -> str:
    """Return the AWS error code carried by ``error``, or its class name."""
    if isinstance(error, ClientError):
        return error.response.get("Error", {}).get("Code", "Unknown")
    return type(error).__name__


def log_aws_error(logger: Any, event: str, error: Exception, **context: Any) -> str:
    """Log an AWS failure with its error code and return the code."""
    code = error_code(error)
    if code in THROTTLING_CODES:
        logger.warning(event, error_code=code, error=str(error), **context)
    else:
        logger.error(event, error_code=code, error=str(error), **context)
    return code
