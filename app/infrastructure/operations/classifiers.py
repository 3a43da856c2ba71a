"""Error classifiers mapping SDK exceptions to OperationResult."""

from botocore.exceptions import ClientError  # type: ignore

from infrastructure.operations.result import OperationResult
from infrastructure.operations.status import OperationStatus

CONFLICT_ERROR_CODES = (
    "ConditionalCheckFailedException",
    "TransactionCanceledException",
)

PERMANENT_ERROR_CODES = (
    "AccessDeniedException",
    "ValidationException",
    "InvalidParameterException",
    "BadRequestException",
)


def classify_aws_error(exc: Exception) -> OperationResult:
    """Classify AWS SDK errors into OperationResult.

    Error Code Mapping:
    - ConditionalCheckFailedException, TransactionCanceledException -> CONFLICT
    - ResourceNotFoundException -> NOT_FOUND
    - AccessDeniedException, ValidationException, ... -> PERMANENT_ERROR
    - Anything else, including connection errors and timeouts -> TRANSIENT_ERROR

    The original AWS error code is kept in ``error_code``.

    Args:
        exc: Exception raised by boto3/botocore

    Returns:
        OperationResult describing the failure
    """
    if not isinstance(exc, ClientError):
        # BotoCoreError: connection failures, read timeouts, ...
        return OperationResult.transient_error(
            f"AWS connection error: {type(exc).__name__}: {str(exc)}",
            error_code="CONNECTION_ERROR",
        )

    error_code = "Unknown"
    if exc.response:
        error_code = exc.response.get("Error", {}).get("Code", "Unknown")

    if error_code in CONFLICT_ERROR_CODES:
        return OperationResult.error(
            OperationStatus.CONFLICT,
            f"AWS conditional write rejected: {error_code}",
            error_code=error_code,
        )

    if error_code == "ResourceNotFoundException":
        return OperationResult.error(
            OperationStatus.NOT_FOUND,
            "AWS resource not found",
            error_code=error_code,
        )

    if error_code in PERMANENT_ERROR_CODES:
        return OperationResult.permanent_error(
            f"AWS request rejected: {error_code}", error_code=error_code
        )

    return OperationResult.transient_error(
        f"AWS client error: {error_code}", error_code=error_code
    )
