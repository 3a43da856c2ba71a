"""
AWS Service Next Module

Centralized error handling, throttling retries and standardized
OperationResult responses for boto3 calls.

Usage:
    result = execute_aws_api_call(
        service_name="dynamodb",
        method="get_item",
        TableName="retry-records",
        Key={"record_id": {"S": "..."}},
    )
    if result.is_success:
        item = result.data.get("Item")

    # Paginated operations (query, scan) can be collected into a single list
    result = execute_aws_api_call(
        service_name="dynamodb",
        method="query",
        paginate=True,
        keys=["Items"],
        TableName="retry-records",
        ...
    )
"""

import time
from functools import lru_cache
from typing import Any, Callable, List, Optional

import boto3  # type: ignore
from botocore.client import BaseClient  # type: ignore
from botocore.config import Config  # type: ignore
from botocore.exceptions import BotoCoreError, ClientError  # type: ignore

from infrastructure.configuration import settings
from infrastructure.logging import get_module_logger
from infrastructure.operations import OperationResult, classify_aws_error

logger = get_module_logger()

AWS_REGION = settings.aws.AWS_REGION
THROTTLING_ERRS = settings.aws.THROTTLING_ERRS

DEFAULT_MAX_RETRIES = 3
DEFAULT_BACKOFF_FACTOR = 0.5


def _should_retry(error: Exception, attempt: int, max_attempts: int) -> bool:
    if not isinstance(error, ClientError):
        return False
    error_code = error.response.get("Error", {}).get("Code")
    return error_code in THROTTLING_ERRS and attempt < max_attempts


def _calculate_retry_delay(attempt: int) -> float:
    return DEFAULT_BACKOFF_FACTOR * (2**attempt)


@lru_cache
def get_aws_client(service_name: str) -> BaseClient:
    """Create (once per process) a boto3 client for the given service.

    Region, endpoint override and connect/read timeouts come from
    ``settings.aws``. boto3 clients are thread-safe and are shared.

    Args:
        service_name: The name of the AWS service (e.g. "dynamodb").
    """
    timeout = settings.aws.DYNAMODB_TIMEOUT_SECONDS
    client_config = Config(
        connect_timeout=timeout,
        read_timeout=timeout,
        retries={"max_attempts": 0},
    )
    session = boto3.Session(region_name=AWS_REGION)
    return session.client(
        service_name,
        endpoint_url=settings.aws.DYNAMODB_ENDPOINT_URL,
        config=client_config,
    )


def _paginate_all_results(
    client: BaseClient, method: str, keys: Optional[List[str]] = None, **kwargs
) -> List[dict]:
    paginator = client.get_paginator(method)
    results: List[dict] = []
    for page in paginator.paginate(**kwargs):
        if keys is None:
            for key, value in page.items():
                if key != "ResponseMetadata" and isinstance(value, list):
                    results.extend(value)
        else:
            for key in keys:
                if key in page:
                    results.extend(page[key])
    return results


def execute_api_call(
    func_name: str,
    api_call: Callable[[], Any],
    max_retries: Optional[int] = None,
) -> OperationResult:
    """Execute an AWS API call with throttling retries.

    Throttling errors are retried with exponential backoff; every other
    failure is classified into an error OperationResult and returned.

    Args:
        func_name: Name used for logging (e.g. "dynamodb_get_item")
        api_call: The API call to execute
        max_retries: Override the default number of retries

    Returns:
        OperationResult: success with the call's return value as data, or
        a classified error.
    """
    max_retry_attempts = max_retries if max_retries is not None else DEFAULT_MAX_RETRIES

    for attempt in range(max_retry_attempts + 1):
        try:
            logger.debug(
                "aws_api_call_start",
                function=func_name,
                attempt=attempt + 1,
                max_attempts=max_retry_attempts + 1,
            )
            result = api_call()

            if attempt > 0:
                logger.info(
                    "aws_api_retry_success",
                    function=func_name,
                    attempt=attempt + 1,
                )
            return OperationResult.success(data=result)

        except (BotoCoreError, ClientError) as e:
            if _should_retry(e, attempt, max_retry_attempts):
                delay = _calculate_retry_delay(attempt)
                logger.warning(
                    "aws_api_retrying",
                    function=func_name,
                    attempt=attempt + 1,
                    error=str(e),
                    delay=delay,
                )
                time.sleep(delay)
                continue

            classified = classify_aws_error(e)
            if classified.is_conflict:
                logger.info(
                    "aws_api_conditional_check_failed",
                    function=func_name,
                    error_code=classified.error_code,
                )
            else:
                logger.error(
                    "aws_api_error_final",
                    function=func_name,
                    error=str(e),
                    error_code=classified.error_code,
                )
            return classified

    return OperationResult.transient_error(
        f"{func_name} failed after {max_retry_attempts + 1} attempts",
        error_code="RETRIES_EXHAUSTED",
    )


def execute_aws_api_call(
    service_name: str,
    method: str,
    keys: Optional[List[str]] = None,
    paginate: bool = False,
    max_retries: Optional[int] = None,
    **kwargs,
) -> OperationResult:
    """Call ``method`` on the ``service_name`` client.

    Args:
        service_name: The name of the AWS service.
        method: The client method to call.
        keys: Keys to collect from each page when paginating.
        paginate: Collect every page of a paginated operation into one list.
        max_retries: Override the default number of throttling retries.
        **kwargs: Arguments for the API call.

    Returns:
        OperationResult: Standardized result.
    """

    def api_call():
        client = get_aws_client(service_name)
        if paginate:
            return _paginate_all_results(client, method, keys, **kwargs)
        return getattr(client, method)(**kwargs)

    return execute_api_call(f"{service_name}_{method}", api_call, max_retries=max_retries)
