from fastapi import APIRouter, HTTPException, Request

from api.dependencies.rate_limits import get_limiter
from infrastructure.logging import get_module_logger
from infrastructure.resilience.retry import RetryPolicy
from infrastructure.services import RetryPolicyStoreDep
from models.retry import RetryPolicyBody, RetryPolicySchema

logger = get_module_logger()

router = APIRouter(prefix="/retry-policies", tags=["Retry policies"])
limiter = get_limiter()


@router.get(
    "/{task_type}",
    response_model=RetryPolicySchema,
    response_model_by_alias=True,
)
def get_retry_policy(task_type: str, store: RetryPolicyStoreDep):
    policy = store.get(task_type)
    if policy is None:
        raise HTTPException(status_code=404, detail="Retry policy not found")
    return RetryPolicySchema.from_policy(policy)


@router.put(
    "/{task_type}",
    response_model=RetryPolicySchema,
    response_model_by_alias=True,
)
@limiter.limit("10/minute")
def put_retry_policy(
    request: Request,  # pylint: disable=unused-argument
    task_type: str,
    body: RetryPolicyBody,
    store: RetryPolicyStoreDep,
):
    """Create or replace the policy for a task type.

    Takes effect on the scheduler's next run.
    """
    policy = store.put(
        RetryPolicy(
            task_type=task_type,
            max_attempts=body.max_attempts,
            retry_interval_minutes=body.retry_interval_minutes,
        )
    )
    return RetryPolicySchema.from_policy(policy)
