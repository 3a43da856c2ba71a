from fastapi import APIRouter, HTTPException, Query, Request

from api.dependencies.rate_limits import get_limiter
from infrastructure.logging import get_module_logger
from infrastructure.services import RetryRecordStoreDep
from models.retry import RetryRecordSchema

logger = get_module_logger()

router = APIRouter(prefix="/retry-records", tags=["Retry records"])
limiter = get_limiter()


@router.post(
    "",
    status_code=201,
    response_model=RetryRecordSchema,
    response_model_by_alias=True,
)
@limiter.limit("30/minute")
def save_retry_record(
    request: Request,  # pylint: disable=unused-argument
    body: RetryRecordSchema,
    store: RetryRecordStoreDep,
):
    """Store a retry record as given.

    Administrative write: the record replaces any record with the same id
    or the same (entityKey, taskType) pair. No evaluation takes place.
    """
    record = store.upsert(body.to_record())
    logger.info(
        "retry_record_saved_manually",
        record_id=record.id,
        entity_key=record.entity_key,
        task_type=record.task_type,
        state=record.state.value,
    )
    return RetryRecordSchema.from_record(record)


@router.get(
    "",
    response_model=RetryRecordSchema,
    response_model_by_alias=True,
)
def find_retry_record(
    store: RetryRecordStoreDep,
    entity_key: str = Query(..., alias="entityKey", min_length=1),
    task_type: str = Query(..., alias="taskType", min_length=1),
):
    """Look up the record for an (entityKey, taskType) pair."""
    record = store.find_by_entity(entity_key, task_type)
    if record is None:
        raise HTTPException(status_code=404, detail="Retry record not found")
    return RetryRecordSchema.from_record(record)


@router.get(
    "/{record_id}",
    response_model=RetryRecordSchema,
    response_model_by_alias=True,
)
def get_retry_record(record_id: str, store: RetryRecordStoreDep):
    record = store.get(record_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Retry record not found")
    return RetryRecordSchema.from_record(record)
