from fastapi import APIRouter

from api.v1.routes.retry_policies import router as retry_policies_router
from api.v1.routes.retry_records import router as retry_records_router
from api.v1.routes.students import router as students_router

router = APIRouter()
router.include_router(students_router)
router.include_router(retry_records_router)
router.include_router(retry_policies_router)
