"""Job API Routes - Route registration only."""

from fastapi import APIRouter

from jks_orchestrator.api.v1 import JOBS_PREFIX
from jks_orchestrator.api.v1.jobs import api

router = APIRouter()
router.include_router(api.router, prefix=JOBS_PREFIX, tags=["Jobs"])
