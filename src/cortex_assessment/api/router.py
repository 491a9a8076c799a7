"""Aggregate API router for the CORTEX assessment service.

API prefix: /api/v1 (configurable via CORTEX_API_PREFIX)
"""

from fastapi import APIRouter

from cortex_assessment.api.routes import evaluation, value_overlay

router = APIRouter()
router.include_router(evaluation.router)
router.include_router(value_overlay.router)
