"""
/admin router
-------------
Operational endpoints.

GET /admin/health  — Dependency check: store reachable (with survey count), OpenAI key present
"""
from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter

from survey_studio.config import get_settings
from survey_studio.errors import SurveyStudioError
from survey_studio.models.api.admin import HealthResponse
from survey_studio.services.survey_repository import SurveyRepository
from survey_studio.supabase.supabase_client import get_supabase

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    """
    Reports "degraded" instead of failing when a dependency is missing.

    The store check goes through the repository, so it exercises the same
    client and error wrapping as every other endpoint. The OpenAI check only
    looks for the key; no model call is made.
    """
    problems: List[str] = []
    survey_count: Optional[int] = None

    try:
        survey_count = SurveyRepository(get_supabase()).count_surveys()
    except SurveyStudioError as e:
        logger.error("Health check: store unavailable: %s", e)
        problems.append(f"Supabase unavailable: {e}")

    openai_ok = bool(get_settings().openai_api_key)
    if not openai_ok:
        problems.append("OPENAI_API_KEY missing.")

    return HealthResponse(
        status="degraded" if problems else "ok",
        supabase=survey_count is not None,
        openai=openai_ok,
        surveys=survey_count,
        detail=" ".join(problems) or None,
    )
