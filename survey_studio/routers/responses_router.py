"""
/responses router
-----------------
Submission of classic-form answers and read access for the dashboard.

POST /responses                       — Submit one response
GET  /responses/{survey_id}           — All responses for a survey, newest first
GET  /responses/{survey_id}/summary   — Per-question tallies for a survey
"""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from survey_studio.dependencies import get_repository, get_response_service
from survey_studio.errors import NotFoundError
from survey_studio.models.api.responses import (
    ResponseListResponse,
    SubmitResponseRequest,
    SubmitResponseResponse,
    SurveySummaryResponse,
)
from survey_studio.services.response_aggregator import summarize_survey
from survey_studio.services.response_service import ResponseService
from survey_studio.services.survey_repository import SurveyRepository

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/responses", tags=["responses"])


@router.post("", response_model=SubmitResponseResponse)
def submit_response(
    req: SubmitResponseRequest,
    service: ResponseService = Depends(get_response_service),
) -> SubmitResponseResponse:
    response_id = service.submit(
        survey_id=req.survey_id,
        answers=req.answers,
        respondent_type=req.respondent_type,
        interview_log=req.interview_log,
    )
    return SubmitResponseResponse(response_id=response_id)


@router.get("/{survey_id}", response_model=ResponseListResponse)
def list_responses(survey_id: str, repo: SurveyRepository = Depends(get_repository)) -> ResponseListResponse:
    responses = repo.list_responses_by_survey(survey_id)
    return ResponseListResponse(responses=responses, count=len(responses))


@router.get("/{survey_id}/summary", response_model=SurveySummaryResponse)
def survey_summary(survey_id: str, repo: SurveyRepository = Depends(get_repository)) -> SurveySummaryResponse:
    survey = repo.get_survey(survey_id)
    if survey is None:
        raise NotFoundError(f"Survey '{survey_id}' not found.")
    responses = repo.list_responses_by_survey(survey_id)
    return SurveySummaryResponse(summary=summarize_survey(survey, responses))
