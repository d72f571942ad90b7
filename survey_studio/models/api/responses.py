"""Pydantic models for the /responses router."""
from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from survey_studio.models.domain.survey import (
    Answer,
    ChatMessage,
    SurveyResponse,
    SurveyTarget,
)
from survey_studio.services.response_aggregator import SurveySummary


class SubmitResponseRequest(BaseModel):
    """Request body for POST /responses.

    survey_id and answers are checked by the service so that a missing value is
    reported in the standard error envelope.
    """

    survey_id: Optional[str] = None
    answers: Optional[Dict[str, Answer]] = None
    respondent_type: Optional[SurveyTarget] = None
    interview_log: Optional[List[ChatMessage]] = None


class SubmitResponseResponse(BaseModel):
    success: bool = True
    response_id: str


class ResponseListResponse(BaseModel):
    success: bool = True
    responses: List[SurveyResponse] = Field(default_factory=list)
    count: int = 0


class SurveySummaryResponse(BaseModel):
    success: bool = True
    summary: SurveySummary
