"""Pydantic models for the /surveys router."""
from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from survey_studio.models.domain.survey import (
    GeneratedSurvey,
    Question,
    Survey,
    SurveyMode,
    SurveyStatus,
    SurveyTarget,
)


# ── Request models ────────────────────────────────────────────────────────────


class SurveyUpdateRequest(BaseModel):
    """Request body for PUT /surveys/{id}. Only the fields sent are written."""

    title: Optional[str] = None
    description: Optional[str] = None
    target: Optional[SurveyTarget] = None
    mode: Optional[SurveyMode] = None
    questions: Optional[List[Question]] = None
    status: Optional[SurveyStatus] = None


class SurveyPublishRequest(BaseModel):
    """Request body for POST /surveys/{id}/publish.

    Carries the edited question list when the draft was changed before publishing.
    """

    questions: Optional[List[Question]] = None


# ── Response models ───────────────────────────────────────────────────────────


class SurveyGenerateResponse(BaseModel):
    success: bool = True
    survey_id: str
    survey: GeneratedSurvey


class SurveyResponseBody(BaseModel):
    success: bool = True
    survey: Survey


class SurveyListResponse(BaseModel):
    success: bool = True
    surveys: List[Survey] = Field(default_factory=list)


class ShareLinks(BaseModel):
    classic_url: str
    interview_url: str


class SurveyPublishResponse(BaseModel):
    success: bool = True
    survey: Survey
    links: ShareLinks


class SurveyDeleteResponse(BaseModel):
    success: bool = True
    survey_id: str
    deleted_responses: int = 0
