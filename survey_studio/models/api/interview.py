"""Pydantic models for the /interview router."""
from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from survey_studio.models.domain.survey import ChatMessage, Question, SurveyTarget


class InterviewStartRequest(BaseModel):
    survey_id: str


class InterviewChatRequest(BaseModel):
    """One chat turn. The session state is sent back by the client every time."""

    survey_id: str
    message: str = Field(..., description="The respondent's new utterance")
    messages: List[ChatMessage] = Field(
        default_factory=list,
        description="Transcript so far, greeting included, without the new utterance",
    )
    current_question_index: int = 0
    answers: Dict[str, str] = Field(default_factory=dict)
    respondent_type: Optional[SurveyTarget] = None


class InterviewTurnResponse(BaseModel):
    success: bool = True
    message: str
    is_completed: bool
    next_question_index: int
    current_question: Optional[Question] = None
    total_questions: int
    answers: Dict[str, str] = Field(default_factory=dict)
    messages: List[ChatMessage] = Field(default_factory=list)
    submitted: bool = False
    response_id: Optional[str] = None
