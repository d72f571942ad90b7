"""Domain models for surveys, responses and interview transcripts."""
from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field

from ._time import utcnow

SurveyTarget = Literal["student", "teacher", "parent"]
SurveyMode = Literal["classic", "interview"]
SurveyStatus = Literal["draft", "published"]
QuestionType = Literal["single_choice", "multiple_choice", "text", "long_text"]
ChatRole = Literal["user", "assistant"]

Answer = Union[str, List[str]]

CHOICE_TYPES = frozenset({"single_choice", "multiple_choice"})


# ── Questions ────────────────────────────────────────────────────────────────

class Question(BaseModel):
    """One survey item. `id` is unique within its survey only."""

    id: str
    type: QuestionType
    question: str
    options: Optional[List[str]] = None
    required: Optional[bool] = None

    @property
    def is_choice(self) -> bool:
        return self.type in CHOICE_TYPES


class GeneratedSurvey(BaseModel):
    """Structured draft produced by the draft generator (not yet stored)."""

    title: str
    description: str = ""
    questions: List[Question]


# ── Surveys ──────────────────────────────────────────────────────────────────

class SurveyCreate(BaseModel):
    """Intent to store a survey. Question order is significant."""

    title: str
    description: Optional[str] = None
    target: SurveyTarget
    mode: SurveyMode
    questions: List[Question] = Field(default_factory=list)
    source_prompt: Optional[str] = None
    source_file_name: Optional[str] = None
    status: SurveyStatus = "draft"
    created_at: datetime = Field(default_factory=utcnow)


class Survey(SurveyCreate):
    """Full row returned from the surveys table."""

    id: str


# ── Interview transcript ─────────────────────────────────────────────────────

class ChatMessage(BaseModel):
    role: ChatRole
    content: str
    timestamp: datetime = Field(default_factory=utcnow)


# ── Responses ────────────────────────────────────────────────────────────────

class SurveyResponseCreate(BaseModel):
    """
    Intent to store one submission.

    `answers` maps Question id to a string or list of strings, shaped by the
    question type at submission time and never re-validated afterwards.
    """

    survey_id: str
    respondent_type: SurveyTarget
    answers: Dict[str, Answer] = Field(default_factory=dict)
    interview_log: Optional[List[ChatMessage]] = None
    submitted_at: datetime = Field(default_factory=utcnow)


class SurveyResponse(SurveyResponseCreate):
    id: str
