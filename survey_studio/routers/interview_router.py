"""
/interview router
-----------------
Conversational survey flow. The client holds the session state and sends it
back on every turn; the server keeps nothing between calls.

POST /interview/start  — Greeting + first question for a survey
POST /interview/chat   — Record one answer, get the interviewer's next message
"""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from survey_studio.dependencies import get_interview_engine, get_repository
from survey_studio.errors import NotFoundError
from survey_studio.models.api.interview import (
    InterviewChatRequest,
    InterviewStartRequest,
    InterviewTurnResponse,
)
from survey_studio.models.domain.survey import Survey
from survey_studio.services.interview_service import (
    InterviewEngine,
    InterviewState,
    InterviewTurn,
    start_interview,
)
from survey_studio.services.survey_repository import SurveyRepository

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/interview", tags=["interview"])


def _load_survey(repo: SurveyRepository, survey_id: str) -> Survey:
    survey = repo.get_survey(survey_id)
    if survey is None:
        raise NotFoundError(f"Survey '{survey_id}' not found.")
    return survey


def _to_response(turn: InterviewTurn) -> InterviewTurnResponse:
    return InterviewTurnResponse(
        message=turn.message,
        is_completed=turn.is_completed,
        next_question_index=turn.state.current_question_index,
        current_question=turn.current_question,
        total_questions=turn.total_questions,
        answers=turn.state.answers,
        messages=turn.state.messages,
        submitted=turn.submitted,
        response_id=turn.response_id,
    )


@router.post("/start", response_model=InterviewTurnResponse)
def open_interview(
    req: InterviewStartRequest,
    repo: SurveyRepository = Depends(get_repository),
) -> InterviewTurnResponse:
    """The greeting is built locally, so no model credentials are needed here."""
    survey = _load_survey(repo, req.survey_id)
    return _to_response(start_interview(survey))


@router.post("/chat", response_model=InterviewTurnResponse)
def chat_turn(
    req: InterviewChatRequest,
    repo: SurveyRepository = Depends(get_repository),
    engine: InterviewEngine = Depends(get_interview_engine),
) -> InterviewTurnResponse:
    """
    Treat `message` as the answer to question `current_question_index`.

    When that was the last question the response is completed and submitted
    in the same call; `submitted` reports whether storing it succeeded.
    """
    survey = _load_survey(repo, req.survey_id)
    state = InterviewState(
        current_question_index=req.current_question_index,
        answers=req.answers,
        messages=req.messages,
    )
    turn = engine.advance(survey, state, req.message, respondent_type=req.respondent_type)
    return _to_response(turn)
