"""
Service layer for survey submissions.

Validates required-question presence against the stored survey and writes
exactly one response document per call. Identical submissions are stored
twice; there is no deduplication.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from survey_studio.errors import NotFoundError, ValidationError
from survey_studio.models.domain.survey import (
    ChatMessage,
    Survey,
    SurveyResponseCreate,
)
from survey_studio.services.survey_repository import SurveyRepository

logger = logging.getLogger(__name__)


def _is_blank(answer: Any) -> bool:
    if answer is None:
        return True
    if isinstance(answer, list):
        return len(answer) == 0
    return str(answer).strip() == ""


def unanswered_required(survey: Survey, answers: Dict[str, Any]) -> List[int]:
    """1-based positions of required questions that have no answer."""
    return [
        idx + 1
        for idx, q in enumerate(survey.questions)
        if q.required and _is_blank(answers.get(q.id))
    ]


class ResponseService:
    """Records survey responses from the classic form or a finished interview."""

    def __init__(self, repository: SurveyRepository):
        self.repo = repository

    def submit(
        self,
        *,
        survey_id: Optional[str],
        answers: Optional[Dict[str, Any]],
        respondent_type: Optional[str] = None,
        interview_log: Optional[List[ChatMessage]] = None,
    ) -> str:
        """Validate and store one response. Returns the response id."""
        if not survey_id or answers is None:
            raise ValidationError("Required fields are missing: survey_id and answers.")

        survey = self.repo.get_survey(survey_id)
        if survey is None:
            raise NotFoundError(f"Survey '{survey_id}' not found.")

        return self.record(
            survey,
            answers=answers,
            respondent_type=respondent_type,
            interview_log=interview_log,
        )

    def record(
        self,
        survey: Survey,
        *,
        answers: Dict[str, Any],
        respondent_type: Optional[str] = None,
        interview_log: Optional[List[ChatMessage]] = None,
    ) -> str:
        """Store a response for an already-loaded survey."""
        missing = unanswered_required(survey, answers)
        if missing:
            raise ValidationError(
                "Please answer the required questions: " + ", ".join(str(n) for n in missing)
            )

        response = SurveyResponseCreate(
            survey_id=survey.id,
            respondent_type=respondent_type or survey.target,
            answers=answers,
            interview_log=interview_log,
        )
        response_id = self.repo.create_response(response)
        logger.info("Stored response %s for survey %s", response_id, survey.id)
        return response_id
