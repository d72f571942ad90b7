"""
survey_studio/services/interview_service.py
-------------------------------------------
Turn-by-turn progression for interview-mode surveys.

States
------
  Greeting           index 0, no answers; start() greets and asks question 1
  AwaitingAnswer(i)  the next utterance is the answer to question i
  Completed          index == question count; all answers submitted once

Each utterance is recorded as the answer to the current question and the
index advances unconditionally; it never re-asks, skips, or goes back. The
state travels with the client on every call; a failed model call leaves it
untouched so the respondent can resend.

Import
------
    from survey_studio.services.interview_service import InterviewEngine, InterviewState
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from survey_studio.config import get_settings
from survey_studio.errors import SurveyStudioError, ValidationError
from survey_studio.models.domain.survey import ChatMessage, Question, Survey
from survey_studio.prompts.interview_prompts import (
    build_greeting,
    build_turn_instruction,
    render_history,
)
from survey_studio.services.response_service import ResponseService
from survey_studio.services.text_generator import TextPart

logger = logging.getLogger(__name__)


class InterviewState(BaseModel):
    """Progress of one interview session, carried by the client."""

    current_question_index: int = 0
    answers: Dict[str, str] = Field(default_factory=dict)
    messages: List[ChatMessage] = Field(default_factory=list)

    def phase(self, total: int) -> str:
        if self.current_question_index >= total:
            return "completed"
        if self.current_question_index == 0 and not self.answers:
            return "greeting"
        return "awaiting_answer"


@dataclass
class InterviewTurn:
    message: str
    state: InterviewState
    is_completed: bool
    current_question: Optional[Question]
    total_questions: int
    submitted: bool = False
    response_id: Optional[str] = None


def start_interview(survey: Survey) -> InterviewTurn:
    """Greeting turn: introduce the survey and ask question 1 (no model call)."""
    if not survey.questions:
        raise ValidationError("Survey has no questions.")

    first = survey.questions[0]
    greeting = build_greeting(survey.title, first, len(survey.questions))
    state = InterviewState(messages=[ChatMessage(role="assistant", content=greeting)])
    return InterviewTurn(
        message=greeting,
        state=state,
        is_completed=False,
        current_question=first,
        total_questions=len(survey.questions),
    )


class InterviewEngine:
    """Advances an interview one utterance at a time."""

    def __init__(self, generator, responses: ResponseService, language: Optional[str] = None):
        self.generator = generator
        self.responses = responses
        self.language = language or get_settings().survey_language

    def start(self, survey: Survey) -> InterviewTurn:
        return start_interview(survey)

    def advance(
        self,
        survey: Survey,
        state: InterviewState,
        utterance: str,
        *,
        respondent_type: Optional[str] = None,
    ) -> InterviewTurn:
        """
        Record `utterance` as the answer to the current question and produce
        the interviewer's next message.

        Raises:
            ValidationError: blank utterance, empty survey, bad or finished index
            UpstreamError:   the text generator failed (state unchanged)
        """
        questions = survey.questions
        total = len(questions)
        index = state.current_question_index

        if not utterance or not utterance.strip():
            raise ValidationError("Message must not be empty.")
        if total == 0:
            raise ValidationError("Survey has no questions.")
        if index < 0:
            raise ValidationError("current_question_index must not be negative.")
        if index >= total:
            raise ValidationError("This interview is already completed.")

        question = questions[index]
        next_question = questions[index + 1] if index + 1 < total else None
        user_message = ChatMessage(role="user", content=utterance.strip())

        instruction = build_turn_instruction(
            title=survey.title,
            description=survey.description,
            answered_position=index + 1,
            total=total,
            next_question=next_question,
            language=self.language,
        )
        history = render_history(state.messages)
        parts = [TextPart(instruction)]
        if history:
            parts.append(TextPart(f"Conversation so far:\n{history}"))
        parts.append(TextPart(f"Respondent's answer: {user_message.content}"))

        logger.info("Interview turn for survey %s at question %d/%d", survey.id, index + 1, total)
        reply = self.generator.generate(parts)

        # Only answers to questions already asked survive; anything else the client sent is dropped.
        answers = {q.id: state.answers[q.id] for q in questions[:index] if q.id in state.answers}
        answers[question.id] = user_message.content

        new_state = InterviewState(
            current_question_index=index + 1,
            answers=answers,
            messages=[
                *state.messages,
                user_message,
                ChatMessage(role="assistant", content=reply),
            ],
        )
        turn = InterviewTurn(
            message=reply,
            state=new_state,
            is_completed=next_question is None,
            current_question=next_question,
            total_questions=total,
        )

        if turn.is_completed:
            turn.response_id = self._submit(survey, new_state, respondent_type)
            turn.submitted = turn.response_id is not None
        return turn

    def _submit(self, survey: Survey, state: InterviewState, respondent_type: Optional[str]) -> Optional[str]:
        """Store the finished interview; failures are logged, not raised."""
        try:
            return self.responses.record(
                survey,
                answers=dict(state.answers),
                respondent_type=respondent_type,
                interview_log=list(state.messages),
            )
        except SurveyStudioError:
            logger.exception("Interview submission failed for survey %s", survey.id)
            return None
