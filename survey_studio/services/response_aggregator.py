"""
survey_studio/services/response_aggregator.py
---------------------------------------------
Per-question tallies over already-fetched responses.

Choice questions get {option, count, percentage} rows in option order. The
percentage denominator is the respondent count for single_choice and the total
number of selections for multiple_choice; a zero denominator yields 0%.
Answers naming an option the question does not list are ignored.

Text questions get the non-empty answer strings in input order.

Pure functions: calling them twice on the same input gives the same output.
"""
from __future__ import annotations

import math
from collections import Counter
from typing import Dict, List, Optional, Sequence

from pydantic import BaseModel, Field

from survey_studio.models.domain.survey import Question, Survey, SurveyResponse


class OptionTally(BaseModel):
    option: str
    count: int
    percentage: int


class QuestionStats(BaseModel):
    question_id: str
    question: str
    type: str
    options: Optional[List[OptionTally]] = None
    text_responses: Optional[List[str]] = None


class SurveySummary(BaseModel):
    survey_id: str
    total_responses: int
    question_count: int
    mode: str
    status: str
    respondent_breakdown: Dict[str, int] = Field(default_factory=dict)
    questions: List[QuestionStats] = Field(default_factory=list)


def _percent(count: int, denominator: int) -> int:
    """Round half up; 0 when there is nothing to divide by."""
    if denominator <= 0:
        return 0
    return int(math.floor(count * 100 / denominator + 0.5))


def _choice_stats(question: Question, responses: Sequence[SurveyResponse]) -> List[OptionTally]:
    counts: Dict[str, int] = dict.fromkeys(question.options or [], 0)

    for response in responses:
        answer = response.answers.get(question.id)
        selected = answer if isinstance(answer, list) else [answer]
        for value in selected:
            if isinstance(value, str) and value in counts:
                counts[value] += 1

    if question.type == "multiple_choice":
        denominator = sum(counts.values())
    else:
        denominator = len(responses)

    return [
        OptionTally(option=option, count=count, percentage=_percent(count, denominator))
        for option, count in counts.items()
    ]


def _text_stats(question: Question, responses: Sequence[SurveyResponse]) -> List[str]:
    texts = []
    for response in responses:
        answer = response.answers.get(question.id)
        if isinstance(answer, list):
            answer = ", ".join(a for a in answer if isinstance(a, str) and a.strip())
        if isinstance(answer, str) and answer.strip():
            texts.append(answer)
    return texts


def aggregate_responses(survey: Survey, responses: Sequence[SurveyResponse]) -> List[QuestionStats]:
    """One QuestionStats per survey question, in survey order."""
    stats = []
    for question in survey.questions:
        item = QuestionStats(
            question_id=question.id,
            question=question.question,
            type=question.type,
        )
        if question.is_choice:
            item.options = _choice_stats(question, responses)
        else:
            item.text_responses = _text_stats(question, responses)
        stats.append(item)
    return stats


def summarize_survey(survey: Survey, responses: Sequence[SurveyResponse]) -> SurveySummary:
    """Dashboard view: totals, respondent categories, and per-question stats."""
    breakdown = Counter(r.respondent_type for r in responses)
    return SurveySummary(
        survey_id=survey.id,
        total_responses=len(responses),
        question_count=len(survey.questions),
        mode=survey.mode,
        status=survey.status,
        respondent_breakdown=dict(breakdown),
        questions=aggregate_responses(survey, responses),
    )
