"""Pytest configuration and fixtures."""
from __future__ import annotations

import json
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional, Union

import pytest
from fastapi.testclient import TestClient

from survey_studio.config import get_settings
from survey_studio.errors import UpstreamError
from survey_studio.models.domain.survey import (
    Question,
    Survey,
    SurveyCreate,
    SurveyResponse,
    SurveyResponseCreate,
)


# ── Fakes ────────────────────────────────────────────────────────────────────

class FakeTextGenerator:
    """Returns canned replies in order and records every call's parts."""

    def __init__(self, replies: Optional[List[Union[str, Exception]]] = None):
        self.replies = list(replies or [])
        self.calls: List[list] = []

    def generate(self, parts) -> str:
        self.calls.append(list(parts))
        if not self.replies:
            return "Thanks for your answer!"
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


class InMemorySurveyRepository:
    """Same surface as SurveyRepository, backed by dicts."""

    def __init__(self):
        self.surveys: Dict[str, Survey] = {}
        self.responses: Dict[str, SurveyResponse] = {}
        self.fail_on_create_response = False
        self._clock = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def _tick(self) -> datetime:
        self._clock += timedelta(seconds=1)
        return self._clock

    def create_survey(self, survey: SurveyCreate) -> str:
        survey_id = str(uuid.uuid4())
        data = survey.model_dump()
        data["created_at"] = self._tick()
        self.surveys[survey_id] = Survey(id=survey_id, **data)
        return survey_id

    def get_survey(self, survey_id: str) -> Optional[Survey]:
        return self.surveys.get(survey_id)

    def update_survey(self, survey_id: str, fields: Dict[str, Any]) -> Optional[Survey]:
        existing = self.surveys.get(survey_id)
        if existing is None:
            return None
        data = {**existing.model_dump(), **fields}
        self.surveys[survey_id] = Survey.model_validate(data)
        return self.surveys[survey_id]

    def delete_survey(self, survey_id: str) -> int:
        doomed = [rid for rid, r in self.responses.items() if r.survey_id == survey_id]
        for rid in doomed:
            del self.responses[rid]
        self.surveys.pop(survey_id, None)
        return len(doomed)

    def list_surveys(self) -> List[Survey]:
        return sorted(self.surveys.values(), key=lambda s: s.created_at, reverse=True)

    def create_response(self, response: SurveyResponseCreate) -> str:
        if self.fail_on_create_response:
            raise UpstreamError("Database error while trying to store response: boom")
        response_id = str(uuid.uuid4())
        data = response.model_dump()
        data["submitted_at"] = self._tick()
        self.responses[response_id] = SurveyResponse(id=response_id, **data)
        return response_id

    def list_responses_by_survey(self, survey_id: str) -> List[SurveyResponse]:
        items = [r for r in self.responses.values() if r.survey_id == survey_id]
        return sorted(items, key=lambda r: r.submitted_at, reverse=True)

    def count_responses_by_survey(self, survey_id: str) -> int:
        return sum(1 for r in self.responses.values() if r.survey_id == survey_id)


# ── Builders ─────────────────────────────────────────────────────────────────

def make_questions(count: int = 5) -> List[Dict[str, Any]]:
    """Alternate single_choice / text questions, ids q1..qN."""
    questions = []
    for i in range(count):
        if i % 2 == 0:
            questions.append({
                "id": f"q{i + 1}",
                "type": "single_choice",
                "question": f"Question {i + 1}?",
                "options": ["Yes", "No"],
                "required": True,
            })
        else:
            questions.append({
                "id": f"q{i + 1}",
                "type": "text",
                "question": f"Question {i + 1}?",
                "required": True,
            })
    return questions


def draft_json(count: int = 5, **overrides: Any) -> str:
    payload = {
        "title": "Science Fair Feedback",
        "description": "How did the science fair go?",
        "questions": make_questions(count),
    }
    payload.update(overrides)
    return json.dumps(payload)


@pytest.fixture
def make_survey(repo) -> Callable[..., Survey]:
    def _make(questions=None, **fields) -> Survey:
        create = SurveyCreate(
            title=fields.pop("title", "Class Survey"),
            target=fields.pop("target", "student"),
            mode=fields.pop("mode", "interview"),
            questions=[
                Question.model_validate(q)
                for q in (make_questions(3) if questions is None else questions)
            ],
            **fields,
        )
        survey_id = repo.create_survey(create)
        return repo.get_survey(survey_id)
    return _make


# ── Fixtures ─────────────────────────────────────────────────────────────────

@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Deterministic settings for every test."""
    monkeypatch.setenv("PUBLIC_BASE_URL", "https://surveys.example.com")
    monkeypatch.setenv("SURVEY_LANGUAGE", "English")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def repo() -> InMemorySurveyRepository:
    return InMemorySurveyRepository()


@pytest.fixture
def generator() -> FakeTextGenerator:
    return FakeTextGenerator()


@pytest.fixture
def client(repo, generator):
    """Test client with the store and the model replaced by fakes."""
    from survey_studio.dependencies import get_repository, get_text_generator
    from survey_studio.main import app

    app.dependency_overrides[get_repository] = lambda: repo
    app.dependency_overrides[get_text_generator] = lambda: generator
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
