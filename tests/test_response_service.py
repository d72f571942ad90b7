"""Tests for response submission."""
import pytest

from survey_studio.errors import NotFoundError, ValidationError
from survey_studio.models.domain.survey import ChatMessage
from survey_studio.services.response_service import ResponseService, unanswered_required


@pytest.fixture
def service(repo):
    return ResponseService(repo)


ONE_REQUIRED = [{"id": "q1", "type": "text", "question": "Name?", "required": True}]


def test_empty_answers_for_required_question_is_rejected(service, make_survey, repo):
    survey = make_survey(ONE_REQUIRED)
    with pytest.raises(ValidationError, match="required questions: 1"):
        service.submit(survey_id=survey.id, answers={})
    assert repo.responses == {}


@pytest.mark.parametrize("kwargs", [
    {"survey_id": None, "answers": {}},
    {"survey_id": "", "answers": {}},
    {"survey_id": "abc", "answers": None},
])
def test_missing_fields_are_rejected(service, kwargs):
    with pytest.raises(ValidationError, match="missing"):
        service.submit(**kwargs)


def test_unknown_survey_is_not_found(service):
    with pytest.raises(NotFoundError):
        service.submit(survey_id="does-not-exist", answers={"q1": "x"})


def test_valid_submission_is_stored(service, make_survey, repo):
    survey = make_survey(ONE_REQUIRED, target="teacher")
    response_id = service.submit(survey_id=survey.id, answers={"q1": "Ms. Kim"})

    stored = repo.responses[response_id]
    assert stored.survey_id == survey.id
    assert stored.answers == {"q1": "Ms. Kim"}
    assert stored.respondent_type == "teacher"
    assert stored.interview_log is None


def test_explicit_respondent_type_and_log(service, make_survey, repo):
    survey = make_survey(ONE_REQUIRED)
    log = [ChatMessage(role="assistant", content="Hi"), ChatMessage(role="user", content="Hello")]
    response_id = service.submit(
        survey_id=survey.id,
        answers={"q1": "Hello"},
        respondent_type="parent",
        interview_log=log,
    )
    stored = repo.responses[response_id]
    assert stored.respondent_type == "parent"
    assert [m.content for m in stored.interview_log] == ["Hi", "Hello"]


def test_resubmission_creates_second_document(service, make_survey, repo):
    survey = make_survey(ONE_REQUIRED)
    service.submit(survey_id=survey.id, answers={"q1": "same"})
    service.submit(survey_id=survey.id, answers={"q1": "same"})
    assert len(repo.list_responses_by_survey(survey.id)) == 2


def test_unanswered_required_positions(make_survey):
    survey = make_survey([
        {"id": "a", "type": "text", "question": "A", "required": True},
        {"id": "b", "type": "text", "question": "B"},
        {"id": "c", "type": "multiple_choice", "question": "C", "options": ["x"], "required": True},
        {"id": "d", "type": "text", "question": "D", "required": True},
    ])
    answers = {"a": "  ", "c": [], "d": "ok"}
    assert unanswered_required(survey, answers) == [1, 3]
