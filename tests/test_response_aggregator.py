"""Tests for per-question response tallies."""
from datetime import datetime, timezone

import pytest

from survey_studio.models.domain.survey import Question, Survey, SurveyResponse
from survey_studio.services.response_aggregator import aggregate_responses, summarize_survey


def _survey(questions):
    return Survey(
        id="s1",
        title="Survey",
        target="student",
        mode="classic",
        status="published",
        questions=[Question.model_validate(q) for q in questions],
        created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
    )


def _responses(*answer_maps, respondent_type="student"):
    return [
        SurveyResponse(id=f"r{i}", survey_id="s1", respondent_type=respondent_type, answers=answers)
        for i, answers in enumerate(answer_maps)
    ]


def _tallies(stats):
    return [(o.option, o.count, o.percentage) for o in stats.options]


TWO_SINGLE_CHOICE = [
    {"id": "q1", "type": "single_choice", "question": "Pick one", "options": ["A", "B"]},
    {"id": "q2", "type": "single_choice", "question": "Pick another", "options": ["X", "Y"]},
]


def test_two_single_choice_questions_scenario():
    survey = _survey(TWO_SINGLE_CHOICE)
    responses = _responses(
        {"q1": "A", "q2": "X"},
        {"q1": "A", "q2": "Y"},
        {"q1": "B", "q2": "X"},
    )

    q1, q2 = aggregate_responses(survey, responses)

    assert _tallies(q1) == [("A", 2, 67), ("B", 1, 33)]
    assert _tallies(q2) == [("X", 2, 67), ("Y", 1, 33)]


def test_multiple_choice_uses_total_selections():
    survey = _survey([
        {"id": "q1", "type": "multiple_choice", "question": "Pick any", "options": ["A", "B", "C"]},
    ])
    responses = _responses({"q1": ["A", "B"]}, {"q1": ["A"]}, {"q1": ["C", "A"]})

    (stats,) = aggregate_responses(survey, responses)

    # 6 selections in total
    assert _tallies(stats) == [("A", 3, 50), ("B", 1, 17), ("C", 1, 17)]


def test_zero_responses_give_zero_percent():
    survey = _survey(TWO_SINGLE_CHOICE + [
        {"id": "q3", "type": "multiple_choice", "question": "Pick any", "options": ["M", "N"]},
    ])
    for stats in aggregate_responses(survey, []):
        assert [o.percentage for o in stats.options] == [0, 0]
        assert [o.count for o in stats.options] == [0, 0]


def test_unknown_options_are_ignored():
    survey = _survey(TWO_SINGLE_CHOICE[:1])
    responses = _responses({"q1": "A"}, {"q1": "Z"}, {"q1": ["B", "nope"]}, {})

    (stats,) = aggregate_responses(survey, responses)

    assert _tallies(stats) == [("A", 1, 25), ("B", 1, 25)]


def test_text_answers_keep_input_order_and_skip_blanks():
    survey = _survey([
        {"id": "t1", "type": "text", "question": "Why?"},
        {"id": "t2", "type": "long_text", "question": "Tell us more"},
    ])
    responses = _responses(
        {"t1": "Because", "t2": "  "},
        {"t1": "", "t2": "A long story"},
        {"t2": ["one", "two"]},
    )

    t1, t2 = aggregate_responses(survey, responses)

    assert t1.text_responses == ["Because"]
    assert t1.options is None
    assert t2.text_responses == ["A long story", "one, two"]


def test_half_percent_rounds_up():
    survey = _survey([
        {"id": "q1", "type": "multiple_choice", "question": "Pick", "options": ["A", "B", "C", "D", "E", "F", "G", "H"]},
    ])
    # 1 of 8 selections = 12.5%
    responses = _responses({"q1": ["A", "B", "C", "D", "E", "F", "G", "H"]})
    (stats,) = aggregate_responses(survey, responses)
    assert all(o.percentage == 13 for o in stats.options)


@pytest.mark.parametrize("picks", [
    ["A", "B", "C"],
    ["A", "A", "B", "C", "C", "C", "B"],
    ["B"] * 5 + ["C"] * 2,
])
def test_single_choice_percentages_sum_near_100(picks):
    survey = _survey([
        {"id": "q1", "type": "single_choice", "question": "Pick", "options": ["A", "B", "C"]},
    ])
    (stats,) = aggregate_responses(survey, _responses(*({"q1": p} for p in picks)))
    total = sum(o.percentage for o in stats.options)
    assert abs(total - 100) <= len(stats.options) - 1


def test_aggregation_is_idempotent():
    survey = _survey(TWO_SINGLE_CHOICE)
    responses = _responses({"q1": "A", "q2": "Y"}, {"q1": "B", "q2": "Y"})
    assert aggregate_responses(survey, responses) == aggregate_responses(survey, responses)


def test_summary_counts_respondent_categories():
    survey = _survey(TWO_SINGLE_CHOICE)
    responses = (
        _responses({"q1": "A"}, {"q1": "B"}, respondent_type="student")
        + _responses({"q1": "A"}, respondent_type="parent")
    )

    summary = summarize_survey(survey, responses)

    assert summary.total_responses == 3
    assert summary.question_count == 2
    assert summary.mode == "classic"
    assert summary.status == "published"
    assert summary.respondent_breakdown == {"student": 2, "parent": 1}
    assert [q.question_id for q in summary.questions] == ["q1", "q2"]
