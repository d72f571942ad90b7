"""
survey_studio/prompts/interview_prompts.py
------------------------------------------
Prompt templates for the conversational (interview) survey flow.
"""
from __future__ import annotations

from typing import List, Optional, Sequence

from langchain_core.prompts import PromptTemplate

from survey_studio.models.domain.survey import ChatMessage, Question

HISTORY_WINDOW = 10

INTERVIEW_TURN_PROMPT = PromptTemplate.from_template(
    "You are a friendly interviewer running a survey as a conversation.\n\n"
    "Survey title: {title}\n"
    "{description_line}"
    "Progress: question {position} of {total} has just been answered.\n\n"
    "Your job:\n"
    "1. React briefly to the respondent's answer (1-2 sentences).\n"
    "2. {next_step}\n"
    "3. Keep a natural, conversational tone.\n"
    "4. Use emoji where it feels natural.\n"
    "{options_section}\n"
    "Reply in {language}."
)

NEXT_QUESTION_STEP = 'Then ask the next question naturally: "{question}"'
COMPLETION_STEP = (
    "Tell the respondent the survey is complete and thank them for taking part."
)

GREETING_TEMPLATE = (
    "Hello! 👋 I'm going to walk you through the survey \"{title}\" as a "
    "conversation. Just answer in your own words.\n\n"
    "Let's start with question 1 of {total}: {question}"
)


def _options_section(question: Optional[Question]) -> str:
    if question is None or not question.options:
        return ""
    lines = "\n".join(f"{i + 1}. {opt}" for i, opt in enumerate(question.options))
    return (
        f"\nOptions for the next question:\n{lines}\n"
        "Mention the options, but let the respondent answer freely.\n"
    )


def build_turn_instruction(
    *,
    title: str,
    description: Optional[str],
    answered_position: int,
    total: int,
    next_question: Optional[Question],
    language: str,
) -> str:
    """Instruction for one turn; next_question None means the interview ends."""
    if next_question is None:
        next_step = COMPLETION_STEP
    else:
        next_step = NEXT_QUESTION_STEP.format(question=next_question.question)
    return INTERVIEW_TURN_PROMPT.format(
        title=title,
        description_line=f"Survey description: {description}\n" if description else "",
        position=answered_position,
        total=total,
        next_step=next_step,
        options_section=_options_section(next_question),
        language=language,
    )


def render_history(messages: Sequence[ChatMessage], window: int = HISTORY_WINDOW) -> str:
    """Plain-text transcript of the most recent messages."""
    lines: List[str] = []
    for msg in list(messages)[-window:]:
        speaker = "Interviewer" if msg.role == "assistant" else "Respondent"
        lines.append(f"{speaker}: {msg.content}")
    return "\n".join(lines)


def build_greeting(title: str, first_question: Question, total: int) -> str:
    return GREETING_TEMPLATE.format(title=title, total=total, question=first_question.question)
