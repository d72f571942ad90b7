"""
survey_studio/workflows/survey_draft_workflow.py
------------------------------------------------
LangGraph survey draft workflow: build prompt → generate → parse.

Turns (target, mode, free text, extra instructions, optional image) into a
structured GeneratedSurvey. The workflow has no side effects; storing the
draft is the caller's job.

Failures are terminal for the request:
  - UpstreamError  — the text generator call failed (not retried)
  - ParseError     — the output has no JSON object, or it is not a survey

Usage
-----
    from survey_studio.workflows.survey_draft_workflow import generate_survey_draft

    draft = generate_survey_draft(
        generator,
        target="student",
        mode="classic",
        text="Notes from this term's science fair...",
    )
    print(draft.title, len(draft.questions))
"""
from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, List, Optional, TypedDict

import pydantic
from langgraph.graph import END, StateGraph

from survey_studio.config import get_settings
from survey_studio.errors import ParseError
from survey_studio.models.domain.survey import CHOICE_TYPES, GeneratedSurvey
from survey_studio.prompts.survey_prompts import (
    MAX_QUESTIONS,
    MIN_QUESTIONS,
    build_instruction,
    build_user_content,
)
from survey_studio.services.text_generator import ImagePart, PromptPart, TextPart

logger = logging.getLogger(__name__)

_JSON_OBJECT_RE = re.compile(r"\{[\s\S]*\}")


# ── State ────────────────────────────────────────────────────────────────────

class SurveyDraftState(TypedDict, total=False):
    target: str
    mode: str
    text: Optional[str]
    prompt: Optional[str]
    image: Optional[ImagePart]
    language: str

    # Populated by nodes
    parts: List[PromptPart]
    raw_output: str
    draft: GeneratedSurvey


# ── Parsing ──────────────────────────────────────────────────────────────────

def extract_json_object(raw: str) -> Dict[str, Any]:
    """Parse the first '{' through the last '}' of the model output."""
    match = _JSON_OBJECT_RE.search(raw or "")
    if not match:
        raise ParseError("Failed to parse survey response: no JSON object found in model output.")
    try:
        data = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        raise ParseError(f"Failed to parse survey response: {e}") from e
    if not isinstance(data, dict):
        raise ParseError("Failed to parse survey response: expected a JSON object.")
    return data


def normalize_questions(raw_questions: Any) -> List[Dict[str, Any]]:
    """
    Give every question a unique non-empty id and a boolean `required`.

    Missing ids become q<index+1>; an id already used earlier in the draft is
    reassigned the same way. Options are only kept on choice questions.
    """
    if not isinstance(raw_questions, list):
        raise ParseError("Failed to parse survey response: 'questions' is not a list.")

    normalized = []
    seen: set[str] = set()
    for idx, q in enumerate(raw_questions):
        if not isinstance(q, dict):
            raise ParseError(f"Failed to parse survey response: question {idx + 1} is not an object.")
        qid = str(q.get("id") or "").strip()
        if not qid or qid in seen:
            qid = f"q{idx + 1}"
        seen.add(qid)

        required = q.get("required")
        item = {
            **q,
            "id": qid,
            "required": required if isinstance(required, bool) else True,
        }
        if item.get("type") not in CHOICE_TYPES:
            item.pop("options", None)
        normalized.append(item)
    return normalized


def parse_survey_draft(raw: str) -> GeneratedSurvey:
    data = extract_json_object(raw)
    data["questions"] = normalize_questions(data.get("questions"))
    if data.get("description") is None:
        data["description"] = ""

    try:
        draft = GeneratedSurvey.model_validate(data)
    except pydantic.ValidationError as e:
        raise ParseError(f"Survey response does not match the expected shape: {e}") from e

    count = len(draft.questions)
    if not MIN_QUESTIONS <= count <= MAX_QUESTIONS:
        raise ParseError(
            f"Survey response has {count} questions; expected {MIN_QUESTIONS}-{MAX_QUESTIONS}."
        )
    return draft


# ── Graph ────────────────────────────────────────────────────────────────────

def build_survey_draft_graph(generator):
    """Build and compile the draft LangGraph around the given text generator."""

    def build_prompt(state: SurveyDraftState) -> SurveyDraftState:
        """Assemble instruction + content parts for the generator."""
        image = state.get("image")
        language = state.get("language") or get_settings().survey_language

        if image is not None:
            parts: List[PromptPart] = [
                TextPart(build_instruction(
                    target=state["target"],
                    mode=state["mode"],
                    language=language,
                    with_image=True,
                    extra=state.get("prompt"),
                )),
                image,
            ]
            if state.get("text"):
                parts.append(TextPart(f"Content to analyze:\n{state['text']}"))
        else:
            parts = [
                TextPart(build_instruction(
                    target=state["target"], mode=state["mode"], language=language,
                )),
                TextPart(build_user_content(state.get("text"), state.get("prompt"))),
            ]
        return {**state, "parts": parts}

    def generate_draft(state: SurveyDraftState) -> SurveyDraftState:
        raw_output = generator.generate(state["parts"])
        logger.info("Draft generation returned %d chars", len(raw_output or ""))
        return {**state, "raw_output": raw_output}

    def parse_draft(state: SurveyDraftState) -> SurveyDraftState:
        return {**state, "draft": parse_survey_draft(state.get("raw_output", ""))}

    graph = StateGraph(SurveyDraftState)

    graph.add_node("build_prompt", build_prompt)
    graph.add_node("generate_draft", generate_draft)
    graph.add_node("parse_draft", parse_draft)

    graph.set_entry_point("build_prompt")

    graph.add_edge("build_prompt", "generate_draft")
    graph.add_edge("generate_draft", "parse_draft")
    graph.add_edge("parse_draft", END)

    return graph.compile()


def generate_survey_draft(
    generator,
    *,
    target: str,
    mode: str,
    text: Optional[str] = None,
    prompt: Optional[str] = None,
    image: Optional[ImagePart] = None,
    language: Optional[str] = None,
) -> GeneratedSurvey:
    """Run the draft workflow end to end and return the parsed draft."""
    graph = build_survey_draft_graph(generator)
    result = graph.invoke({
        "target": target,
        "mode": mode,
        "text": text,
        "prompt": prompt,
        "image": image,
        "language": language or get_settings().survey_language,
    })
    draft = result["draft"]
    logger.info("Generated %s survey draft %r with %d questions", mode, draft.title, len(draft.questions))
    return draft
