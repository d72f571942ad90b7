"""
survey_studio/prompts/survey_prompts.py
---------------------------------------
Prompt templates for survey draft generation.

Split into:
  - Audience / mode descriptions  — substituted into the designer instruction
  - Output format                 — enforces the {title, description, questions} JSON schema
  - Assembled                     — SURVEY_DRAFT_PROMPT (text input) and
                                    IMAGE_SURVEY_DRAFT_PROMPT (image input)
"""
from __future__ import annotations

from typing import Dict, List, Optional

from langchain_core.prompts import PromptTemplate

MIN_QUESTIONS = 5
MAX_QUESTIONS = 10

TARGET_DESCRIPTIONS: Dict[str, str] = {
    "student": "primary and secondary school students",
    "teacher": "teachers",
    "parent": "parents of school students",
}

MODE_DESCRIPTIONS: Dict[str, str] = {
    "classic": "a standard form (a mix of choice questions and written answers)",
    "interview": "an interview (questions asked one at a time in a conversation)",
}

INTERVIEW_MODE_HINT = (
    "This survey runs as an interview, so include plenty of open-ended "
    "questions (text, long_text).\n"
)

DEFAULT_REQUEST = "Create a general satisfaction survey."

# ── Output format ───────────────────────────────────────────────────────────

SURVEY_OUTPUT_FORMAT_PROMPT = (
    "Return ONLY valid JSON, with no commentary, in exactly this format:\n"
    "{{\n"
    '  "title": "Survey title",\n'
    '  "description": "Survey description",\n'
    '  "questions": [\n'
    "    {{\n"
    '      "id": "q1",\n'
    '      "type": "single_choice | multiple_choice | text | long_text",\n'
    '      "question": "Question text",\n'
    '      "options": ["Option 1", "Option 2"],\n'
    '      "required": true\n'
    "    }}\n"
    "  ]\n"
    "}}\n\n"
    "Question types:\n"
    "- single_choice: pick exactly one option\n"
    "- multiple_choice: pick any number of options\n"
    "- text: short written answer\n"
    "- long_text: long written answer\n"
    '"options" is only present for single_choice and multiple_choice.\n\n'
    f"The survey must have {MIN_QUESTIONS}-{MAX_QUESTIONS} questions.\n"
)

# ── Assembled prompts ───────────────────────────────────────────────────────

SURVEY_DRAFT_PROMPT = PromptTemplate.from_template(
    "You are an assistant that specializes in designing education surveys. "
    "Analyze the content you are given and write survey questions for it.\n\n"
    "Audience: {target_description}\n"
    "Format: {mode_description}\n"
    "Write the survey in {language}.\n\n"
    + SURVEY_OUTPUT_FORMAT_PROMPT
    + "{mode_hint}"
)

IMAGE_SURVEY_DRAFT_PROMPT = PromptTemplate.from_template(
    "You are an assistant that specializes in designing education surveys. "
    "Extract the content of the attached image, analyze it, and write survey "
    "questions for it.\n\n"
    "Audience: {target_description}\n"
    "Format: {mode_description}\n"
    "Write the survey in {language}.\n\n"
    + SURVEY_OUTPUT_FORMAT_PROMPT
    + "{mode_hint}"
    + "{extra_section}"
)


def build_instruction(
    *,
    target: str,
    mode: str,
    language: str,
    with_image: bool = False,
    extra: Optional[str] = None,
) -> str:
    """Render the designer instruction for the given audience and mode."""
    values = {
        "target_description": TARGET_DESCRIPTIONS[target],
        "mode_description": MODE_DESCRIPTIONS[mode],
        "language": language,
        "mode_hint": INTERVIEW_MODE_HINT if mode == "interview" else "",
    }
    if with_image:
        values["extra_section"] = f"\nAdditional requests: {extra}\n" if extra else ""
        return IMAGE_SURVEY_DRAFT_PROMPT.format(**values)
    return SURVEY_DRAFT_PROMPT.format(**values)


def build_user_content(text: Optional[str], extra: Optional[str]) -> str:
    """Content to analyze: free text first, then extra instructions."""
    parts: List[str] = []
    if text:
        parts.append(f"Content to analyze:\n{text}")
    if extra:
        parts.append(f"Additional requests:\n{extra}")
    return "\n\n".join(parts) if parts else DEFAULT_REQUEST
