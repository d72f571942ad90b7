"""
/surveys router
---------------
Draft generation and CRUD over surveys.

POST   /surveys/generate        — Draft a survey with the AI model and store it as a draft
GET    /surveys                 — List surveys, newest first
GET    /surveys/{id}            — Get one survey
PUT    /surveys/{id}            — Update fields of a survey (last write wins)
POST   /surveys/{id}/publish    — Save edited questions, mark published, return share links
DELETE /surveys/{id}            — Delete a survey and its responses
"""
from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile

from survey_studio.config import get_settings
from survey_studio.dependencies import get_repository, get_text_generator
from survey_studio.errors import NotFoundError, ValidationError
from survey_studio.models.api.surveys import (
    ShareLinks,
    SurveyDeleteResponse,
    SurveyGenerateResponse,
    SurveyListResponse,
    SurveyPublishRequest,
    SurveyPublishResponse,
    SurveyResponseBody,
    SurveyUpdateRequest,
)
from survey_studio.models.domain.survey import Survey, SurveyCreate, SurveyMode, SurveyTarget
from survey_studio.services.survey_repository import SurveyRepository
from survey_studio.services.text_generator import ImagePart, TextGenerator
from survey_studio.workflows.survey_draft_workflow import generate_survey_draft

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/surveys", tags=["surveys"])

# PUT may set these to null; every other column is NOT NULL.
_NULLABLE_FIELDS = {"description"}


def _require_survey(repo: SurveyRepository, survey_id: str) -> Survey:
    """Fetch a survey or raise NotFoundError."""
    survey = repo.get_survey(survey_id)
    if survey is None:
        raise NotFoundError(f"Survey '{survey_id}' not found.")
    return survey


def _share_links(survey_id: str) -> ShareLinks:
    base = get_settings().public_base_url
    return ShareLinks(
        classic_url=f"{base}/survey/{survey_id}",
        interview_url=f"{base}/interview/{survey_id}",
    )


# ── POST /surveys/generate ────────────────────────────────────────────────────

@router.post("/generate", response_model=SurveyGenerateResponse)
def generate_survey(
    target: SurveyTarget = Form(...),
    mode: SurveyMode = Form(...),
    prompt: Optional[str] = Form(default=None),
    text: Optional[str] = Form(default=None),
    file: Optional[UploadFile] = File(default=None),
    generator: TextGenerator = Depends(get_text_generator),
    repo: SurveyRepository = Depends(get_repository),
) -> SurveyGenerateResponse:
    """
    Generate a survey draft from free text, extra instructions and/or an image,
    then store it with status 'draft'.

    Accepts multipart form data, returns JSON.
    """
    prompt = (prompt or "").strip() or None
    text = (text or "").strip() or None

    image = None
    if file is not None and file.filename:
        if not (file.content_type or "").startswith("image/"):
            raise ValidationError("Only image files can be attached.")
        image = ImagePart(data=file.file.read(), mime_type=file.content_type)

    if not (prompt or text or image):
        raise ValidationError("Provide a prompt, text, or an image to generate a survey from.")

    draft = generate_survey_draft(
        generator,
        target=target,
        mode=mode,
        text=text,
        prompt=prompt,
        image=image,
    )

    survey_id = repo.create_survey(SurveyCreate(
        title=draft.title,
        description=draft.description,
        target=target,
        mode=mode,
        questions=draft.questions,
        source_prompt=prompt,
        source_file_name=file.filename if image is not None else None,
        status="draft",
    ))

    return SurveyGenerateResponse(survey_id=survey_id, survey=draft)


# ── Read ──────────────────────────────────────────────────────────────────────

@router.get("", response_model=SurveyListResponse)
def list_surveys(repo: SurveyRepository = Depends(get_repository)) -> SurveyListResponse:
    return SurveyListResponse(surveys=repo.list_surveys())


@router.get("/{survey_id}", response_model=SurveyResponseBody)
def get_survey(survey_id: str, repo: SurveyRepository = Depends(get_repository)) -> SurveyResponseBody:
    return SurveyResponseBody(survey=_require_survey(repo, survey_id))


# ── Update / publish ──────────────────────────────────────────────────────────

@router.put("/{survey_id}", response_model=SurveyResponseBody)
def update_survey(
    survey_id: str,
    body: SurveyUpdateRequest,
    repo: SurveyRepository = Depends(get_repository),
) -> SurveyResponseBody:
    """Write only the fields present in the body. An explicit null clears `description`."""
    existing = _require_survey(repo, survey_id)

    patch = body.model_dump(mode="json", exclude_unset=True)
    not_nullable = sorted(k for k, v in patch.items() if v is None and k not in _NULLABLE_FIELDS)
    if not_nullable:
        raise ValidationError(f"Fields cannot be null: {', '.join(not_nullable)}.")
    if not patch:
        return SurveyResponseBody(survey=existing)

    updated = repo.update_survey(survey_id, patch)
    if updated is None:
        raise NotFoundError(f"Survey '{survey_id}' not found.")
    return SurveyResponseBody(survey=updated)


@router.post("/{survey_id}/publish", response_model=SurveyPublishResponse)
def publish_survey(
    survey_id: str,
    body: Optional[SurveyPublishRequest] = None,
    repo: SurveyRepository = Depends(get_repository),
) -> SurveyPublishResponse:
    """Mark a survey published, saving edited questions if they were sent."""
    _require_survey(repo, survey_id)

    patch: dict = {"status": "published"}
    if body is not None and body.questions is not None:
        patch["questions"] = [q.model_dump(mode="json") for q in body.questions]

    updated = repo.update_survey(survey_id, patch)
    if updated is None:
        raise NotFoundError(f"Survey '{survey_id}' not found.")

    logger.info("Published survey %s", survey_id)
    return SurveyPublishResponse(survey=updated, links=_share_links(survey_id))


# ── DELETE /surveys/{id} ──────────────────────────────────────────────────────

@router.delete("/{survey_id}", response_model=SurveyDeleteResponse)
def delete_survey(survey_id: str, repo: SurveyRepository = Depends(get_repository)) -> SurveyDeleteResponse:
    """
    Delete a survey. Its responses are deleted first so none are left
    pointing at a missing survey.
    """
    _require_survey(repo, survey_id)
    removed = repo.delete_survey(survey_id)
    return SurveyDeleteResponse(survey_id=survey_id, deleted_responses=removed)
