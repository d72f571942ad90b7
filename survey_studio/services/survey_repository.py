"""
survey_studio/services/survey_repository.py
-------------------------------------------
Supabase-backed store for surveys and their responses.

Tables (see sql/01_surveys.sql)
------
  surveys           one row per survey, questions held as JSONB
  survey_responses  one row per submission, answers / interview_log as JSONB

Rows are deserialized explicitly: a row that does not fit the domain model
raises ParseError instead of producing a half-filled object. Any client
failure is raised as UpstreamError.

Import
------
    from survey_studio.services.survey_repository import SurveyRepository
"""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional
from uuid import UUID

import pydantic
from supabase import Client

from survey_studio.errors import ParseError, UpstreamError
from survey_studio.models.domain.survey import (
    Survey,
    SurveyCreate,
    SurveyResponse,
    SurveyResponseCreate,
)

logger = logging.getLogger(__name__)

SURVEYS_TABLE = "surveys"
RESPONSES_TABLE = "survey_responses"

_SURVEY_JSON_COLUMNS = ("questions",)
_RESPONSE_JSON_COLUMNS = ("answers", "interview_log")


# ── Helpers ──────────────────────────────────────────────────────────────────

def _ensure_parsed(value: Any) -> Any:
    """Supabase may return JSONB columns as JSON strings; parse if needed."""
    if isinstance(value, str):
        try:
            return json.loads(value)
        except json.JSONDecodeError as e:
            raise ParseError(f"Stored JSON column is not valid JSON: {e}") from e
    return value


def _is_uuid(value: str) -> bool:
    try:
        UUID(str(value))
        return True
    except ValueError:
        return False


def _drop_none(doc: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in doc.items() if v is not None}


def _row_to_survey(row: Dict[str, Any]) -> Survey:
    data = dict(row)
    for col in _SURVEY_JSON_COLUMNS:
        if col in data:
            data[col] = _ensure_parsed(data[col])
    if data.get("questions") is None:
        data["questions"] = []
    try:
        return Survey.model_validate(data)
    except pydantic.ValidationError as e:
        raise ParseError(f"Survey '{row.get('id')}' is malformed: {e}") from e


def _row_to_response(row: Dict[str, Any]) -> SurveyResponse:
    data = dict(row)
    for col in _RESPONSE_JSON_COLUMNS:
        if col in data:
            data[col] = _ensure_parsed(data[col])
    if data.get("answers") is None:
        data["answers"] = {}
    try:
        return SurveyResponse.model_validate(data)
    except pydantic.ValidationError as e:
        raise ParseError(f"Response '{row.get('id')}' is malformed: {e}") from e


# ── Repository ───────────────────────────────────────────────────────────────

class SurveyRepository:
    """CRUD + ordered listing over surveys and survey responses."""

    def __init__(self, supabase: Client):
        self.sb = supabase

    def _execute(self, query, action: str):
        try:
            return query.execute()
        except Exception as e:
            logger.exception("Database call failed: %s", action)
            raise UpstreamError(f"Database error while trying to {action}: {e}") from e

    # ── Surveys ──────────────────────────────────────────────────────────────

    def create_survey(self, survey: SurveyCreate) -> str:
        """Insert a survey row. Returns the new id."""
        doc = _drop_none(survey.model_dump(mode="json"))
        res = self._execute(self.sb.table(SURVEYS_TABLE).insert(doc), "create survey")
        if not res.data:
            raise UpstreamError("Survey insert returned no rows.")
        survey_id = str(res.data[0]["id"])
        logger.info("Created survey %s (%d questions)", survey_id, len(survey.questions))
        return survey_id

    def get_survey(self, survey_id: str) -> Optional[Survey]:
        """Fetch one survey, or None. Ids that are not UUIDs are never present."""
        if not _is_uuid(survey_id):
            return None
        res = self._execute(
            self.sb.table(SURVEYS_TABLE).select("*").eq("id", survey_id).limit(1),
            "fetch survey",
        )
        rows = res.data or []
        return _row_to_survey(rows[0]) if rows else None

    def update_survey(self, survey_id: str, fields: Dict[str, Any]) -> Optional[Survey]:
        """Patch the given top-level fields. Last write wins."""
        if not fields:
            return self.get_survey(survey_id)
        res = self._execute(
            self.sb.table(SURVEYS_TABLE).update(fields).eq("id", survey_id),
            "update survey",
        )
        rows = res.data or []
        return _row_to_survey(rows[0]) if rows else None

    def delete_survey(self, survey_id: str) -> int:
        """
        Delete a survey. Its responses go with it through the foreign key's
        ON DELETE CASCADE, so this is one write.

        Returns the number of responses the survey had when the delete ran.
        """
        removed = self.count_responses_by_survey(survey_id)
        self._execute(
            self.sb.table(SURVEYS_TABLE).delete().eq("id", survey_id),
            "delete survey",
        )
        logger.info("Deleted survey %s and %d responses", survey_id, removed)
        return removed

    def count_surveys(self) -> int:
        res = self._execute(
            self.sb.table(SURVEYS_TABLE).select("id", count="exact").limit(1),
            "count surveys",
        )
        return res.count or 0

    def list_surveys(self) -> List[Survey]:
        """All surveys, newest first."""
        res = self._execute(
            self.sb.table(SURVEYS_TABLE).select("*").order("created_at", desc=True),
            "list surveys",
        )
        return [_row_to_survey(row) for row in (res.data or [])]

    # ── Responses ────────────────────────────────────────────────────────────

    def create_response(self, response: SurveyResponseCreate) -> str:
        doc = _drop_none(response.model_dump(mode="json"))
        res = self._execute(self.sb.table(RESPONSES_TABLE).insert(doc), "store response")
        if not res.data:
            raise UpstreamError("Response insert returned no rows.")
        return str(res.data[0]["id"])

    def list_responses_by_survey(self, survey_id: str) -> List[SurveyResponse]:
        """Responses for one survey, most recent submission first."""
        if not _is_uuid(survey_id):
            return []
        res = self._execute(
            self.sb.table(RESPONSES_TABLE)
            .select("*")
            .eq("survey_id", survey_id)
            .order("submitted_at", desc=True),
            "list responses",
        )
        return [_row_to_response(row) for row in (res.data or [])]

    def count_responses_by_survey(self, survey_id: str) -> int:
        if not _is_uuid(survey_id):
            return 0
        res = self._execute(
            self.sb.table(RESPONSES_TABLE).select("id", count="exact").eq("survey_id", survey_id),
            "count responses",
        )
        return res.count or 0
