"""FastAPI dependencies — one place to swap the store or the model in tests."""
from __future__ import annotations

from fastapi import Depends

from survey_studio.services.interview_service import InterviewEngine
from survey_studio.services.response_service import ResponseService
from survey_studio.services.survey_repository import SurveyRepository
from survey_studio.services.text_generator import TextGenerator
from survey_studio.supabase.supabase_client import get_supabase


def get_repository() -> SurveyRepository:
    return SurveyRepository(get_supabase())


def get_text_generator() -> TextGenerator:
    return TextGenerator.from_settings()


def get_response_service(
    repository: SurveyRepository = Depends(get_repository),
) -> ResponseService:
    return ResponseService(repository)


def get_interview_engine(
    generator: TextGenerator = Depends(get_text_generator),
    responses: ResponseService = Depends(get_response_service),
) -> InterviewEngine:
    return InterviewEngine(generator, responses)
