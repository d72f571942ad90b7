"""
survey_studio/errors.py
-----------------------
Error taxonomy shared by services and routers.

Each error carries the HTTP status the API reports it with; the handler in
main.py renders every one of them as {"success": false, "error": "..."}.
"""
from __future__ import annotations


class SurveyStudioError(RuntimeError):
    """Base class for errors surfaced to the caller."""

    status_code = 500


class ConfigurationError(SurveyStudioError):
    """Required credentials or settings are missing."""

    status_code = 500


class ValidationError(SurveyStudioError):
    """Request is missing required fields or carries invalid values."""

    status_code = 400


class NotFoundError(SurveyStudioError):
    status_code = 404


class UpstreamError(SurveyStudioError):
    """The AI model or the database call failed."""

    status_code = 500


class ParseError(SurveyStudioError):
    """AI output or a stored document is not in the expected shape."""

    status_code = 500
