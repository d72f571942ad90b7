"""
main.py
-------
FastAPI application entrypoint.

Registers all routers and configures CORS, logging, and error rendering.

Run with:
    uvicorn survey_studio.main:app --reload --port 8000

Swagger UI: http://localhost:8000/docs
ReDoc:      http://localhost:8000/redoc
"""
from __future__ import annotations

import logging
import os

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from survey_studio.config import get_settings

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
)
logger = logging.getLogger(__name__)

from survey_studio.errors import SurveyStudioError
from survey_studio.routers.admin_router import router as admin_router
from survey_studio.routers.interview_router import router as interview_router
from survey_studio.routers.responses_router import router as responses_router
from survey_studio.routers.survey_router import router as survey_router

app = FastAPI(
    title="Survey Studio API",
    description=(
        "Draft surveys with an AI model from a topic description, edit and "
        "publish them, and collect responses through a classic form or a "
        "conversational interview."
    ),
    version="1.0.0",
)

# ── CORS ─────────────────────────────────────────────────────────────────────
# Tighten allowed_origins in production
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── Errors ────────────────────────────────────────────────────────────────────

@app.exception_handler(SurveyStudioError)
async def survey_studio_error_handler(request: Request, exc: SurveyStudioError):
    if exc.status_code >= 500:
        logger.error("%s on %s: %s", type(exc).__name__, request.url.path, exc)
    else:
        logger.info("%s on %s: %s", type(exc).__name__, request.url.path, exc)
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": str(exc)},
    )


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    """Missing or malformed request fields are reported as 400."""
    problems = []
    for error in exc.errors():
        loc = error.get("loc", [])
        field_path = ".".join(str(x) for x in loc[1:]) if len(loc) > 1 else "request"
        problems.append(f"{field_path}: {error.get('msg', 'invalid value')}")
    logger.info("Request validation failed on %s: %s", request.url.path, problems)
    return JSONResponse(
        status_code=400,
        content={"success": False, "error": "Invalid request: " + "; ".join(problems)},
    )


# ── Routers ───────────────────────────────────────────────────────────────────
app.include_router(survey_router)      # POST /surveys/generate, GET/PUT/DELETE /surveys, POST /surveys/{id}/publish
app.include_router(interview_router)   # POST /interview/start, POST /interview/chat
app.include_router(responses_router)   # POST /responses, GET /responses/{id}, GET /responses/{id}/summary
app.include_router(admin_router)       # GET /admin/health


@app.get("/", tags=["root"])
def root():
    return {
        "service": "Survey Studio API",
        "docs": "/docs",
        "health": "/admin/health",
    }


if __name__ == "__main__":
    import uvicorn
    port = int(os.environ.get("PORT", 8000))
    uvicorn.run(app, host="0.0.0.0", port=port)
