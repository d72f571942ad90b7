"""Environment-backed settings — import get_settings() anywhere."""
from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

import dotenv

dotenv.load_dotenv()


@dataclass(frozen=True)
class Settings:
    openai_api_key: str = ""
    openai_model: str = "gpt-4o-mini"
    openai_temperature: float = 0.3

    supabase_url: str = ""
    supabase_service_key: str = ""

    public_base_url: str = "http://localhost:3000"
    survey_language: str = "English"
    cors_origins: str = "*"
    log_level: str = "INFO"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings(
        openai_api_key=os.environ.get("OPENAI_API_KEY", ""),
        openai_model=os.environ.get("OPENAI_MODEL", "gpt-4o-mini"),
        openai_temperature=float(os.environ.get("OPENAI_TEMPERATURE", "0.3")),
        supabase_url=os.environ.get("SUPABASE_URL", ""),
        supabase_service_key=os.environ.get("SUPABASE_SERVICE_KEY", ""),
        public_base_url=os.environ.get("PUBLIC_BASE_URL", "http://localhost:3000").rstrip("/"),
        survey_language=os.environ.get("SURVEY_LANGUAGE", "English"),
        cors_origins=os.environ.get("CORS_ORIGINS", "*"),
        log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    )
