"""Pydantic models for the /admin router."""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel


class HealthResponse(BaseModel):
    status: str  # "ok" | "degraded"
    supabase: bool
    openai: bool
    surveys: Optional[int] = None  # stored survey count when the store is reachable
    detail: Optional[str] = None
