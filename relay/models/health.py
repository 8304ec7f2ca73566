"""Health and status response models."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Uptime probe response."""

    status: str = "ok"
    environment: str
    timestamp: datetime


class StatusResponse(BaseModel):
    """Diagnostic response. Reports whether secrets are set, never their values."""

    message: str = "Server is running"
    llm_api_key_set: bool
    environment: str
