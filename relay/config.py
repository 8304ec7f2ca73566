"""
Relay configuration — all environment variables in one place.

Read from environment at runtime. Never hardcode secrets.
"""

from __future__ import annotations

import os


class Settings:
    """Application settings from environment variables."""

    # Application
    ENVIRONMENT: str = os.environ.get("ENVIRONMENT", "development")
    LOG_LEVEL: str = os.environ.get("LOG_LEVEL", "INFO")
    CORS_ALLOW_ORIGINS: list[str] = [
        origin.strip()
        for origin in os.environ.get(
            "CORS_ALLOW_ORIGINS",
            "http://localhost:3000,http://localhost:3001,http://localhost:5000",
        ).split(",")
        if origin.strip()
    ]

    # Email (Resend)
    RESEND_API_KEY: str = os.environ.get("RESEND_API_KEY", "")
    EMAIL_FROM: str = os.environ.get("EMAIL_FROM", "Relay <auth@localhost>")

    # Login links
    LOGIN_TOKEN_TTL_SECONDS: int = 3600
    LOGIN_LINK_RATE_LIMIT: int = 5  # per email+IP
    LOGIN_LINK_RATE_WINDOW_SECONDS: int = 600
    VERIFY_RATE_LIMIT: int = 10  # per IP
    VERIFY_RATE_WINDOW_SECONDS: int = 60

    # Generic endpoints
    API_RATE_LIMIT: int = int(os.environ.get("API_RATE_LIMIT", "60"))  # per IP+path
    API_RATE_WINDOW_SECONDS: int = 60

    # Background sweep of expired tokens and rate windows
    SWEEP_INTERVAL_SECONDS: int = 300

    # LLM completions (OpenAI-compatible endpoint, Groq by default)
    LLM_API_KEY: str = os.environ.get("LLM_API_KEY", os.environ.get("GROQ_API_KEY", ""))
    LLM_API_URL: str = os.environ.get("LLM_API_URL", "https://api.groq.com/openai/v1/chat/completions")
    LLM_TIMEOUT_SECONDS: float = float(os.environ.get("LLM_TIMEOUT_SECONDS", "30"))

    # Public client configuration handed to the browser as-is
    CLIENT_CONFIG: dict[str, str | None] = {
        "apiKey": os.environ.get("CLIENT_CONFIG_API_KEY"),
        "authDomain": os.environ.get("CLIENT_CONFIG_AUTH_DOMAIN"),
        "projectId": os.environ.get("CLIENT_CONFIG_PROJECT_ID"),
        "storageBucket": os.environ.get("CLIENT_CONFIG_STORAGE_BUCKET"),
        "messagingSenderId": os.environ.get("CLIENT_CONFIG_MESSAGING_SENDER_ID"),
        "appId": os.environ.get("CLIENT_CONFIG_APP_ID"),
        "measurementId": os.environ.get("CLIENT_CONFIG_MEASUREMENT_ID"),
    }

    @property
    def PUBLIC_URL(self) -> str:
        url = os.environ.get("PUBLIC_URL")
        if url:
            return url.rstrip("/")
        return "http://localhost:5000" if self.ENVIRONMENT == "development" else "https://relay.example.com"


# Singleton instance
settings = Settings()
