"""
Pydantic models for the relay.

All data shapes defined here. No imports from services or routes.
"""

from relay.models.auth import (
    LoginIntent,
    SendLoginLinkRequest,
    SendLoginLinkResponse,
    VerifiedLogin,
    VerifyLoginRequest,
)
from relay.models.health import HealthResponse, StatusResponse

__all__ = [
    # Auth models
    "LoginIntent",
    "SendLoginLinkRequest",
    "SendLoginLinkResponse",
    "VerifyLoginRequest",
    "VerifiedLogin",
    # Health models
    "HealthResponse",
    "StatusResponse",
]
