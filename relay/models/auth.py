"""Authentication models for login links."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class LoginIntent(BaseModel):
    """What a login token stands for. Stored in the token store, never persisted."""

    model_config = ConfigDict(frozen=True)

    identity: str = Field(..., min_length=1)
    display_name: str | None = None
    context: str | None = None
    issued_at: datetime


class SendLoginLinkRequest(BaseModel):
    """Request to send a login link."""

    model_config = ConfigDict(extra="forbid")

    email: EmailStr
    name: str | None = Field(default=None, max_length=200)
    context: str | None = Field(default=None, max_length=200)


class SendLoginLinkResponse(BaseModel):
    """Response after sending a login link."""

    message: str = "Login link sent. Check your email."


class VerifyLoginRequest(BaseModel):
    """Request to redeem a login token."""

    model_config = ConfigDict(extra="forbid")

    token: str = Field(..., min_length=1, max_length=256)


class VerifiedLogin(BaseModel):
    """What the API returns after a successful redemption. Nothing else leaks."""

    identity: str
    display_name: str | None = None

    @classmethod
    def from_intent(cls, intent: LoginIntent) -> VerifiedLogin:
        """Convert a redeemed LoginIntent to the public response."""
        return cls(identity=intent.identity, display_name=intent.display_name)
