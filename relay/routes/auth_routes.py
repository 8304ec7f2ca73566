"""Authentication routes for passwordless login links."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Query, Request, status

from relay.errors import RateLimited, TokenInvalidOrExpired
from relay.middleware.rate_limit import (
    client_address,
    login_link_limiter,
    too_many_requests,
    verify_limiter,
)
from relay.models.auth import (
    SendLoginLinkRequest,
    SendLoginLinkResponse,
    VerifiedLogin,
    VerifyLoginRequest,
)
from relay.services.email import build_login_url, send_login_link
from relay.services.token_store import redact_identity, token_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/send", status_code=200)
async def send_login_link_endpoint(
    req: SendLoginLinkRequest,
    request: Request,
) -> SendLoginLinkResponse:
    """
    Send a login link to the user's email.

    Rate limit: LOGIN_LINK_RATE_LIMIT per (IP, email) per window.
    """
    email = req.email.lower()  # Normalize email to lowercase
    client_ip = client_address(request)

    try:
        login_link_limiter.check(f"{client_ip}:{email}")
    except RateLimited as e:
        raise too_many_requests(e, "Too many login links requested. Please wait before trying again.") from e

    token = token_store.issue(email, display_name=req.name, context=req.context)

    try:
        await send_login_link(email, build_login_url(token), req.name)
    except Exception as e:
        # Don't expose provider details to the client
        logger.exception("Failed to send login link email to %s", redact_identity(email))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to send email. Please try again.",
        ) from e

    return SendLoginLinkResponse()


def _redeem(token: str, request: Request) -> VerifiedLogin:
    """Rate limit the caller, then consume the token."""
    try:
        verify_limiter.check(client_address(request))
    except RateLimited as e:
        raise too_many_requests(e, "Too many verification attempts. Please wait a moment.") from e

    try:
        intent = token_store.redeem(token)
    except TokenInvalidOrExpired as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired login link. Please request a new one.",
        ) from e

    return VerifiedLogin.from_intent(intent)


@router.get("/verify", status_code=200)
async def verify_login_link_endpoint(
    request: Request,
    token: str = Query(..., min_length=1, max_length=256),
) -> VerifiedLogin:
    """
    Redeem the token carried by an emailed login link.

    Rate limit: VERIFY_RATE_LIMIT per IP per window (prevents token brute force).
    """
    return _redeem(token, request)


@router.post("/verify", status_code=200)
async def verify_login_endpoint(
    req: VerifyLoginRequest,
    request: Request,
) -> VerifiedLogin:
    """
    Redeem a login token posted by the frontend.

    Shares the rate limit of the GET link endpoint.
    """
    return _redeem(req.token, request)
