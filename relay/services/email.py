"""Email service using Resend for login link delivery."""

from __future__ import annotations

import asyncio
import html

import resend

from relay import config

# Initialize Resend with API key
resend.api_key = config.settings.RESEND_API_KEY


def build_login_url(token: str) -> str:
    """URL the user clicks to redeem a login token."""
    return f"{config.settings.PUBLIC_URL}/auth/verify?token={token}"


async def send_login_link(email: str, login_url: str, name: str | None = None) -> None:
    """
    Send a login link email via Resend.

    Args:
        email: Recipient email address
        login_url: Link carrying the login token
        name: Optional recipient name for the greeting

    Raises:
        Exception: If email sending fails
    """
    minutes = config.settings.LOGIN_TOKEN_TTL_SECONDS // 60
    greeting = f"Hello {html.escape(name)}," if name else "Hello,"
    safe_url = html.escape(login_url, quote=True)

    html_content = f"""
    <!DOCTYPE html>
    <html>
    <body>
        <p>{greeting}</p>
        <p>Click the link below to sign in. This link will expire in {minutes} minutes and works once.</p>
        <p><a href="{safe_url}">Sign in</a></p>
        <p>If the link doesn't work, copy and paste this into your browser:</p>
        <p><code>{safe_url}</code></p>
        <p>If you didn't request this email, you can safely ignore it.</p>
    </body>
    </html>
    """

    # Plain text fallback
    text_content = f"""
    {"Hello " + name + "," if name else "Hello,"}

    Click this link to sign in:
    {login_url}

    This link will expire in {minutes} minutes and works once.

    If you didn't request this email, you can safely ignore it.
    """

    params = {
        "from": config.settings.EMAIL_FROM,
        "to": [email],
        "subject": "Your sign-in link",
        "html": html_content,
        "text": text_content,
    }

    # resend's client is synchronous
    await asyncio.to_thread(resend.Emails.send, params)
