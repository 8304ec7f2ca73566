"""Tests for login link email delivery with Resend mocked."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from relay import config
from relay.services.email import build_login_url, send_login_link


def test_build_login_url():
    assert build_login_url("abc") == f"{config.settings.PUBLIC_URL}/auth/verify?token=abc"


@pytest.mark.asyncio(loop_scope="session")
async def test_send_login_link_params():
    url = build_login_url("a" * 64)

    with patch("resend.Emails.send") as mock_send:
        await send_login_link("user@example.com", url, name="Ada")

    params = mock_send.call_args.args[0]
    assert params["to"] == ["user@example.com"]
    assert params["from"] == config.settings.EMAIL_FROM
    assert url in params["text"]
    assert url in params["html"]
    assert "Hello Ada," in params["html"]
    assert "60 minutes" in params["text"]


@pytest.mark.asyncio(loop_scope="session")
async def test_send_login_link_escapes_name():
    with patch("resend.Emails.send") as mock_send:
        await send_login_link("user@example.com", build_login_url("t"), name="<script>")

    html_content = mock_send.call_args.args[0]["html"]
    assert "<script>" not in html_content
    assert "&lt;script&gt;" in html_content


@pytest.mark.asyncio(loop_scope="session")
async def test_send_login_link_propagates_errors():
    with patch("resend.Emails.send", side_effect=RuntimeError("provider down")):
        with pytest.raises(RuntimeError):
            await send_login_link("user@example.com", build_login_url("t"))
