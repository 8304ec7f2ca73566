"""
Pytest configuration and fixtures for relay tests.
"""

from __future__ import annotations

import os

# Set test environment variables before importing config
os.environ.setdefault("RESEND_API_KEY", "test-resend-key")
os.environ.setdefault("LLM_API_KEY", "test-llm-key")
os.environ.setdefault("PUBLIC_URL", "http://test")

import httpx  # noqa: E402
import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402

from relay.main import app  # noqa: E402
from relay.middleware.rate_limit import rate_store  # noqa: E402
from relay.services.token_store import token_store  # noqa: E402


class FakeClock:
    """Manually advanced clock for expiry tests."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture(autouse=True)
def reset_global_stores():
    """Every test starts with empty token and rate-limit stores."""
    token_store.store.clear()
    rate_store.clear()
    yield
    token_store.store.clear()
    rate_store.clear()


@pytest_asyncio.fixture(loop_scope="session")
async def async_client():
    """Async HTTP client against the ASGI app."""
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client
