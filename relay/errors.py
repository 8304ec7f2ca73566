"""
Errors raised by the ephemeral state services.

Both are recoverable by the caller. Routes translate them into HTTP responses.
"""

from __future__ import annotations

import math


class RelayError(Exception):
    """Base class for relay errors."""


class TokenInvalidOrExpired(RelayError):
    """
    A login token could not be redeemed.

    Raised for unknown, already used and expired tokens alike so callers
    cannot tell the three apart.
    """

    def __init__(self) -> None:
        super().__init__("Login token is invalid or expired")


class RateLimited(RelayError):
    """An action was rejected by a rate limiter."""

    def __init__(self, retry_after: float):
        self.retry_after = retry_after
        super().__init__(f"Rate limit exceeded, retry after {retry_after:.1f}s")

    @property
    def retry_after_header(self) -> str:
        """Retry-After value in whole seconds, never below 1."""
        return str(max(1, math.ceil(self.retry_after)))
