"""
In-memory fixed-window rate limiting.

Each RateLimiter enforces one RatePolicy. All limiters share a single
KeyedExpiringStore; keys are prefixed with the policy name so different
actions never see each other's counters. A window's entry expires when the
window closes, so the background sweeper reclaims idle keys.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from fastapi import HTTPException, Request, status

from relay import config
from relay.errors import RateLimited
from relay.services.expiring_store import KeyedExpiringStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RatePolicy:
    """Static limit for one action: at most max_requests per window_seconds."""

    name: str
    window_seconds: float
    max_requests: int

    def __post_init__(self) -> None:
        if self.window_seconds <= 0:
            raise ValueError("window_seconds must be positive")
        if self.max_requests < 1:
            raise ValueError("max_requests must be at least 1")


@dataclass(frozen=True)
class RateWindow:
    """Admitted requests in the current window and when the window ends."""

    count: int
    reset_at: float


@dataclass(frozen=True)
class Decision:
    """Outcome of RateLimiter.try_admit()."""

    admitted: bool
    retry_after: float = 0.0


class RateLimiter:
    """
    Fixed-window counter per key.

    The first admitted request opens a window of policy.window_seconds.
    Up to policy.max_requests are admitted until it closes; the next
    request after that opens a fresh window.
    """

    def __init__(self, policy: RatePolicy, store: KeyedExpiringStore[RateWindow] | None = None):
        self.policy = policy
        self.store: KeyedExpiringStore[RateWindow] = store if store is not None else KeyedExpiringStore()

    def _key(self, key: str) -> str:
        return f"{self.policy.name}:{key}"

    def try_admit(self, key: str) -> Decision:
        """
        Count a request for key if the policy allows it.

        The check and the increment happen under the key's lock, so
        concurrent callers can never jointly exceed max_requests.

        Args:
            key: Caller-chosen identifier (e.g. client IP plus email)

        Returns:
            Decision with admitted=True, or admitted=False and the seconds
            until the current window closes
        """
        policy = self.policy
        decision = Decision(admitted=True)

        def step(window: RateWindow | None) -> tuple[RateWindow, float]:
            nonlocal decision
            now = self.store.now()
            if window is None or now >= window.reset_at:
                return RateWindow(count=1, reset_at=now + policy.window_seconds), policy.window_seconds
            remaining = window.reset_at - now
            if window.count < policy.max_requests:
                return RateWindow(count=window.count + 1, reset_at=window.reset_at), remaining
            decision = Decision(admitted=False, retry_after=remaining)
            return window, remaining

        self.store.mutate(self._key(key), step)
        if not decision.admitted:
            logger.warning("Rate limit hit policy=%s retry_after=%.1fs", policy.name, decision.retry_after)
            logger.debug("Rate limited key=%s", key)
        return decision

    def check(self, key: str) -> None:
        """
        Admit a request for key or raise.

        Raises:
            RateLimited: If the current window is full
        """
        decision = self.try_admit(key)
        if not decision.admitted:
            raise RateLimited(decision.retry_after)


def client_address(request: Request) -> str:
    """Best-effort caller address for rate-limit keys."""
    return request.client.host if request.client else "unknown"


def too_many_requests(exc: RateLimited, detail: str) -> HTTPException:
    """Build the 429 response for a rejected request."""
    return HTTPException(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        detail={"message": detail, "retry_after": round(exc.retry_after, 1)},
        headers={"Retry-After": exc.retry_after_header},
    )


class RateLimitDependency:
    """
    FastAPI dependency that rate limits an endpoint per caller and path.

    Usage:
        @router.post("/thing", dependencies=[Depends(RateLimitDependency(api_limiter))])
    """

    def __init__(self, limiter: RateLimiter):
        self.limiter = limiter

    async def __call__(self, request: Request) -> None:
        try:
            self.limiter.check(f"{client_address(request)}:{request.url.path}")
        except RateLimited as e:
            raise too_many_requests(e, "Too many requests. Please wait before retrying.") from e


# Shared store for every limiter in the process
rate_store: KeyedExpiringStore[RateWindow] = KeyedExpiringStore()

login_link_limiter = RateLimiter(
    RatePolicy(
        name="login-link",
        window_seconds=config.settings.LOGIN_LINK_RATE_WINDOW_SECONDS,
        max_requests=config.settings.LOGIN_LINK_RATE_LIMIT,
    ),
    rate_store,
)
verify_limiter = RateLimiter(
    RatePolicy(
        name="verify",
        window_seconds=config.settings.VERIFY_RATE_WINDOW_SECONDS,
        max_requests=config.settings.VERIFY_RATE_LIMIT,
    ),
    rate_store,
)
api_limiter = RateLimiter(
    RatePolicy(
        name="api",
        window_seconds=config.settings.API_RATE_WINDOW_SECONDS,
        max_requests=config.settings.API_RATE_LIMIT,
    ),
    rate_store,
)
