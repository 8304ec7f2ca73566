"""
Single-use login tokens.

Tokens map to a LoginIntent for a fixed lifetime and can be redeemed
exactly once. Redemption removes the entry in the same atomic step as the
read, so concurrent redeemers of one token see at most one success.
"""

from __future__ import annotations

import logging
import secrets
from datetime import UTC, datetime

from relay import config
from relay.errors import TokenInvalidOrExpired
from relay.models.auth import LoginIntent
from relay.services.expiring_store import KeyedExpiringStore

logger = logging.getLogger(__name__)


def redact_identity(identity: str) -> str:
    """Log-safe form of an identity: the email domain only."""
    _, at, domain = identity.rpartition("@")
    return f"***@{domain}" if at else "***"


class TokenStore:
    """Issues and redeems login tokens."""

    def __init__(
        self,
        store: KeyedExpiringStore[LoginIntent] | None = None,
        ttl_seconds: float = config.settings.LOGIN_TOKEN_TTL_SECONDS,
    ):
        self.store: KeyedExpiringStore[LoginIntent] = store if store is not None else KeyedExpiringStore()
        self.ttl_seconds = ttl_seconds

    def issue(self, identity: str, display_name: str | None = None, context: str | None = None) -> str:
        """
        Create a login token for identity.

        Args:
            identity: Email or other principal identifier (non-empty)
            display_name: Optional name shown back on redemption
            context: Optional scope for the login (e.g. a tenant id)

        Returns:
            Opaque token string, 64 hex characters

        Raises:
            ValueError: If identity is empty
        """
        if not identity:
            raise ValueError("identity must not be empty")

        token = secrets.token_hex(32)  # 256 bits
        intent = LoginIntent(
            identity=identity,
            display_name=display_name,
            context=context,
            issued_at=datetime.now(UTC),
        )
        self.store.put(token, intent, self.ttl_seconds)
        logger.info("Issued login token for %s (ttl=%ss)", redact_identity(identity), self.ttl_seconds)
        return token

    def redeem(self, token: str) -> LoginIntent:
        """
        Consume a login token.

        Args:
            token: Token returned by issue()

        Returns:
            The LoginIntent the token was issued for

        Raises:
            TokenInvalidOrExpired: If the token is unknown, used, or expired
        """
        intent = self.store.take_if_present(token)
        if intent is None:
            logger.info("Rejected login token redemption")
            raise TokenInvalidOrExpired()

        logger.info("Redeemed login token for %s", redact_identity(intent.identity))
        return intent

    def sweep_expired(self) -> int:
        """Drop expired tokens. Returns the number removed."""
        return self.store.sweep_expired()


# Global token store instance
token_store = TokenStore()
