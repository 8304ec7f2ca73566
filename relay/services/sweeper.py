"""
Background sweep of expired entries.

Keeps memory bounded by dropping expired login tokens and closed rate
windows. Reads already ignore expired entries, so a missed tick only
delays reclamation.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from typing import Any

from relay import config
from relay.services.expiring_store import KeyedExpiringStore

logger = logging.getLogger(__name__)


class Sweeper:
    """Periodically calls sweep_expired() on a set of named stores."""

    def __init__(
        self,
        stores: Mapping[str, KeyedExpiringStore[Any]],
        interval_seconds: float = config.settings.SWEEP_INTERVAL_SECONDS,
    ):
        self.stores = dict(stores)
        self.interval_seconds = interval_seconds

    def sweep_once(self) -> dict[str, int]:
        """
        Sweep every store once.

        Returns:
            Number of entries removed, per store name
        """
        removed = {name: store.sweep_expired() for name, store in self.stores.items()}
        total = sum(removed.values())
        if total > 0:
            logger.info("Swept %d expired entries %s", total, removed)
        else:
            logger.debug("Sweep found nothing to remove")
        return removed

    async def run(self) -> None:
        """
        Sweep forever, every interval_seconds.

        Errors in a tick are logged and the loop carries on. Cancel the
        task to stop it.
        """
        while True:
            try:
                self.sweep_once()
            except Exception:
                logger.exception("Error in sweep task")

            await asyncio.sleep(self.interval_seconds)
