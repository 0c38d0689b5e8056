"""One-way circuit breaker for provider quota exhaustion."""

import logging
from typing import Callable

logger = logging.getLogger(__name__)

QUOTA_BANNER = (
    "API Quota Exceeded. You have reached your API usage limit. "
    "Further generation requests will fail."
)


class QuotaGuard:
    """Trips once on the first quota failure and stays tripped for the session."""

    def __init__(self) -> None:
        self._exceeded = False
        self._listeners: list[Callable[[], None]] = []

    @property
    def exceeded(self) -> bool:
        return self._exceeded

    def on_trip(self, callback: Callable[[], None]) -> None:
        """Register ``callback`` to run once when the guard trips."""
        self._listeners.append(callback)

    def trip(self) -> bool:
        """Trip the guard.

        Returns:
            True if this call tripped it, False if it was already tripped.
        """
        if self._exceeded:
            return False
        self._exceeded = True
        logger.warning("Provider quota exceeded; blocking further generation requests")
        for callback in self._listeners:
            callback()
        return True
