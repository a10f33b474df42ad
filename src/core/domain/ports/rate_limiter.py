"""Rate limiter port."""

from abc import ABC, abstractmethod


class RateLimiter(ABC):
    """Per-client request counter over a fixed time window."""

    backend_name: str = "unknown"

    @abstractmethod
    async def check(self, identifier: str) -> tuple[bool, int]:
        """Count one request for identifier.

        Returns:
            (allowed, current count in this window)
        """
        pass
