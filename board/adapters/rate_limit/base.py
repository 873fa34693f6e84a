"""Rate limiter interfaces.

The service layer depends on this abstraction (not the concrete
implementation) so the storage backend can be swapped later with minimal
changes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class AbstractRateLimiter(ABC):
    """Interface for admission-control rate limiters."""

    @property
    @abstractmethod
    def limit(self) -> int:
        """Maximum admitted events per window."""
        raise NotImplementedError

    @property
    @abstractmethod
    def window_seconds(self) -> float:
        """Window length in seconds."""
        raise NotImplementedError

    @abstractmethod
    def allow(self, key: str) -> bool:
        """Decide whether one more event for ``key`` may proceed.

        Admitted events are recorded against the key's quota; rejected ones
        are not.

        Args:
            key: Opaque caller identity. Any string is accepted.

        Returns:
            True if the event was admitted, False if the key is over its limit.
        """
        raise NotImplementedError

    @abstractmethod
    def sweep(self) -> int:
        """Forget keys with no events left inside the window.

        Returns:
            Number of keys removed.
        """
        raise NotImplementedError
