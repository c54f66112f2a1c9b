"""
Scheduling Interfaces

Abstractions for cancellable delayed callbacks and the clock.
Concrete implementations are in the infrastructure layer (threads) and in
the test fixtures (manual clock).
"""

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Callable


def utc_now() -> datetime:
    """Default registry clock."""
    return datetime.now(timezone.utc)


class ScheduledCall(ABC):
    """Handle for a pending one-shot callback."""

    @abstractmethod
    def cancel(self) -> None:
        """
        Cancel the callback if it has not fired yet.

        Cancelling twice, or after the callback fired, is a no-op.
        """
        pass  # pragma: no cover

    @property
    @abstractmethod
    def cancelled(self) -> bool:
        pass  # pragma: no cover


class Scheduler(ABC):
    """
    Abstract interface for one-shot delayed callbacks.

    The ArtifactRegistry uses it to arm per-artifact expiry timers.
    """

    @abstractmethod
    def schedule(self, delay_seconds: float, callback: Callable[[], None]) -> ScheduledCall:
        """
        Run callback once after delay_seconds.

        Args:
            delay_seconds: Delay before the callback fires
            callback: Zero-argument callable

        Returns:
            ScheduledCall handle that can cancel the callback
        """
        pass  # pragma: no cover

    def shutdown(self) -> None:
        """Cancel everything still pending. Optional for implementations."""
