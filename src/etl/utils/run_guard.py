"""Cancellation and deadline checks for long-running syncs."""

import threading
import time
from collections.abc import Callable

from src.etl.errors import SyncCancelledError


class RunGuard:
    """Cooperative cancellation token with an optional deadline.

    Extraction calls :meth:`check` before each page fetch. Persisting
    never calls it, so a started write always runs to completion.
    """

    def __init__(
        self,
        cancel_event: threading.Event | None = None,
        max_duration: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize guard.

        Args:
            cancel_event: Event set by whoever wants the run aborted.
            max_duration: Seconds allowed from the last start(), None for no limit.
            clock: Monotonic clock (injectable for tests).
        """
        self._event = cancel_event or threading.Event()
        self._clock = clock
        self._max_duration = max_duration
        self._deadline: float | None = None
        self.start()

    @property
    def cancelled(self) -> bool:
        """Whether cancellation was requested."""
        return self._event.is_set()

    def start(self) -> None:
        """Restart the deadline window from now."""
        if self._max_duration is not None:
            self._deadline = self._clock() + self._max_duration

    def cancel(self) -> None:
        """Request cancellation."""
        self._event.set()

    def check(self, where: str) -> None:
        """Raise if the run was cancelled or ran past its deadline.

        Args:
            where: Description of the step about to start (for the error).

        Raises:
            SyncCancelledError: When cancelled or past the deadline.
        """
        if self._event.is_set():
            raise SyncCancelledError(f"Sync cancelled before {where}")
        if self._deadline is not None and self._clock() > self._deadline:
            raise SyncCancelledError(f"Sync deadline exceeded before {where}")
