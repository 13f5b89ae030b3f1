"""Explicit queue of passivated processes."""

from collections import deque
from typing import Deque, List

from ..utils.logger import setup_logger


class WaitQueue:
    """Bounded FIFO of passivated processes.

    Unlike a resource wait list, nothing here is released automatically:
    waiters only leave through ``drain()``, ``remove()`` or cancellation.
    """

    def __init__(self, scheduler, name: str, max_length: int):
        """Initialize wait queue.

        Args:
            scheduler: Scheduler owning the clock
            name: Display name
            max_length: Maximum number of queued processes
        """
        if max_length < 0:
            raise ValueError(f"{name}: max_length cannot be negative")

        self.scheduler = scheduler
        self.name = name
        self.max_length = max_length
        self.logger = setup_logger(self.__class__.__name__)

        self._queue: Deque = deque()
        self.total_enqueued = 0
        self.total_drained = 0
        self.max_observed_length = 0

    @property
    def is_full(self) -> bool:
        return len(self._queue) >= self.max_length

    def append(self, process) -> None:
        """Queue a process. The caller passivates it right after.

        Raises:
            OverflowError: If the queue is at its bound
        """
        if self.is_full:
            raise OverflowError(f"{self.name} is full ({self.max_length})")
        self._queue.append(process)
        process._parked_in = self
        self.total_enqueued += 1
        self.max_observed_length = max(self.max_observed_length, len(self._queue))

    def remove(self, process) -> None:
        self._queue.remove(process)

    def drain(self) -> List:
        """Reactivate every queued process in FIFO order at the current time.

        Returns:
            The reactivated processes
        """
        drained = []
        while self._queue:
            process = self._queue.popleft()
            process._parked_in = None
            process.activate()
            drained.append(process)

        self.total_drained += len(drained)
        if drained:
            self.logger.debug(
                f"t={self.scheduler.now:.2f} {self.name} drained {len(drained)} waiters"
            )
        return drained

    def get_stats(self) -> dict:
        return {
            'name': self.name,
            'max_length': self.max_length,
            'length': len(self._queue),
            'max_observed_length': self.max_observed_length,
            'total_enqueued': self.total_enqueued,
            'total_drained': self.total_drained,
        }

    def __len__(self) -> int:
        return len(self._queue)

    def __iter__(self):
        return iter(list(self._queue))

    def __repr__(self) -> str:
        return f"WaitQueue(name={self.name!r}, length={len(self._queue)}/{self.max_length})"
