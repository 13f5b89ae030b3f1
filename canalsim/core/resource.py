"""Capacity-limited resources with FIFO wait lists.

``CountingResource`` models an N-unit pool; ``ExclusiveResource`` is the
same pool with a single unit and a holder. Both admit waiters strictly in
arrival order: a later request never overtakes an earlier one, even when
it would fit.
"""

from collections import defaultdict, deque
from typing import Deque, Dict, List, Optional

from .exceptions import ConfigurationError, InvariantViolation
from .process import Request
from ..utils.logger import setup_logger


class _Waiter:
    __slots__ = ("process", "units", "since")

    def __init__(self, process, units: int, since: float):
        self.process = process
        self.units = units
        self.since = since


class CountingResource:
    """Pool of identical capacity units.

    Tracks time-weighted occupancy and queue length so that utilization
    reports can be produced at the end of a run.
    """

    def __init__(self, scheduler, name: str, capacity: int):
        """Initialize resource.

        Args:
            scheduler: Scheduler owning the clock
            name: Display name used in logs and reports
            capacity: Number of units, must be a positive integer

        Raises:
            ConfigurationError: If capacity is not a positive integer
        """
        if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity <= 0:
            raise ConfigurationError(f"{name}: capacity must be a positive integer, got {capacity!r}")

        self.scheduler = scheduler
        self.name = name
        self.capacity = capacity
        self.logger = setup_logger(self.__class__.__name__)

        self.used = 0
        self._holders: Dict[object, int] = {}
        self._waiters: Deque[_Waiter] = deque()

        # Statistics
        self._created_at = scheduler.now
        self._last_change = scheduler.now
        self._used_area = 0.0
        self._queue_area = 0.0
        self._queue_time = defaultdict(float)
        self.total_requests = 0
        self.total_queued = 0
        self.total_wait_time = 0.0
        self.admitted_from_queue = 0
        self.max_queue_length = 0

    # Queries

    @property
    def free(self) -> int:
        return self.capacity - self.used

    @property
    def queue_length(self) -> int:
        return len(self._waiters)

    @property
    def is_full(self) -> bool:
        return self.used >= self.capacity

    @property
    def waiters(self) -> List:
        """Blocked processes in admission order."""
        return [w.process for w in self._waiters]

    @property
    def holders(self) -> List:
        return list(self._holders)

    def holds(self, process) -> int:
        """Number of units a process currently holds."""
        return self._holders.get(process, 0)

    # Operations

    def enter(self, process, units: int = 1) -> Request:
        """Request units for a process.

        Yield the returned request from the process body. It is granted at
        once when the units fit and nobody is waiting; otherwise the process
        joins the end of the wait list.

        Args:
            process: Requesting process
            units: Number of units requested

        Returns:
            Request command for the process to yield
        """
        if units <= 0:
            raise ValueError(f"{self.name}: units must be positive, got {units}")
        if units > self.capacity:
            raise ValueError(
                f"{self.name}: request for {units} units exceeds capacity {self.capacity}"
            )
        if any(w.process is process for w in self._waiters):
            raise RuntimeError(f"{process.name} is already waiting on {self.name}")

        self.total_requests += 1
        if not self._waiters and self.used + units <= self.capacity:
            self._admit(process, units)
            return Request(self, units, granted=True)

        self._update_stats()
        self._waiters.append(_Waiter(process, units, self.scheduler.now))
        self.total_queued += 1
        self.max_queue_length = max(self.max_queue_length, len(self._waiters))
        self.logger.debug(
            f"t={self.scheduler.now:.2f} {process.name} waits on {self.name} "
            f"(queue={len(self._waiters)})"
        )
        return Request(self, units, granted=False)

    def leave(self, process, units: int = 1) -> None:
        """Return units and admit waiters from the head of the wait list.

        Waiters are admitted in order while their request fits; the scan
        stops at the first waiter that does not.

        Raises:
            InvariantViolation: If the process does not hold that many units
        """
        held = self._holders.get(process, 0)
        if units <= 0 or held < units:
            raise InvariantViolation(
                f"{self.name}: {process.name} releases {units} units but holds {held}"
            )

        self._update_stats()
        if held == units:
            del self._holders[process]
        else:
            self._holders[process] = held - units
        self.used -= units
        self._check_invariants()
        self._admit_waiters()

    def remove_waiter(self, process) -> bool:
        """Drop a blocked process from the wait list.

        Nothing is granted here, not even to smaller requests that were
        queued behind the removed one; they are admitted on the next ``leave``.

        Returns:
            True if the process was waiting
        """
        for waiter in self._waiters:
            if waiter.process is process:
                self._update_stats()
                self._waiters.remove(waiter)
                return True
        return False

    def _admit_waiters(self) -> None:
        while self._waiters and self.used + self._waiters[0].units <= self.capacity:
            waiter = self._waiters.popleft()
            self.total_wait_time += self.scheduler.now - waiter.since
            self.admitted_from_queue += 1
            self._admit(waiter.process, waiter.units)
            waiter.process.grant(self)

    def _admit(self, process, units: int) -> None:
        self._update_stats()
        self._holders[process] = self._holders.get(process, 0) + units
        self.used += units
        self._check_invariants()

    def _check_invariants(self) -> None:
        if not 0 <= self.used <= self.capacity:
            raise InvariantViolation(
                f"{self.name}: occupancy {self.used} outside [0, {self.capacity}]"
            )
        if sum(self._holders.values()) != self.used:
            raise InvariantViolation(f"{self.name}: holder units do not match occupancy")

    # Statistics

    def _update_stats(self) -> None:
        now = self.scheduler.now
        elapsed = now - self._last_change
        if elapsed > 0:
            self._used_area += self.used * elapsed
            self._queue_area += len(self._waiters) * elapsed
            self._queue_time[len(self._waiters)] += elapsed
            self._last_change = now

    def get_stats(self) -> Dict:
        """Utilization statistics up to the current time.

        Returns:
            Dictionary with occupancy, utilization and queue metrics
        """
        self._update_stats()
        interval = self.scheduler.now - self._created_at
        mean_used = self._used_area / interval if interval > 0 else 0.0

        return {
            'name': self.name,
            'capacity': self.capacity,
            'interval': interval,
            'requests': self.total_requests,
            'used': self.used,
            'mean_occupancy': mean_used,
            'utilization': mean_used / self.capacity,
            'busy_time': self._used_area,
            'queue_length': len(self._waiters),
            'max_queue_length': self.max_queue_length,
            'mean_queue_length': self._queue_area / interval if interval > 0 else 0.0,
            'queued_requests': self.total_queued,
            'mean_wait_time': (self.total_wait_time / self.admitted_from_queue
                               if self.admitted_from_queue > 0 else 0.0),
            'queue_length_distribution': {
                length: time / interval
                for length, time in sorted(self._queue_time.items())
            } if interval > 0 else {},
        }

    def __repr__(self) -> str:
        return (f"{type(self).__name__}(name={self.name!r}, used={self.used}/{self.capacity}, "
                f"queue={len(self._waiters)})")


class ExclusiveResource(CountingResource):
    """Single-unit resource held by at most one process at a time."""

    def __init__(self, scheduler, name: str):
        super().__init__(scheduler, name, capacity=1)

    @property
    def busy(self) -> bool:
        return self.used > 0

    @property
    def holder(self) -> Optional[object]:
        """Current holder, or None when free."""
        return next(iter(self._holders), None)

    def seize(self, process) -> Request:
        """Acquire the resource; see ``CountingResource.enter``."""
        if self.holder is process:
            raise RuntimeError(f"{process.name} already holds {self.name}")
        return self.enter(process, 1)

    def release(self, process) -> None:
        """Release the resource and hand it to the next waiter.

        Raises:
            InvariantViolation: If the process is not the holder
        """
        if self.holder is not process:
            raise InvariantViolation(
                f"{self.name}: {process.name} released but holder is {self.holder}"
            )
        self.leave(process, 1)

    def _check_invariants(self) -> None:
        super()._check_invariants()
        if len(self._holders) > 1:
            raise InvariantViolation(f"{self.name}: {len(self._holders)} holders")
