"""Time-ordered scheduler driving process resumptions."""

import itertools
from typing import Dict, List, Optional, Tuple

from .event_queue import Event, EventType, EventQueue
from .exceptions import InvariantViolation
from ..utils.logger import setup_logger


class Scheduler:
    """Owns the simulation clock and the queue of pending resumptions.

    The scheduler is the only component that advances time. Processes
    register themselves on creation so that the run can report which of
    them were still parked when it stopped.
    """

    def __init__(self, end_time: Optional[float] = None, trace: bool = False):
        """Initialize scheduler.

        Args:
            end_time: Simulation horizon; events due after it never run
            trace: Record (time, event type, process name) for every event
        """
        if end_time is not None and end_time < 0:
            raise ValueError("Simulation horizon cannot be negative")

        self.logger = setup_logger(self.__class__.__name__)
        self.now = 0.0
        self.end_time = end_time
        self.event_queue = EventQueue()
        self.active_process = None
        self.events_processed = 0
        self.trace: Optional[List[Tuple[float, str, str]]] = [] if trace else None

        self._process_ids = itertools.count(1)
        self._processes: Dict[int, object] = {}

    # Process registry

    def register(self, process) -> int:
        process_id = next(self._process_ids)
        self._processes[process_id] = process
        return process_id

    def unregister(self, process) -> None:
        self._processes.pop(process.process_id, None)

    def live_processes(self) -> List:
        """Processes created and not yet terminated, in creation order."""
        return list(self._processes.values())

    def parked_processes(self) -> List:
        """Live processes blocked on a resource or passivated.

        These have no pending event and can only continue through another
        process releasing capacity or reactivating them.
        """
        return [p for p in self._processes.values() if p.is_parked]

    # Scheduling

    def schedule_at(self, process, time: float,
                    event_type: EventType = EventType.ACTIVATE,
                    payload=None) -> Event:
        """Schedule a process resumption at an absolute time.

        Args:
            process: Process to resume
            time: Absolute simulation time
            event_type: Kind of resumption
            payload: Value sent into the process

        Returns:
            The queued event

        Raises:
            ValueError: If time lies in the past
        """
        if time < self.now:
            raise ValueError(
                f"Cannot schedule {process} at {time:.3f}, clock is at {self.now:.3f}"
            )
        return self.event_queue.push(Event(
            time=time,
            event_type=event_type,
            process=process,
            payload=payload,
        ))

    def schedule_after(self, process, delay: float,
                       event_type: EventType = EventType.TIMER,
                       payload=None) -> Event:
        """Schedule a process resumption relative to the current time."""
        if delay < 0:
            raise ValueError(f"Delay cannot be negative: {delay}")
        return self.schedule_at(process, self.now + delay, event_type, payload)

    def cancel(self, process) -> int:
        """Remove every not-yet-run event for a process."""
        return self.event_queue.cancel(process)

    # Execution

    def next(self) -> Optional[Event]:
        """Pop the earliest event, advance the clock and resume its process.

        Returns:
            The executed event, or None when the queue is empty or the next
            event lies beyond the horizon
        """
        event = self.event_queue.peek()
        if event is None:
            return None

        if self.end_time is not None and event.time > self.end_time:
            self.now = max(self.now, self.end_time)
            return None

        event = self.event_queue.pop()
        if event.time < self.now:
            raise InvariantViolation(
                f"Clock would move backwards from {self.now} to {event.time}"
            )

        self.now = event.time
        self.events_processed += 1
        if self.trace is not None:
            self.trace.append((event.time, event.event_type.value, event.process.name))

        event.process.resume(event.payload)
        return event

    def run(self, until: Optional[float] = None) -> int:
        """Run events until the queue drains or the horizon is exceeded.

        Args:
            until: Optional horizon overriding the one given at construction

        Returns:
            Number of events processed during this call
        """
        if until is not None:
            self.end_time = until

        processed = 0
        while self.next() is not None:
            processed += 1

        if self.end_time is not None and self.now < self.end_time:
            self.now = self.end_time

        self.logger.debug(
            f"Run stopped at t={self.now:.2f} after {processed} events, "
            f"{len(self.event_queue)} pending, {len(self.parked_processes())} parked"
        )
        return processed

    def __repr__(self) -> str:
        return (f"Scheduler(now={self.now}, pending={len(self.event_queue)}, "
                f"live={len(self._processes)})")
