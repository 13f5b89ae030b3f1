"""Event queue implementation for discrete event simulation."""

import heapq
import itertools
from enum import Enum
from dataclasses import dataclass, field
from typing import Any, Optional


class EventType(Enum):
    """Types of events in the simulation."""
    # Process lifecycle
    ACTIVATE = "activate"
    REACTIVATE = "reactivate"

    # Suspension points
    TIMER = "timer"
    RESOURCE_GRANT = "resource_grant"


@dataclass(order=True)
class Event:
    """Event in the discrete event simulation.

    Attributes:
        time: Event timestamp
        sequence: Insertion counter used to break ties (first scheduled runs first)
        event_type: Type of event
        process: Process resumed by this event
        payload: Value sent into the process on resumption
    """
    time: float
    sequence: int = field(default=0)
    event_type: EventType = field(default=EventType.ACTIVATE, compare=False)
    process: Any = field(default=None, compare=False, repr=False)
    payload: Any = field(default=None, compare=False)
    cancelled: bool = field(default=False, compare=False, repr=False)

    def __post_init__(self):
        """Validate event after initialization."""
        if self.time < 0:
            raise ValueError("Event time cannot be negative")


class EventQueue:
    """Priority queue for managing simulation events.

    Events are ordered by time, with earlier events processed first.
    For events at the same time, the one pushed first is popped first.
    Cancelled events stay in the heap and are discarded when they surface.
    """

    def __init__(self):
        """Initialize empty event queue."""
        self._queue = []
        self._counter = itertools.count()
        self._live = 0

    def push(self, event: Event) -> Event:
        """Add event to the queue, stamping its insertion sequence.

        Args:
            event: Event to add

        Returns:
            The queued event
        """
        event.sequence = next(self._counter)
        heapq.heappush(self._queue, event)
        self._live += 1
        return event

    def pop(self) -> Event:
        """Remove and return the next event.

        Returns:
            Next event to process

        Raises:
            IndexError: If queue is empty
        """
        self._discard_cancelled()
        if self.is_empty():
            raise IndexError("Cannot pop from empty event queue")
        self._live -= 1
        return heapq.heappop(self._queue)

    def peek(self) -> Optional[Event]:
        """Return the next event without removing it.

        Returns:
            Next event, or None if queue is empty
        """
        self._discard_cancelled()
        return self._queue[0] if self._queue else None

    def cancel(self, process) -> int:
        """Cancel every pending event targeting a process.

        Args:
            process: Process whose events are dropped

        Returns:
            Number of events cancelled
        """
        cancelled = 0
        for event in self._queue:
            if event.process is process and not event.cancelled:
                event.cancelled = True
                cancelled += 1
        self._live -= cancelled
        return cancelled

    def is_empty(self) -> bool:
        """Check if queue is empty.

        Returns:
            True if queue is empty
        """
        return self._live == 0

    def size(self) -> int:
        """Get number of events in queue.

        Returns:
            Number of events
        """
        return self._live

    def clear(self) -> None:
        """Remove all events from queue."""
        self._queue.clear()
        self._live = 0

    def _discard_cancelled(self) -> None:
        while self._queue and self._queue[0].cancelled:
            heapq.heappop(self._queue)

    def __len__(self) -> int:
        """Get number of events in queue."""
        return self._live

    def __repr__(self) -> str:
        """String representation of event queue."""
        return f"EventQueue(size={self._live}, next={self.peek()})"
