"""Suspendable simulation processes.

A process body is a generator returned by ``behavior()``. The generator
object is the process continuation: the scheduler resumes it with
``send()`` and the body hands control back by yielding one of the
suspension commands below.

    def behavior(self):
        yield self.wait(10)
        yield self.canal.enter(self)
        ...
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Generator, Optional

from .event_queue import EventType


class ProcessState(Enum):
    """States of a simulation process."""
    CREATED = "created"
    SCHEDULED = "scheduled"
    RUNNING = "running"
    WAITING_ON_TIMER = "waiting_on_timer"
    WAITING_ON_RESOURCE = "waiting_on_resource"
    PASSIVATED = "passivated"
    TERMINATED = "terminated"


@dataclass
class Hold:
    """Suspend for a fixed simulated duration."""
    duration: float


@dataclass
class Request:
    """Capacity request on a resource.

    ``granted`` is decided by the resource when the request is made; an
    ungranted request parks the process on the resource's wait list.
    """
    resource: Any
    units: int
    granted: bool


class Passivate:
    """Suspend until another process calls ``activate()``."""

    def __repr__(self) -> str:
        return "Passivate()"


Command = Any
Behavior = Generator[Command, Any, None]


class Process:
    """Base class for simulation entities.

    Subclasses implement ``behavior()``. A process is created in the
    CREATED state and joins the timeline on ``activate()``.
    """

    def __init__(self, scheduler, name: Optional[str] = None):
        """Initialize process.

        Args:
            scheduler: Scheduler owning the simulation clock
            name: Optional display name
        """
        self.scheduler = scheduler
        self.process_id = scheduler.register(self)
        self.name = name or f"{type(self).__name__}-{self.process_id}"
        self.state = ProcessState.CREATED
        self.created_at = scheduler.now
        self.terminated_at: Optional[float] = None
        self.cancelled = False

        self._continuation: Optional[Behavior] = None
        self._waiting_on = None
        self._parked_in = None

    def behavior(self) -> Behavior:
        raise NotImplementedError

    # Suspension commands

    def wait(self, duration: float) -> Hold:
        if duration < 0:
            raise ValueError(f"{self.name}: wait duration cannot be negative ({duration})")
        return Hold(duration)

    def passivate(self) -> Passivate:
        return Passivate()

    # Lifecycle

    @property
    def is_terminated(self) -> bool:
        return self.state == ProcessState.TERMINATED

    @property
    def is_parked(self) -> bool:
        return self.state in (ProcessState.WAITING_ON_RESOURCE, ProcessState.PASSIVATED)

    def activate(self, at: Optional[float] = None) -> None:
        """Schedule the process to run.

        Starts a CREATED process or wakes a PASSIVATED one.

        Args:
            at: Absolute time to run at, defaults to now

        Raises:
            RuntimeError: If the process is in any other state
        """
        if self.state == ProcessState.CREATED:
            self._continuation = self.behavior()
            event_type = EventType.ACTIVATE
        elif self.state == ProcessState.PASSIVATED:
            event_type = EventType.REACTIVATE
            if self._parked_in is not None:
                self._parked_in.remove(self)
                self._parked_in = None
        else:
            raise RuntimeError(f"Cannot activate {self.name} in state {self.state.value}")

        when = self.scheduler.now if at is None else at
        self.scheduler.schedule_at(self, when, event_type)
        self.state = ProcessState.SCHEDULED

    def resume(self, payload=None) -> None:
        """Run the body up to its next suspension point.

        Called by the scheduler only. Immediately granted resource requests
        do not suspend; the body continues in the same step.
        """
        if self.state not in (ProcessState.SCHEDULED, ProcessState.WAITING_ON_TIMER):
            raise RuntimeError(f"Cannot resume {self.name} in state {self.state.value}")

        self.state = ProcessState.RUNNING
        self.scheduler.active_process = self
        try:
            value = payload
            while True:
                try:
                    command = self._continuation.send(value)
                except StopIteration:
                    self._terminate()
                    return

                if isinstance(command, Hold):
                    self.state = ProcessState.WAITING_ON_TIMER
                    self.scheduler.schedule_after(self, command.duration, EventType.TIMER)
                    return
                if isinstance(command, Request):
                    if command.granted:
                        value = True
                        continue
                    self.state = ProcessState.WAITING_ON_RESOURCE
                    self._waiting_on = command.resource
                    return
                if isinstance(command, Passivate):
                    self.state = ProcessState.PASSIVATED
                    return
                raise RuntimeError(f"{self.name} yielded unsupported command {command!r}")
        finally:
            self.scheduler.active_process = None

    def grant(self, resource) -> None:
        """Hand over capacity from a resource and wake the process now."""
        if self.state != ProcessState.WAITING_ON_RESOURCE or self._waiting_on is not resource:
            raise RuntimeError(f"{self.name} is not waiting on {resource.name}")
        self._waiting_on = None
        self.scheduler.schedule_at(self, self.scheduler.now, EventType.RESOURCE_GRANT, True)
        self.state = ProcessState.SCHEDULED

    def cancel(self) -> None:
        """Terminate a suspended process without running the rest of its body.

        The process leaves any wait list or queue it sits in. Capacity it
        already holds is not released here.
        """
        if self.state == ProcessState.TERMINATED:
            return
        if self.state == ProcessState.RUNNING:
            raise RuntimeError(f"{self.name} is running; return from behavior() instead")

        if self._waiting_on is not None:
            self._waiting_on.remove_waiter(self)
            self._waiting_on = None
        if self._parked_in is not None:
            self._parked_in.remove(self)
            self._parked_in = None
        self.scheduler.cancel(self)
        if self._continuation is not None:
            self._continuation.close()

        self.cancelled = True
        self._terminate()

    def on_terminate(self) -> None:
        """Hook called once the process has terminated."""

    def _terminate(self) -> None:
        self.state = ProcessState.TERMINATED
        self.terminated_at = self.scheduler.now
        self.scheduler.unregister(self)
        self.on_terminate()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, state={self.state.value})"
