"""Canal admission control with hysteresis.

The controller watches canal occupancy. Once the canal is full it switches
to the restricted state, where arriving ships wait in a bounded queue on
their own side (or are turned away when that queue is full). The canal only
opens again once occupancy falls strictly below half of its capacity, so
the two thresholds keep the state from flapping at the boundary.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Tuple

from ..core.resource import CountingResource
from ..core.wait_queue import WaitQueue
from ..utils.logger import setup_logger


class AdmissionDecision(Enum):
    """Outcome of an arrival at the canal."""
    ADMIT = "admit"
    QUEUE = "queue"
    REJECT = "reject"


@dataclass
class CanalState:
    """Admission policy flags.

    Attributes:
        priority_exit: Canal is restricted, new arrivals are not admitted directly
        empty_queues: One-shot signal to drain the side queues on the next exit
    """
    priority_exit: bool = False
    empty_queues: bool = False


class CanalController:
    """Combines canal occupancy with the side queues to decide admission."""

    def __init__(self, scheduler, config: Dict, sides):
        """Initialize controller.

        Args:
            scheduler: Scheduler owning the clock
            config: ``canal`` configuration section
            sides: Sides in drain precedence order (Atlantic first)
        """
        self.scheduler = scheduler
        self.logger = setup_logger(self.__class__.__name__)

        self.capacity = config.get('capacity', 40)
        self.queueing = config.get('queueing', True)
        self.queue_limit = config.get('queue_limit', 5)

        self.occupancy = CountingResource(scheduler, "Canal", self.capacity)
        self.queues: Dict = {
            side: WaitQueue(scheduler, f"{side.value.capitalize()} queue", self.queue_limit)
            for side in sides
        }

        self.state = CanalState()
        self.transitions: List[Tuple[float, bool, int]] = []
        self._restricted_since = None
        self.restricted_time = 0.0

    @property
    def restricted(self) -> bool:
        return self.state.priority_exit

    def decide(self, ship) -> AdmissionDecision:
        """Decide what happens to an arriving ship."""
        if not self.queueing or not self.state.priority_exit:
            return AdmissionDecision.ADMIT
        if self.queues[ship.origin].is_full:
            return AdmissionDecision.REJECT
        return AdmissionDecision.QUEUE

    def enqueue(self, ship) -> None:
        self.queues[ship.origin].append(ship)

    def ship_admitted(self, ship) -> None:
        """Called once a ship holds its occupancy unit."""
        ship.admitted = True
        self.update_state()

    def ship_departed(self, ship) -> None:
        """Release the unit of a ship leaving through the exit lock."""
        self._release(ship)

    def ship_aborted(self, ship) -> None:
        """Release the unit of an interrupted ship, if it was admitted."""
        if ship.admitted:
            self._release(ship)

    def _release(self, ship) -> None:
        """Leave occupancy; drain the side queues if this release reopened the canal."""
        self.occupancy.leave(ship)
        ship.admitted = False
        self.update_state()
        if self.state.empty_queues:
            self.state.empty_queues = False
            drained = []
            for queue in self.queues.values():
                drained.extend(queue.drain())
            if drained:
                self.logger.debug(
                    f"t={self.scheduler.now:.2f} released {len(drained)} queued ships"
                )

    def update_state(self) -> None:
        """Recompute the admission state from current occupancy."""
        used = self.occupancy.used
        now = self.scheduler.now

        if not self.state.priority_exit and used >= self.capacity:
            self.state.priority_exit = True
            self._restricted_since = now
            self.transitions.append((now, True, used))
            self.logger.debug(f"t={now:.2f} canal full ({used}/{self.capacity}), restricting")

        elif self.state.priority_exit and used < self.capacity / 2:
            self.state.priority_exit = False
            self.state.empty_queues = True
            self.restricted_time += now - self._restricted_since
            self._restricted_since = None
            self.transitions.append((now, False, used))
            self.logger.debug(f"t={now:.2f} canal below half ({used}/{self.capacity}), opening")

    def get_stats(self) -> Dict:
        restricted_time = self.restricted_time
        if self._restricted_since is not None:
            restricted_time += self.scheduler.now - self._restricted_since

        return {
            'capacity': self.capacity,
            'queueing': self.queueing,
            'restricted': self.state.priority_exit,
            'restricted_time': restricted_time,
            'transitions': len(self.transitions),
            'queues': {side.value: q.get_stats() for side, q in self.queues.items()},
        }
