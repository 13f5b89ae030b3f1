"""Accidents that close a lock chamber for repair."""

from dataclasses import dataclass
from typing import Dict, List, Optional

from ..core.process import Process
from ..workload.arrival_process import ArrivalProcess, draw
from .ship import Ship


@dataclass
class AccidentEvent:
    """Record of one accident.

    Attributes:
        target: Name of the closed chamber
        time: When the accident happened
        duration: Repair duration
        interrupted_ship: Name of the ship caught in the chamber, if any
        repair_start: When the repair crew got hold of the chamber
        repaired_at: When the chamber reopened
    """
    target: str
    time: float
    duration: float
    interrupted_ship: Optional[str] = None
    repair_start: Optional[float] = None
    repaired_at: Optional[float] = None


class Repair(Process):
    """Closes a chamber for the repair duration.

    The ship holding the chamber when the accident happens is flagged as
    interrupted and aborts once its lockage ends. The repair then queues for
    the chamber like any ship and holds it until the repair is done.
    """

    def __init__(self, simulation, target, duration: float):
        super().__init__(simulation.scheduler, f"Repair-{target.name}")
        self.simulation = simulation
        self.target = target
        self.duration = duration
        self.accident: Optional[AccidentEvent] = None

    def behavior(self):
        now = self.scheduler.now
        victim = self.target.holder
        self.accident = AccidentEvent(target=self.target.name, time=now, duration=self.duration)

        if isinstance(victim, Ship):
            victim.interrupted = True
            self.accident.interrupted_ship = victim.name

        self.simulation.accidents.append(self.accident)
        self.simulation.logger.info(
            f"t={now:.2f} accident in {self.target.name}"
            + (f", {victim.name} interrupted" if self.accident.interrupted_ship else "")
        )

        yield self.target.seize(self)
        self.accident.repair_start = self.scheduler.now
        yield self.wait(self.duration)
        self.target.release(self)
        self.accident.repaired_at = self.scheduler.now


class AccidentGenerator(Process):
    """Starts repairs at random intervals for the configured chambers."""

    def __init__(self, simulation, config: Dict, chambers: List):
        """Initialize accident generator.

        Args:
            simulation: Owning simulation context
            config: ``accidents`` configuration section
            chambers: Exclusive chambers accidents may hit
        """
        super().__init__(simulation.scheduler, "AccidentGenerator")
        self.simulation = simulation
        self.config = config
        self.interval = ArrivalProcess(config['interval'], simulation.rng)
        self.duration = config['duration']

        target = config.get('target')
        self.chambers = [c for c in chambers if target is None or c.name == target]
        self.max_accidents = config.get('max_accidents')
        self.started = 0

    def behavior(self):
        end_time = self.scheduler.end_time
        while self.max_accidents is None or self.started < self.max_accidents:
            delay = self.interval.next_interval()
            if end_time is not None and self.scheduler.now + delay > end_time:
                return
            yield self.wait(delay)

            chamber = self.simulation.rng.choice(self.chambers)
            Repair(self.simulation, chamber, draw(self.duration, self.simulation.rng)).activate()
            self.started += 1
