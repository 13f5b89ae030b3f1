"""Self-rescheduling ship sources."""

from typing import Dict, Optional

from ..canal.ship import ShipClass, Side
from ..core.process import Process
from .arrival_process import ArrivalProcess


class ShipGenerator(Process):
    """Creates ships of one class at drawn intervals.

    Each ship arrives at the Atlantic or Pacific side with equal
    probability and is activated immediately. The first ship arrives when
    the generator is activated.
    """

    def __init__(self, simulation, config: Dict):
        """Initialize generator.

        Args:
            simulation: Owning simulation context
            config: Generator config with ``ship_class``, ``arrival`` and
                optional ``cargo`` and ``max_ships``
        """
        self.ship_class = ShipClass(config.get('ship_class', 'panamax'))
        super().__init__(simulation.scheduler, f"{self.ship_class.value.capitalize()}Generator")
        self.simulation = simulation
        self.arrival = ArrivalProcess(config['arrival'], simulation.rng)
        self.cargo: Optional[float] = config.get('cargo')
        self.max_ships: Optional[int] = config.get('max_ships')
        self.generated = 0

    def behavior(self):
        sim = self.simulation
        end_time = self.scheduler.end_time
        while True:
            origin = Side.ATLANTIC if sim.rng.bernoulli(0.5) else Side.PACIFIC
            sim.spawn_ship(self.ship_class, origin, cargo=self.cargo)
            self.generated += 1

            if self.max_ships is not None and self.generated >= self.max_ships:
                return

            delay = self.arrival.next_interval()
            if end_time is not None and self.scheduler.now + delay > end_time:
                return
            yield self.wait(delay)
