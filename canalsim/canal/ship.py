"""Ships transiting the canal."""

from enum import Enum
from typing import Optional

from ..core.process import Process
from ..workload.arrival_process import draw
from .controller import AdmissionDecision


class Side(Enum):
    """Ocean side a ship arrives from."""
    ATLANTIC = "atlantic"
    PACIFIC = "pacific"

    @property
    def opposite(self) -> "Side":
        return Side.PACIFIC if self is Side.ATLANTIC else Side.ATLANTIC


class ShipClass(Enum):
    """Size classes, with the cargo measure each one is rated in."""
    PANAMAX = "panamax"  # tonnage
    NEOPANAMAX = "neopanamax"  # TEU

    @property
    def default_cargo(self) -> int:
        return 50000 if self is ShipClass.PANAMAX else 14000


class Ship(Process):
    """A single vessel passing through both lock complexes.

    The ship is admitted by the canal controller, takes one unit of canal
    occupancy for its whole stay, passes the lock on its own side, travels
    the main passage and leaves through the lock on the opposite side.

    Attributes:
        ship_class: Size class
        cargo: Cargo capacity (tonnes or TEU depending on class)
        origin: Side the ship arrives from
        arrival_time: Time the ship reached the canal
        interrupted: Set by an accident while the ship is in a lock
        admitted: Whether the ship holds a canal occupancy unit
    """

    def __init__(self, simulation, ship_class: ShipClass, origin: Side,
                 cargo: Optional[float] = None, name: Optional[str] = None):
        super().__init__(simulation.scheduler, name)
        self.simulation = simulation
        self.ship_class = ship_class
        self.origin = origin
        self.cargo = ship_class.default_cargo if cargo is None else cargo

        self.arrival_time: Optional[float] = None
        self.departure_time: Optional[float] = None
        self.interrupted = False
        self.admitted = False
        self.rejected = False
        self.current_lock = None

    @property
    def ship_id(self) -> int:
        return self.process_id

    @property
    def transit_time(self) -> Optional[float]:
        if self.departure_time is None:
            return None
        return self.departure_time - self.arrival_time

    def behavior(self):
        sim = self.simulation
        canal = sim.canal
        self.arrival_time = self.scheduler.now

        decision = canal.decide(self)
        if decision is AdmissionDecision.REJECT:
            # Ending the body here is how a rejected ship cancels itself.
            self.rejected = True
            self.cancelled = True
            sim.metrics.record_rejection(self)
            sim.logger.debug(f"t={self.scheduler.now:.2f} {self.name} rejected at {self.origin.value} side")
            return
        if decision is AdmissionDecision.QUEUE:
            canal.enqueue(self)
            yield self.passivate()

        yield canal.occupancy.enter(self)
        canal.ship_admitted(self)

        if not (yield from self._pass_lock(sim.locks[self.origin])):
            return

        yield self.wait(draw(sim.travel_time, sim.rng))

        if not (yield from self._pass_lock(sim.locks[self.origin.opposite])):
            return

        self.departure_time = self.scheduler.now
        canal.ship_departed(self)
        sim.metrics.record_ship(self, self.transit_time)

    def _pass_lock(self, complex_):
        """Pass one lock chamber of a lock complex.

        Returns:
            False if the ship was interrupted inside the chamber
        """
        lock = complex_.select_lock()
        yield lock.enter(self)
        self.current_lock = lock
        yield self.wait(self.simulation.time_in_lock)
        lock.leave(self)
        self.current_lock = None

        if self.interrupted:
            self._abort(lock)
            return False
        return True

    def _abort(self, lock) -> None:
        sim = self.simulation
        sim.canal.ship_aborted(self)
        sim.metrics.record_interruption(self)
        sim.logger.debug(
            f"t={self.scheduler.now:.2f} {self.name} interrupted in {lock.name}, transit aborted"
        )

    def __repr__(self) -> str:
        return (f"Ship(id={self.process_id}, class={self.ship_class.value}, "
                f"origin={self.origin.value}, state={self.state.value})")
