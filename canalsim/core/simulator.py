"""Main simulator class wiring the canal model to the simulation kernel."""

import time
from dataclasses import asdict
from typing import Dict, List, Optional

from .exceptions import ConfigurationError
from .metrics_collector import MetricsCollector
from .scheduler import Scheduler
from ..canal.accidents import AccidentEvent, AccidentGenerator
from ..canal.controller import CanalController
from ..canal.locks import LockComplex
from ..canal.ship import Ship, ShipClass, Side
from ..utils.logger import setup_logger
from ..utils.random_source import RandomSource
from ..workload.arrival_process import validate_distribution
from ..workload.ship_generator import ShipGenerator

MINUTES_PER_DAY = 24 * 60


class CanalSimulator:
    """Discrete event simulation of ship traffic through the canal.

    The simulator is the context every process of a run shares: clock,
    random source, statistics, canal controller and lock complexes all live
    here, so independent runs never see each other's state.
    """

    def __init__(self, config: Dict):
        """Initialize simulator.

        Args:
            config: Simulation configuration dictionary

        Raises:
            ConfigurationError: If the scenario parameters are invalid
        """
        self.config = config
        self.logger = setup_logger(self.__class__.__name__)
        self._validate(config)

        sim_cfg = config['simulation']
        self.days = sim_cfg.get('days', 365)
        self.simulation_duration = self.days * MINUTES_PER_DAY

        # Simulation state
        self.scheduler = Scheduler(end_time=self.simulation_duration,
                                   trace=sim_cfg.get('trace', False))
        self.rng = RandomSource(sim_cfg.get('random_seed', 42))
        self.metrics = MetricsCollector(config)
        self.accidents: List[AccidentEvent] = []

        # Canal model
        locks_cfg = config.get('locks', {})
        self.time_in_lock = locks_cfg.get('time_in_lock', 90)
        self.travel_time = config.get('travel', {}).get('time', 11 * 60)

        sides = (Side.ATLANTIC, Side.PACIFIC)
        self.canal = CanalController(self.scheduler, config.get('canal', {}), sides)
        self.locks = {
            side: LockComplex(
                self.scheduler, side,
                dual=locks_cfg.get('dual', False),
                capacity=locks_cfg.get('capacity', 2),
            )
            for side in sides
        }

        # Sources
        self.generators = [ShipGenerator(self, g) for g in config.get('generators', [])]

        self.accident_generator = None
        accidents_cfg = config.get('accidents', {})
        if accidents_cfg.get('enabled', False):
            chambers = [c for side in sides for c in self.locks[side].chambers]
            self.accident_generator = AccidentGenerator(self, accidents_cfg, chambers)
            if not self.accident_generator.chambers:
                raise ConfigurationError(
                    f"Accident target {accidents_cfg.get('target')!r} is not a lock chamber"
                )

        self.logger.info("Simulator initialized")
        self.logger.info(f"Simulation duration: {self.days} days ({self.simulation_duration} min)")
        self.logger.info(
            f"Canal capacity: {self.canal.capacity}, queueing: {self.canal.queueing}, "
            f"dual locks: {locks_cfg.get('dual', False)}"
        )

    @staticmethod
    def _validate(config: Dict) -> None:
        """Reject invalid scenarios before any simulation time advances."""
        if 'simulation' not in config:
            raise ConfigurationError("Missing 'simulation' section")

        days = config['simulation'].get('days', 365)
        if days <= 0:
            raise ConfigurationError(f"simulation.days must be positive, got {days}")

        canal_cfg = config.get('canal', {})
        if canal_cfg.get('queue_limit', 5) < 0:
            raise ConfigurationError("canal.queue_limit cannot be negative")

        locks_cfg = config.get('locks', {})
        time_in_lock = locks_cfg.get('time_in_lock', 90)
        if isinstance(time_in_lock, bool) or not isinstance(time_in_lock, (int, float)) \
                or time_in_lock < 0:
            raise ConfigurationError(f"locks.time_in_lock must be a non-negative number, "
                                     f"got {time_in_lock!r}")
        validate_distribution(config.get('travel', {}).get('time', 11 * 60), "travel.time")

        for i, generator in enumerate(config.get('generators', [])):
            try:
                ShipClass(generator.get('ship_class', 'panamax'))
            except ValueError:
                raise ConfigurationError(
                    f"generators[{i}]: unknown ship class {generator.get('ship_class')!r}"
                ) from None
            if 'arrival' not in generator:
                raise ConfigurationError(f"generators[{i}]: missing 'arrival'")
            validate_distribution(generator['arrival'], f"generators[{i}].arrival")

        accidents_cfg = config.get('accidents', {})
        if accidents_cfg.get('enabled', False):
            if not locks_cfg.get('dual', False):
                raise ConfigurationError("Accidents need exclusive lock chambers (locks.dual)")
            for key in ('interval', 'duration'):
                if key not in accidents_cfg:
                    raise ConfigurationError(f"accidents.{key} is required")
                validate_distribution(accidents_cfg[key], f"accidents.{key}")

    def run(self) -> Dict:
        """Run the simulation.

        Returns:
            Dictionary containing simulation results and metrics
        """
        start_time = time.time()
        self.logger.info("Starting simulation...")

        for generator in self.generators:
            generator.activate()
        if self.accident_generator is not None:
            self.accident_generator.activate()

        self.scheduler.run(until=self.simulation_duration)

        results = self._finalize()

        elapsed_time = time.time() - start_time
        self.logger.info(
            f"Simulation completed in {elapsed_time:.2f}s "
            f"({self.scheduler.events_processed} events)"
        )
        return results

    def spawn_ship(self, ship_class: ShipClass, origin: Side,
                   cargo: Optional[float] = None, at: Optional[float] = None) -> Ship:
        """Create a ship, count it as generated and schedule its arrival.

        Args:
            ship_class: Size class of the ship
            origin: Side it arrives from
            cargo: Cargo capacity, defaults to the class rating
            at: Arrival time, defaults to now

        Returns:
            The activated ship
        """
        ship = Ship(self, ship_class, origin, cargo=cargo)
        self.metrics.record_generated(ship)
        ship.activate(at)
        return ship

    def resources(self) -> List:
        """All counting resources in report order."""
        resources = [self.canal.occupancy]
        for complex_ in self.locks.values():
            resources.extend(complex_.resources)
        return resources

    def in_transit(self) -> int:
        """Ships generated that have neither finished nor been turned away."""
        m = self.metrics
        return m.generated - len(m.samples) - m.rejected - m.interrupted

    def _finalize(self) -> Dict:
        """Finalize simulation and compute results.

        Returns:
            Dictionary containing all results and metrics
        """
        self.logger.info("Finalizing simulation...")

        metrics = self.metrics.compute_metrics(duration=self.scheduler.now)
        cargo = self.metrics.cargo_by_class

        results = {
            **metrics,
            'in_transit_ships': self.in_transit(),
            'total_cargo': float(sum(cargo.values())),
            'simulation_duration': self.scheduler.now,
            'days': self.days,
            'events_processed': self.scheduler.events_processed,
            'parked_processes': len(self.scheduler.parked_processes()),
            'resources': [r.get_stats() for r in self.resources()],
            'canal': self.canal.get_stats(),
            'histogram': self.metrics.histogram(),
            'accidents': [asdict(a) for a in self.accidents],
        }

        return results
