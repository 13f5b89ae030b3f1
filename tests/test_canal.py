"""Tests for the canal model: admission control, locks, accidents and runs."""

import unittest
from types import SimpleNamespace

from canalsim.canal.accidents import Repair
from canalsim.canal.controller import AdmissionDecision, CanalController
from canalsim.canal.locks import LockComplex
from canalsim.canal.ship import Ship, ShipClass, Side
from canalsim.core.exceptions import ConfigurationError
from canalsim.core.scheduler import Scheduler
from canalsim.core.simulator import CanalSimulator
from configs import merge_configs
from helpers import Script, make_config

SIDES = (Side.ATLANTIC, Side.PACIFIC)
SINGLE_TRANSIT = 90 + 660 + 90


def live_ships(sim):
    return [p for p in sim.scheduler.live_processes() if isinstance(p, Ship)]


class TestCanalController(unittest.TestCase):
    """Test cases for the hysteresis state machine."""

    def setUp(self):
        """Set up test fixtures."""
        self.scheduler = Scheduler()
        self.controller = CanalController(
            self.scheduler, {'capacity': 4, 'queueing': True, 'queue_limit': 2}, SIDES
        )

    def _occupant(self, stay):
        def body(proc):
            yield self.controller.occupancy.enter(proc)
            self.controller.ship_admitted(proc)
            yield proc.wait(stay)
            self.controller.ship_departed(proc)
        return body

    def test_restricts_when_full_and_reopens_below_half(self):
        """Test the two thresholds of the admission state."""
        for i in range(4):
            Script(self.scheduler, self._occupant(10 * (i + 1))).activate()
        self.scheduler.run()

        # Still restricted at 2/4 occupancy; opens at 1/4.
        self.assertEqual(self.controller.transitions, [(0.0, True, 4), (30.0, False, 1)])
        self.assertFalse(self.controller.restricted)
        self.assertFalse(self.controller.state.empty_queues)
        self.assertEqual(self.controller.get_stats()['restricted_time'], 30)

    def test_decisions(self):
        """Test admit, queue and reject decisions."""
        ship = SimpleNamespace(origin=Side.PACIFIC, name='ship')
        self.assertEqual(self.controller.decide(ship), AdmissionDecision.ADMIT)

        self.controller.state.priority_exit = True
        self.assertEqual(self.controller.decide(ship), AdmissionDecision.QUEUE)

        for i in range(2):
            self.controller.enqueue(SimpleNamespace(origin=Side.PACIFIC, name=f"q{i}"))
        self.assertEqual(self.controller.decide(ship), AdmissionDecision.REJECT)

        atlantic = SimpleNamespace(origin=Side.ATLANTIC, name='other')
        self.assertEqual(self.controller.decide(atlantic), AdmissionDecision.QUEUE)

    def test_no_queueing_always_admits(self):
        """Test a canal without admission control never queues or rejects."""
        controller = CanalController(self.scheduler, {'capacity': 1, 'queueing': False}, SIDES)
        controller.state.priority_exit = True

        ship = SimpleNamespace(origin=Side.ATLANTIC, name='ship')
        self.assertEqual(controller.decide(ship), AdmissionDecision.ADMIT)

    def test_invalid_capacity(self):
        """Test a non-positive canal capacity is rejected."""
        with self.assertRaises(ConfigurationError):
            CanalController(self.scheduler, {'capacity': 0}, SIDES)


class TestLockComplex(unittest.TestCase):
    """Test cases for lock selection."""

    def setUp(self):
        """Set up test fixtures."""
        self.scheduler = Scheduler()

    def test_pooled_complex(self):
        """Test a pooled complex always hands out its pool."""
        complex_ = LockComplex(self.scheduler, Side.PACIFIC, capacity=3)

        self.assertIs(complex_.select_lock(), complex_.pool)
        self.assertEqual(complex_.pool.capacity, 3)
        self.assertEqual(complex_.chambers, [])
        self.assertEqual(complex_.pool.name, "Pacific Locks")

    def test_dual_selection_prefers_primary(self):
        """Test the primary chamber is chosen while free, the secondary otherwise."""
        complex_ = LockComplex(self.scheduler, Side.ATLANTIC, dual=True)
        self.assertIs(complex_.select_lock(), complex_.primary)

        def hold(proc):
            yield complex_.primary.seize(proc)
            yield proc.wait(100)
            complex_.primary.release(proc)

        Script(self.scheduler, hold).activate()
        self.scheduler.run(until=10)
        self.assertIs(complex_.select_lock(), complex_.secondary)

        self.scheduler.run(until=200)
        self.assertIs(complex_.select_lock(), complex_.primary)

    def test_selection_is_repeatable(self):
        """Test selection never depends on anything but chamber state."""
        complex_ = LockComplex(self.scheduler, Side.ATLANTIC, dual=True)
        picks = {complex_.select_lock().name for _ in range(20)}
        self.assertEqual(picks, {"Atlantic Lock 1"})


class TestShipScenarios(unittest.TestCase):
    """End-to-end scenarios with hand-placed ships."""

    def test_single_ship_transit(self):
        """Test an undisturbed ship needs two lockages and the passage."""
        sim = CanalSimulator(make_config())
        ship = sim.spawn_ship(ShipClass.NEOPANAMAX, Side.PACIFIC)
        results = sim.run()

        self.assertEqual(ship.transit_time, SINGLE_TRANSIT)
        self.assertEqual(results['completed_by_side'], {'pacific': 1})
        self.assertEqual(results['cargo_by_class'], {'neopanamax': 14000})
        self.assertEqual(sim.canal.occupancy.used, 0)

    def test_capacity_one_opposite_sides(self):
        """Test the second ship waits for the first to leave, then completes."""
        for queueing in (True, False):
            with self.subTest(queueing=queueing):
                sim = CanalSimulator(make_config(canal={'capacity': 1, 'queueing': queueing}))
                first = sim.spawn_ship(ShipClass.PANAMAX, Side.ATLANTIC)
                second = sim.spawn_ship(ShipClass.PANAMAX, Side.PACIFIC)
                results = sim.run()

                self.assertEqual(first.departure_time, SINGLE_TRANSIT)
                self.assertEqual(second.departure_time, 2 * SINGLE_TRANSIT)
                self.assertEqual(results['completed_ships'], 2)
                self.assertEqual(results['rejected_ships'], 0)
                self.assertEqual(results['parked_processes'], 0)

    def test_queue_bound_rejects_overflow(self):
        """Test arrivals beyond the side queue bound are turned away."""
        sim = CanalSimulator(make_config(canal={'capacity': 1, 'queue_limit': 5}))
        sim.spawn_ship(ShipClass.PANAMAX, Side.ATLANTIC)
        late = [sim.spawn_ship(ShipClass.PANAMAX, Side.ATLANTIC, at=10) for _ in range(7)]

        sim.scheduler.run(until=20)
        queue = sim.canal.queues[Side.ATLANTIC]
        self.assertEqual(list(queue), late[:5])
        self.assertEqual([s.rejected for s in late], [False] * 5 + [True] * 2)

        results = sim.run()
        self.assertEqual(results['generated_ships'], 8)
        self.assertEqual(results['rejected_ships'], 2)
        self.assertEqual(results['completed_ships'], 6)
        self.assertEqual(len(sim.metrics.samples), 6)
        self.assertEqual(queue.total_drained, 5)
        self.assertTrue(all(s.departure_time is None for s in late[5:]))
        self.assertTrue(all(s.cancelled and s.is_terminated for s in late[5:]))
        self.assertFalse(any(s.cancelled for s in late[:5]))

    def test_accident_interrupts_ship_in_chamber(self):
        """Test a repair flags the occupant, then holds the chamber for its duration."""
        sim = CanalSimulator(make_config(locks={'dual': True}))
        chamber = sim.locks[Side.ATLANTIC].primary
        ship = sim.spawn_ship(ShipClass.PANAMAX, Side.ATLANTIC)
        Repair(sim, chamber, 200).activate(at=30)

        granted = []

        def prober(proc):
            yield chamber.seize(proc)
            granted.append(proc.scheduler.now)
            chamber.release(proc)

        Script(sim.scheduler, prober).activate(at=100)
        results = sim.run()

        self.assertTrue(ship.interrupted)
        self.assertIsNone(ship.departure_time)
        self.assertEqual(results['interrupted_ships'], 1)
        self.assertEqual(results['completed_ships'], 0)
        self.assertEqual(sim.canal.occupancy.used, 0)
        self.assertEqual(granted, [290])

        accident = results['accidents'][0]
        self.assertEqual(accident['target'], "Atlantic Lock 1")
        self.assertEqual(accident['interrupted_ship'], ship.name)
        self.assertEqual(accident['time'], 30)
        self.assertEqual(accident['repair_start'], 90)
        self.assertEqual(accident['repaired_at'], 290)

    def test_abort_that_reopens_canal_drains_queues(self):
        """Test an interrupted ship freeing the canal releases the queued ships at once."""
        sim = CanalSimulator(make_config(canal={'capacity': 1}, locks={'dual': True}))
        first = sim.spawn_ship(ShipClass.PANAMAX, Side.ATLANTIC)
        queued = sim.spawn_ship(ShipClass.PANAMAX, Side.ATLANTIC, at=10)
        later = sim.spawn_ship(ShipClass.PANAMAX, Side.PACIFIC, at=200)
        Repair(sim, sim.locks[Side.ATLANTIC].primary, 200).activate(at=30)

        sim.scheduler.run(until=20)
        self.assertEqual(list(sim.canal.queues[Side.ATLANTIC]), [queued])

        results = sim.run()

        self.assertTrue(first.interrupted)
        self.assertEqual(sim.canal.queues[Side.ATLANTIC].total_drained, 1)
        self.assertFalse(sim.canal.state.empty_queues)
        # Drained at the abort (t=90); the primary is under repair, so the secondary.
        self.assertEqual(queued.departure_time, 90 + SINGLE_TRANSIT)
        self.assertLess(queued.departure_time, later.departure_time)
        self.assertEqual(results['completed_ships'], 2)
        self.assertEqual(results['parked_processes'], 0)

    def test_interrupted_in_exit_lock(self):
        """Test an accident in the exit lock aborts the ship without a sample."""
        sim = CanalSimulator(make_config(locks={'dual': True}))
        ship = sim.spawn_ship(ShipClass.NEOPANAMAX, Side.ATLANTIC)
        Repair(sim, sim.locks[Side.PACIFIC].primary, 100).activate(at=800)
        results = sim.run()

        self.assertTrue(ship.interrupted)
        self.assertTrue(ship.is_terminated)
        self.assertIsNone(ship.departure_time)
        self.assertEqual(sim.metrics.samples, [])
        self.assertEqual(results['interrupted_ships'], 1)
        self.assertEqual(results['in_transit_ships'], 0)
        self.assertEqual(sim.canal.occupancy.used, 0)
        self.assertFalse(ship.admitted)

        accident = results['accidents'][0]
        self.assertEqual(accident['target'], "Pacific Lock 1")
        self.assertEqual(accident['repair_start'], SINGLE_TRANSIT)
        self.assertEqual(accident['repaired_at'], SINGLE_TRANSIT + 100)

    def test_accident_on_idle_chamber(self):
        """Test a repair on a free chamber interrupts nobody."""
        sim = CanalSimulator(make_config(locks={'dual': True}))
        chamber = sim.locks[Side.PACIFIC].secondary
        Repair(sim, chamber, 50).activate(at=5)
        results = sim.run()

        self.assertIsNone(results['accidents'][0]['interrupted_ship'])
        self.assertEqual(results['accidents'][0]['repair_start'], 5)
        self.assertFalse(chamber.busy)

    def test_second_ship_takes_secondary_chamber(self):
        """Test a ship arriving while the primary is busy uses the secondary."""
        sim = CanalSimulator(make_config(locks={'dual': True}))
        sim.spawn_ship(ShipClass.PANAMAX, Side.ATLANTIC)
        second = sim.spawn_ship(ShipClass.PANAMAX, Side.ATLANTIC, at=10)

        sim.scheduler.run(until=20)
        self.assertIs(second.current_lock, sim.locks[Side.ATLANTIC].secondary)

        sim.run()
        self.assertEqual(second.transit_time, SINGLE_TRANSIT)


class TestCanalSimulator(unittest.TestCase):
    """Test cases for complete simulation runs."""

    def _busy_config(self, **overrides):
        config = make_config(
            simulation={'days': 5, 'random_seed': 11},
            canal={'capacity': 6, 'queue_limit': 3},
            locks={'dual': True},
            travel={'time': {'distribution': 'normal', 'mean': 660, 'std': 30}},
            generators=[
                {'ship_class': 'panamax', 'arrival': {'distribution': 'normal', 'mean': 50, 'std': 3}},
                {'ship_class': 'neopanamax', 'arrival': {'distribution': 'exponential', 'mean': 120}},
            ],
            accidents={
                'enabled': True,
                'interval': {'distribution': 'exponential', 'mean': 600},
                'duration': {'distribution': 'normal', 'mean': 120, 'std': 30},
            },
        )
        return merge_configs(config, overrides)

    def test_sample_count_matches_ship_fates(self):
        """Test every generated ship is completed, rejected, interrupted or still inside."""
        sim = CanalSimulator(self._busy_config())
        results = sim.run()

        in_transit = len(live_ships(sim))
        self.assertGreater(results['rejected_ships'], 0)
        self.assertEqual(results['in_transit_ships'], in_transit)
        self.assertEqual(
            len(sim.metrics.samples),
            results['generated_ships'] - results['rejected_ships']
            - results['interrupted_ships'] - in_transit,
        )
        self.assertLessEqual(sim.canal.occupancy.used, sim.canal.capacity)
        for resource in sim.resources():
            self.assertLessEqual(len(resource.holders), resource.capacity)

    def test_runs_are_deterministic(self):
        """Test identical seeds give identical event order and results."""
        config = self._busy_config(simulation={'trace': True})
        first, second = CanalSimulator(config), CanalSimulator(config)
        results = [first.run(), second.run()]

        self.assertGreater(len(first.scheduler.trace), 0)
        self.assertEqual(first.scheduler.trace, second.scheduler.trace)
        self.assertEqual(results[0], results[1])

    def test_different_seeds_differ(self):
        """Test the seed actually drives the random draws."""
        a = CanalSimulator(self._busy_config(simulation={'random_seed': 1})).run()
        b = CanalSimulator(self._busy_config(simulation={'random_seed': 2})).run()
        self.assertNotEqual(a['mean_transit_time'], b['mean_transit_time'])

    def test_generator_stops_at_horizon(self):
        """Test a constant-interval generator fires once per interval within the horizon."""
        config = make_config(
            simulation={'days': 1},
            canal={'capacity': 100, 'queueing': False},
            generators=[{'ship_class': 'panamax', 'arrival': 100}],
        )
        sim = CanalSimulator(config)
        results = sim.run()

        self.assertEqual(results['generated_ships'], 15)
        self.assertEqual(sim.generators[0].state.value, 'terminated')
        self.assertEqual(sim.scheduler.now, 1440)

    def test_generator_max_ships(self):
        """Test a bounded generator stops after its last ship."""
        config = make_config(generators=[
            {'ship_class': 'neopanamax', 'arrival': 30, 'max_ships': 3},
        ])
        results = CanalSimulator(config).run()

        self.assertEqual(results['generated_ships'], 3)
        self.assertEqual(results['completed_ships'], 3)
        self.assertEqual(results['completed_by_class'], {'neopanamax': 3})

    def test_results_report_resources(self):
        """Test results carry per-resource statistics in report order."""
        results = CanalSimulator(self._busy_config()).run()

        names = [r['name'] for r in results['resources']]
        self.assertEqual(names, [
            "Canal", "Atlantic Lock 1", "Atlantic Lock 2",
            "Pacific Lock 1", "Pacific Lock 2",
        ])
        self.assertEqual(results['simulation_duration'], 5 * 1440)
        self.assertIn('p95_transit_time', results)
        self.assertEqual(sum(results['histogram']['counts'])
                         + results['histogram']['underflow']
                         + results['histogram']['overflow'],
                         results['completed_ships'])


class TestConfigurationErrors(unittest.TestCase):
    """Test cases for scenario validation."""

    def assertInvalid(self, **overrides):
        with self.assertRaises(ConfigurationError):
            CanalSimulator(make_config(**overrides))

    def test_missing_simulation_section(self):
        with self.assertRaises(ConfigurationError):
            CanalSimulator({'canal': {'capacity': 5}})

    def test_bad_values(self):
        """Test invalid parameters fail before the run starts."""
        self.assertInvalid(simulation={'days': 0})
        self.assertInvalid(canal={'capacity': 0})
        self.assertInvalid(canal={'capacity': 2.5})
        self.assertInvalid(canal={'queue_limit': -1})
        self.assertInvalid(locks={'capacity': 0})
        self.assertInvalid(locks={'time_in_lock': -5})
        self.assertInvalid(travel={'time': {'distribution': 'gamma'}})

    def test_bad_generators(self):
        self.assertInvalid(generators=[{'ship_class': 'tanker', 'arrival': 10}])
        self.assertInvalid(generators=[{'ship_class': 'panamax'}])
        self.assertInvalid(generators=[{'arrival': {'distribution': 'exponential', 'mean': 0}}])

    def test_bad_accidents(self):
        """Test accident settings need exclusive chambers and both distributions."""
        accidents = {'enabled': True, 'interval': 100, 'duration': 10}
        self.assertInvalid(accidents=accidents)
        self.assertInvalid(locks={'dual': True}, accidents={'enabled': True, 'interval': 100})
        self.assertInvalid(locks={'dual': True}, accidents=dict(accidents, target="Lock 9"))


if __name__ == '__main__':
    unittest.main()
