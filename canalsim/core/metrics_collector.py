"""Metrics collection and aggregation."""

import numpy as np
from typing import Dict, List, Optional
from collections import defaultdict

from ..utils.logger import setup_logger


class MetricsCollector:
    """Collect and aggregate simulation metrics.

    Receives one transit sample per ship that completes its passage, plus
    counters for ships that never do (rejected at admission or interrupted
    by an accident).
    """

    def __init__(self, config: Dict):
        """Initialize metrics collector.

        Args:
            config: Configuration dictionary
        """
        self.config = config
        self.logger = setup_logger(self.__class__.__name__)

        report_cfg = config.get('report', {})
        self.percentiles = report_cfg.get('percentiles', [50, 90, 95, 99])

        # Histogram layout in hours: first class starts at `low`
        histogram_cfg = report_cfg.get('histogram', {})
        self.histogram_low = histogram_cfg.get('low', 8.0)
        self.histogram_step = histogram_cfg.get('step', 1.0)
        self.histogram_count = histogram_cfg.get('count', 18)

        # Transit samples (minutes)
        self.samples: List[float] = []

        # Counters
        self.generated = 0
        self.rejected = 0
        self.interrupted = 0
        self.completed_by_side = defaultdict(int)
        self.arrivals_by_side = defaultdict(int)
        self.completed_by_class = defaultdict(int)
        self.cargo_by_class = defaultdict(float)

    def record(self, sample: float) -> None:
        """Record a transit duration in minutes."""
        if sample < 0:
            raise ValueError(f"Transit duration cannot be negative: {sample}")
        self.samples.append(sample)

    def record_generated(self, ship) -> None:
        self.generated += 1
        self.arrivals_by_side[ship.origin.value] += 1

    def record_ship(self, ship, duration: float) -> None:
        """Record a ship that completed its transit.

        Args:
            ship: Completed ship
            duration: Time from arrival to departure (minutes)
        """
        self.record(duration)
        self.completed_by_side[ship.origin.value] += 1
        self.completed_by_class[ship.ship_class.value] += 1
        self.cargo_by_class[ship.ship_class.value] += ship.cargo

    def record_rejection(self, ship) -> None:
        self.rejected += 1

    def record_interruption(self, ship) -> None:
        self.interrupted += 1

    def histogram(self) -> Dict:
        """Bin transit times (hours) into fixed-width classes.

        Returns:
            Dictionary with bin edges, per-class counts, underflow and overflow
        """
        edges = self.histogram_low + self.histogram_step * np.arange(self.histogram_count + 1)
        hours = np.asarray(self.samples, dtype=float) / 60.0
        counts, _ = np.histogram(hours[(hours >= edges[0]) & (hours < edges[-1])], bins=edges)

        return {
            'edges': edges.tolist(),
            'counts': counts.astype(int).tolist(),
            'underflow': int(np.sum(hours < edges[0])),
            'overflow': int(np.sum(hours >= edges[-1])),
        }

    def compute_metrics(self, duration: Optional[float] = None) -> Dict:
        """Compute aggregate metrics from collected data.

        Args:
            duration: Simulated time span in minutes, for per-day rates

        Returns:
            Dictionary of computed metrics
        """
        results = {
            'generated_ships': self.generated,
            'completed_ships': len(self.samples),
            'rejected_ships': self.rejected,
            'interrupted_ships': self.interrupted,
            'completed_by_side': dict(self.completed_by_side),
            'arrivals_by_side': dict(self.arrivals_by_side),
            'completed_by_class': dict(self.completed_by_class),
            'cargo_by_class': dict(self.cargo_by_class),
        }

        if self.samples:
            results.update(self._compute_distribution_metrics(
                'transit_time', self.samples
            ))

        if duration:
            days = duration / (24 * 60)
            results['ships_per_day'] = len(self.samples) / days

        return results

    def _compute_distribution_metrics(self, name: str, values: List[float]) -> Dict:
        """Compute distribution statistics for a metric.

        Args:
            name: Metric name
            values: List of values

        Returns:
            Dictionary with mean, median, and percentiles
        """
        if not values:
            return {}

        results = {
            f'mean_{name}': float(np.mean(values)),
            f'median_{name}': float(np.median(values)),
            f'std_{name}': float(np.std(values)),
            f'min_{name}': float(np.min(values)),
            f'max_{name}': float(np.max(values)),
        }

        for p in self.percentiles:
            results[f'p{p}_{name}'] = float(np.percentile(values, p))

        return results

    def summary_output(self) -> str:
        """Get human-readable summary of metrics.

        Returns:
            Formatted string with key metrics
        """
        if not self.samples:
            return "No transits completed"

        hours = np.asarray(self.samples) / 60.0
        summary = [
            "=== Transit Summary ===",
            f"Ships completed: {len(self.samples)}",
            f"Mean transit: {np.mean(hours):.2f} h",
            f"Median transit: {np.median(hours):.2f} h",
            f"P95 transit: {np.percentile(hours, 95):.2f} h",
        ]
        if self.rejected:
            summary.append(f"Rejected: {self.rejected}")
        if self.interrupted:
            summary.append(f"Interrupted: {self.interrupted}")

        return "\n".join(summary)
