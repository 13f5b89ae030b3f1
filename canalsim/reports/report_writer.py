"""
Report writer for canal simulations - generates the plain-text run report.
"""
from pathlib import Path
from typing import Dict, Any, Union

import pandas as pd

RESOURCE_COLUMNS = [
    'name', 'capacity', 'requests', 'mean_occupancy', 'utilization',
    'busy_time', 'max_queue_length', 'mean_queue_length', 'mean_wait_time',
]


class ReportWriter:
    """Generates human-readable simulation reports."""

    def resource_table(self, results: Dict[str, Any]) -> pd.DataFrame:
        """Per-resource utilization statistics as a DataFrame."""
        frame = pd.DataFrame(results.get('resources', []))
        if frame.empty:
            return pd.DataFrame(columns=RESOURCE_COLUMNS)
        return frame[RESOURCE_COLUMNS]

    def generate_report(self, results: Dict[str, Any], title: str = "CANAL SIMULATION") -> str:
        """Generate the full text report from simulation results."""
        lines = []

        # Header
        lines.append("=" * 60)
        lines.append(f"   {title}")
        lines.append(f"   Simulated days: {results.get('days', 0)}")
        lines.append("=" * 60)
        lines.append("")

        for stats in results.get('resources', []):
            lines.extend(self._resource_section(stats))

        lines.extend(self._histogram_section(results.get('histogram', {})))
        lines.extend(self._summary_section(results))

        accidents = results.get('accidents', [])
        if accidents:
            lines.append("ACCIDENTS")
            lines.append("━" * 60)
            for accident in accidents:
                victim = accident.get('interrupted_ship') or "-"
                lines.append(f"  t={accident['time']:>10.1f}  {accident['target']:<18} "
                             f"repair {accident['duration']:.1f} min  interrupted: {victim}")
            lines.append("")

        return "\n".join(lines)

    def _resource_section(self, stats: Dict[str, Any]) -> list:
        lines = []
        lines.append(f"RESOURCE {stats['name']}")
        lines.append("━" * 60)
        lines.append(f"Capacity:           {stats['capacity']}")
        lines.append(f"Time interval:      {stats['interval']:.1f} min")
        lines.append(f"Requests:           {stats['requests']}")
        lines.append(f"Mean occupancy:     {stats['mean_occupancy']:.3f}")
        lines.append(f"Utilization:        {stats['utilization'] * 100:.1f}%")
        lines.append(f"Busy time:          {stats['busy_time']:.1f} unit-min")
        lines.append(f"Queue max length:   {stats['max_queue_length']}")
        lines.append(f"Queue mean length:  {stats['mean_queue_length']:.3f}")
        lines.append(f"Mean wait in queue: {stats['mean_wait_time']:.1f} min")

        distribution = stats.get('queue_length_distribution', {})
        if len(distribution) > 1:
            lines.append("Queue length distribution (share of time):")
            for length, share in distribution.items():
                lines.append(f"  {length:>4}: {share * 100:6.2f}%")
        lines.append("")
        return lines

    def _histogram_section(self, histogram: Dict[str, Any]) -> list:
        lines = []
        counts = histogram.get('counts', [])
        edges = histogram.get('edges', [])
        if not counts:
            return lines

        total = sum(counts) + histogram.get('underflow', 0) + histogram.get('overflow', 0)
        lines.append("TRANSIT TIME HISTOGRAM (hours)")
        lines.append("━" * 60)
        lines.append(f"{'from':>8} {'to':>8} {'n':>8} {'rel':>8} {'sum':>8}")
        lines.append(f"{'-inf':>8} {edges[0]:>8.1f} {histogram.get('underflow', 0):>8}")

        cumulative = histogram.get('underflow', 0)
        for low, high, count in zip(edges[:-1], edges[1:], counts):
            cumulative += count
            rel = count / total if total else 0.0
            cum = cumulative / total if total else 0.0
            lines.append(f"{low:>8.1f} {high:>8.1f} {count:>8} {rel:>8.4f} {cum:>8.4f}")

        lines.append(f"{edges[-1]:>8.1f} {'inf':>8} {histogram.get('overflow', 0):>8}")
        lines.append("")
        return lines

    def _summary_section(self, results: Dict[str, Any]) -> list:
        lines = []
        by_side = results.get('completed_by_side', {})

        lines.append("SHIPS")
        lines.append("━" * 60)
        lines.append(f"Pacific side ships:   {by_side.get('pacific', 0)}")
        lines.append(f"Atlantic side ships:  {by_side.get('atlantic', 0)}")
        lines.append(f"Overall ships:        {results.get('completed_ships', 0)}")
        lines.append(f"Ships per day:        {results.get('ships_per_day', 0.0):.2f}")
        lines.append(f"Generated:            {results.get('generated_ships', 0)}")
        lines.append(f"Rejected:             {results.get('rejected_ships', 0)}")
        lines.append(f"Interrupted:          {results.get('interrupted_ships', 0)}")
        lines.append(f"Still in transit:     {results.get('in_transit_ships', 0)}")

        for ship_class, cargo in results.get('cargo_by_class', {}).items():
            unit = "TEU" if ship_class == 'neopanamax' else "t"
            label = f"Cargo ({ship_class}):"
            lines.append(f"{label:<22}{cargo:,.0f} {unit}")

        if 'mean_transit_time' in results:
            lines.append(f"Mean transit:         {results['mean_transit_time'] / 60:.2f} h")
            lines.append(f"P95 transit:          {results['p95_transit_time'] / 60:.2f} h")
        lines.append("")
        return lines

    def write(self, results: Dict[str, Any], path: Union[str, Path], **kwargs) -> Path:
        """Write the text report to a file and return its path."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.generate_report(results, **kwargs) + "\n", encoding="utf-8")
        return path

    def write_csv(self, results: Dict[str, Any], path: Union[str, Path]) -> Path:
        """Write the per-resource table as CSV."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        self.resource_table(results).to_csv(path, index=False)
        return path
