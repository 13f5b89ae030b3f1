"""Visualization utilities for simulation results."""

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import seaborn as sns
import numpy as np
from pathlib import Path
from typing import Dict

sns.set_style("whitegrid")
sns.set_palette("husl")


def plot_results(results: Dict, output_dir: Path) -> None:
    """Generate all visualization plots.

    Args:
        results: Results dictionary from simulation
        output_dir: Directory to save plots
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    plot_transit_histogram(results, output_dir / "transit_histogram.png")
    plot_resource_utilization(results, output_dir / "resource_utilization.png")


def plot_transit_histogram(results: Dict, output_path: Path) -> None:
    """Plot the transit time histogram.

    Args:
        results: Results dictionary
        output_path: Output file path
    """
    histogram = results.get('histogram', {})
    counts = histogram.get('counts', [])
    if not counts:
        return

    edges = np.asarray(histogram['edges'])
    fig, ax = plt.subplots(figsize=(10, 6))
    ax.bar(edges[:-1], counts, width=np.diff(edges), align='edge',
           color='steelblue', edgecolor='white')
    ax.set_xlabel('Transit time (hours)')
    ax.set_ylabel('Ships')
    ax.set_title('Transit Time Distribution')
    ax.grid(axis='y', alpha=0.3)

    plt.tight_layout()
    plt.savefig(output_path, dpi=150, bbox_inches='tight')
    plt.close(fig)


def plot_resource_utilization(results: Dict, output_path: Path) -> None:
    """Plot utilization and mean queue length per resource.

    Args:
        results: Results dictionary
        output_path: Output file path
    """
    resources = results.get('resources', [])
    if not resources:
        return

    names = [r['name'] for r in resources]
    fig, axes = plt.subplots(1, 2, figsize=(14, 5))

    ax = axes[0]
    ax.bar(names, [r['utilization'] * 100 for r in resources], color='coral')
    ax.set_ylabel('Utilization (%)')
    ax.set_title('Resource Utilization')
    ax.set_ylim(0, 100)
    ax.tick_params(axis='x', rotation=30)

    ax = axes[1]
    ax.bar(names, [r['mean_queue_length'] for r in resources], color='lightgreen')
    ax.set_ylabel('Mean queue length')
    ax.set_title('Resource Queues')
    ax.tick_params(axis='x', rotation=30)

    plt.tight_layout()
    plt.savefig(output_path, dpi=150, bbox_inches='tight')
    plt.close(fig)
