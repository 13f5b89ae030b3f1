"""Seedable random source used by generators, travel times and accidents."""

from typing import Optional, Sequence, TypeVar

import numpy as np

T = TypeVar("T")


class RandomSource:
    """Thin wrapper over a numpy Generator.

    Each simulation owns one instance so that runs sharing a process do not
    share random state. Distribution parameters follow the simulation's
    conventions (exponential takes the mean, not the rate).
    """

    def __init__(self, seed: Optional[int] = None):
        self.seed = seed
        self._rng = np.random.default_rng(seed)

    def uniform(self, low: float = 0.0, high: float = 1.0) -> float:
        """Draw from U[low, high)."""
        return float(self._rng.uniform(low, high))

    def normal(self, mean: float, std: float) -> float:
        return float(self._rng.normal(mean, std))

    def exponential(self, mean: float) -> float:
        return float(self._rng.exponential(mean))

    def bernoulli(self, p: float = 0.5) -> bool:
        return self.uniform() < p

    def choice(self, items: Sequence[T]) -> T:
        if not items:
            raise ValueError("Cannot choose from an empty sequence")
        return items[int(self._rng.integers(len(items)))]

    def __repr__(self) -> str:
        return f"RandomSource(seed={self.seed})"
