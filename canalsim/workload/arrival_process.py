"""Inter-arrival and duration distributions."""

from numbers import Number
from typing import Dict, Union

from ..core.exceptions import ConfigurationError

DistributionConfig = Union[Number, Dict]

_REQUIRED_PARAMS = {
    'constant': ('value',),
    'normal': ('mean', 'std'),
    'exponential': ('mean',),
    'uniform': ('low', 'high'),
}


def validate_distribution(config: DistributionConfig, name: str = "distribution") -> None:
    """Check a distribution config before the simulation starts.

    A bare number is a constant. Otherwise a mapping with a ``distribution``
    key and that distribution's parameters.

    Raises:
        ConfigurationError: On unknown distributions or bad parameters
    """
    if isinstance(config, Number) and not isinstance(config, bool):
        if config < 0:
            raise ConfigurationError(f"{name}: constant cannot be negative ({config})")
        return

    if not isinstance(config, dict):
        raise ConfigurationError(f"{name}: expected a number or a mapping, got {config!r}")

    kind = config.get('distribution')
    if kind not in _REQUIRED_PARAMS:
        raise ConfigurationError(f"{name}: unknown distribution {kind!r}")

    missing = [p for p in _REQUIRED_PARAMS[kind] if p not in config]
    if missing:
        raise ConfigurationError(f"{name}: {kind} distribution needs {', '.join(missing)}")

    if kind == 'exponential' and config['mean'] <= 0:
        raise ConfigurationError(f"{name}: exponential mean must be positive")
    if kind == 'normal' and config['std'] < 0:
        raise ConfigurationError(f"{name}: normal std cannot be negative")
    if kind == 'uniform' and config['high'] < config['low']:
        raise ConfigurationError(f"{name}: uniform high is below low")
    if kind == 'constant' and config['value'] < 0:
        raise ConfigurationError(f"{name}: constant cannot be negative")


def draw(config: DistributionConfig, rng) -> float:
    """Draw one non-negative value from a distribution config.

    Args:
        config: Number or distribution mapping
        rng: RandomSource to draw from

    Returns:
        Sampled value, clipped at zero
    """
    if isinstance(config, Number):
        return float(config)

    kind = config['distribution']
    if kind == 'constant':
        value = config['value']
    elif kind == 'normal':
        value = rng.normal(config['mean'], config['std'])
    elif kind == 'exponential':
        value = rng.exponential(config['mean'])
    elif kind == 'uniform':
        value = rng.uniform(config['low'], config['high'])
    else:
        raise ValueError(f"Unknown distribution: {kind}")

    return max(0.0, float(value))


class ArrivalProcess:
    """Draws successive inter-arrival times.

    Supports:
    - normal (scheduled traffic with jitter)
    - exponential (memoryless arrivals)
    - constant (evenly spaced)
    - uniform
    """

    def __init__(self, config: DistributionConfig, rng):
        """Initialize arrival process.

        Args:
            config: Inter-arrival distribution config
            rng: RandomSource shared with the simulation
        """
        validate_distribution(config, "arrival")
        self.config = config
        self.rng = rng

    def next_interval(self) -> float:
        return draw(self.config, self.rng)

    def __repr__(self) -> str:
        return f"ArrivalProcess({self.config!r})"
