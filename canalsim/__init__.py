"""CanalSim: discrete event simulation of vessel traffic through a canal."""

from .core.simulator import CanalSimulator
from .core.scheduler import Scheduler
from .core.event_queue import Event, EventType, EventQueue
from .core.metrics_collector import MetricsCollector
from .core.exceptions import ConfigurationError, InvariantViolation
from .utils.logger import setup_logger

__version__ = "0.1.0"
__all__ = [
    "CanalSimulator",
    "Scheduler",
    "Event",
    "EventType",
    "EventQueue",
    "MetricsCollector",
    "ConfigurationError",
    "InvariantViolation",
    "setup_logger",
]
