"""Core simulation components."""

from .event_queue import Event, EventType, EventQueue
from .exceptions import ConfigurationError, InvariantViolation
from .scheduler import Scheduler
from .process import Process, ProcessState
from .resource import CountingResource, ExclusiveResource
from .wait_queue import WaitQueue
from .metrics_collector import MetricsCollector
from .simulator import CanalSimulator

__all__ = [
    "Event",
    "EventType",
    "EventQueue",
    "ConfigurationError",
    "InvariantViolation",
    "Scheduler",
    "Process",
    "ProcessState",
    "CountingResource",
    "ExclusiveResource",
    "WaitQueue",
    "MetricsCollector",
    "CanalSimulator",
]
