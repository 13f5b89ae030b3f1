"""Exceptions raised by the simulation kernel."""


class ConfigurationError(ValueError):
    """Invalid scenario parameters, detected before simulation time advances."""


class InvariantViolation(AssertionError):
    """A resource invariant was broken. Signals a programming error."""
