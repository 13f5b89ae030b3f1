"""Workload generation for simulations."""

from .arrival_process import ArrivalProcess, draw, validate_distribution

__all__ = ["ArrivalProcess", "draw", "validate_distribution"]
