"""Utility functions and helpers."""

from .logger import setup_logger
from .random_source import RandomSource

__all__ = ["setup_logger", "RandomSource"]
