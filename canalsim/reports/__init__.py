"""Report generation for simulation results."""

from .report_writer import ReportWriter

__all__ = ["ReportWriter"]
