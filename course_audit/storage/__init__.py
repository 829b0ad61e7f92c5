"""Storage module for report export."""

from .export import ReportExporter, report_filename

__all__ = ["ReportExporter", "report_filename"]
