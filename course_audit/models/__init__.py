"""Data models for courses and report rows."""

from .course import Course, Teacher, FrontPage
from .report import ProbeOutcome, ReportRow, REPORT_COLUMNS

__all__ = ["Course", "Teacher", "FrontPage", "ProbeOutcome", "ReportRow", "REPORT_COLUMNS"]
