"""Course selection and probing."""

from .course_auditor import CourseAuditor, AuditResult, extract_subject

__all__ = ["CourseAuditor", "AuditResult", "extract_subject"]
