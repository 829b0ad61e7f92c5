"""Audit of unpublished LMS courses ahead of term start."""

__version__ = "1.0.0"
