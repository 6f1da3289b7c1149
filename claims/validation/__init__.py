"""
Validation Module for Supplement Claims

Provides schema, vocabulary, filename and DOI validation of claim record
files, and the engine that runs them over a corpus.
"""

from claims.validation.report import RunSummary, ValidationIssue, ValidationReport
from claims.validation.engine import ValidationEngine

__all__ = [
    "RunSummary",
    "ValidationIssue",
    "ValidationReport",
    "ValidationEngine",
]
