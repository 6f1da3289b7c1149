"""
Validation Report Data Models

Defines ValidationIssue, ValidationReport and RunSummary dataclasses used
across the validation module for structured error reporting.
"""

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional


@dataclass
class ValidationIssue:
    """A single validation issue found in a record file.

    Every issue fails its file.

    Attributes:
        field: The field or path where the issue was found
        message: Human-readable description of the issue
        suggestion: Optional suggestion for fixing the issue
    """
    field: str
    message: str
    suggestion: Optional[str] = None

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        d = {"field": self.field, "message": self.message}
        if self.suggestion:
            d["suggestion"] = self.suggestion
        return d


@dataclass
class ValidationReport:
    """Outcome of validating one record file.

    Attributes:
        file_path: Path to the validated file
        record_type: Record type derived from the path ("unknown" if none)
        issues: Ordered list of issues, in check order
        duration_ms: How long validation took in milliseconds
    """
    file_path: str
    record_type: str
    issues: List[ValidationIssue] = field(default_factory=list)
    duration_ms: int = 0

    @property
    def is_valid(self) -> bool:
        return not self.issues

    @property
    def messages(self) -> List[str]:
        """Error messages in the order they were found."""
        return [i.message for i in self.issues]

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "file_path": self.file_path,
            "record_type": self.record_type,
            "is_valid": self.is_valid,
            "issues": [i.to_dict() for i in self.issues],
            "duration_ms": self.duration_ms,
        }

    def format_human(self) -> str:
        """Format report for human-readable console output."""
        if self.is_valid:
            lines = [f"✅ {self.file_path}: Valid ({self.record_type})"]
        else:
            lines = [f"🔴 {self.file_path}: Failed ({self.record_type})"]

        for issue in self.issues:
            lines.append(f"  → [{issue.field}] {issue.message}")
            if issue.suggestion:
                lines.append(f"      {issue.suggestion}")

        return "\n".join(lines)


@dataclass
class RunSummary:
    """Aggregate result of one validation run.

    Reports are kept sorted by file path so that the output does not
    depend on the order in which files finished validating.
    """
    reports: List[ValidationReport] = field(default_factory=list)
    mode: str = "full"
    identifiers_checked: int = 0
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    duration_ms: int = 0

    def __post_init__(self):
        self.reports = sorted(self.reports, key=lambda r: r.file_path)

    @property
    def failures(self) -> List[ValidationReport]:
        return [r for r in self.reports if not r.is_valid]

    @property
    def passed(self) -> int:
        return len(self.reports) - len(self.failures)

    @property
    def is_success(self) -> bool:
        return not self.failures

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "mode": self.mode,
            "timestamp": self.timestamp,
            "duration_ms": self.duration_ms,
            "total": len(self.reports),
            "passed": self.passed,
            "failed": len(self.failures),
            "identifiers_checked": self.identifiers_checked,
            "success": self.is_success,
            "reports": [r.to_dict() for r in self.reports],
        }

    def to_json(self, indent: int = 2) -> str:
        """Serialize summary to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    def format_human(self, verbose: bool = False) -> str:
        """Format the run for console output.

        Only failing files are listed unless ``verbose`` is set.
        """
        if self.is_success:
            return f"✅ All {len(self.reports)} claim files are valid."

        lines = [f"❌ Found {len(self.failures)} invalid files:", ""]
        shown = self.reports if verbose else self.failures
        for report in shown:
            lines.append(report.format_human())
        return "\n".join(lines)
