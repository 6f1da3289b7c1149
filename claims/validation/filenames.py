"""
Filename Conventions

Each record type names its files after a few of the record's own fields so
that the corpus can be browsed by filename. Derivation is pure: no I/O and
no exceptions for incomplete records.
"""

import re
from pathlib import Path
from typing import Any, Dict, List, Tuple

from claims.validation.records import RECORD_EXTENSIONS, RecordType, as_typed
from claims.validation.report import ValidationIssue


PLACEHOLDER = "unknown"
CANONICAL_EXTENSION = ".yml"

FILENAME_FIELDS: Dict[RecordType, Tuple[str, ...]] = {
    RecordType.EFFECTS: ("kind", "effect", "direction", "strength"),
    RecordType.BIOMARKERS: ("biomarker", "direction", "strength"),
    RecordType.CYCLES: ("protocol", "duration_weeks"),
    RecordType.INTERACTIONS: ("substance", "severity"),
    RecordType.FORMULATIONS: ("form", "route"),
    RecordType.TOXICITY: ("symptom", "severity"),
    RecordType.SYNERGIES: ("partner", "effect"),
    RecordType.ADDICTION_WITHDRAWAL: ("symptom", "severity"),
}


def slugify(text: str) -> str:
    """Lowercase, hyphenate whitespace and drop anything outside [a-z0-9-]."""
    slug = re.sub(r"\s+", "-", text.lower())
    slug = re.sub(r"[^a-z0-9-]", "", slug)
    slug = re.sub(r"-{2,}", "-", slug)
    return slug.strip("-")


def _component(value: Any) -> str:
    if value is None:
        return PLACEHOLDER
    return slugify(str(value)) or PLACEHOLDER


def canonical_stem(record: Dict[str, Any], record_type: RecordType) -> str:
    """Filename of a record without its extension."""
    if record_type is RecordType.META:
        return RecordType.META.value
    view = as_typed(record_type, record)
    return "-".join(_component(getattr(view, name, None)) for name in FILENAME_FIELDS[record_type])


def derive_filename(record: Dict[str, Any], record_type: RecordType) -> str:
    """Canonical filename a record's content should be stored under.

    Example:
        >>> derive_filename({"effect": "focus-increase", "kind": "cognitive",
        ...                  "direction": "up", "strength": "moderate"},
        ...                 RecordType.EFFECTS)
        'cognitive-focus-increase-up-moderate.yml'
    """
    return canonical_stem(record, record_type) + CANONICAL_EXTENSION


def matches_convention(actual: str, canonical: str) -> bool:
    """Whether an actual filename satisfies the canonical name.

    Files with identical content may coexist by carrying a numeric
    suffix: ``name.yml``, ``name-2.yml``, ``name-3.yml`` and so on.
    """
    stem = Path(canonical).stem
    pattern = rf"{re.escape(stem)}(?:-(?P<n>\d+))?(?:{'|'.join(map(re.escape, RECORD_EXTENSIONS))})"
    match = re.fullmatch(pattern, actual)
    if not match:
        return False
    suffix = match.group("n")
    return suffix is None or (not suffix.startswith("0") and int(suffix) >= 2)


def check_filename(file_path: str, record: Dict[str, Any], record_type: RecordType) -> List[ValidationIssue]:
    """Report a mismatch between a file's name and its content."""
    actual = Path(file_path).name
    expected = derive_filename(record, record_type)
    if matches_convention(actual, expected):
        return []
    return [ValidationIssue(
        field="filename",
        message=f"Filename '{actual}' does not match content (expected '{expected}')",
        suggestion="Rename the file or correct the fields it is derived from.",
    )]
