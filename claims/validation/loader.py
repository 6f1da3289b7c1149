"""
Record Loader

Reads one claim file into a mapping. Anything that stops a file from being
validated at all (missing, unreadable, unparsable, empty, not a mapping) is
returned as the file's only issue rather than raised.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from claims.config.yaml_parser import YAMLParsingError, parse_yaml_file
from claims.validation.report import ValidationIssue


def load_record(file_path: str) -> Tuple[Optional[Dict[str, Any]], List[ValidationIssue]]:
    """Load and parse a YAML record file.

    Returns:
        Tuple of (record_or_None, list_of_issues).
    """
    try:
        data = parse_yaml_file(Path(file_path))
    except YAMLParsingError as e:
        if e.syntax_error:
            message = f"Parse error: {e}"
            suggestion = "Check that the file contains valid YAML."
        else:
            message = f"Unreadable file: {e}"
            suggestion = None
        return None, [ValidationIssue(field="root", message=message, suggestion=suggestion)]

    if data is None:
        return None, [ValidationIssue(field="root", message="Empty file")]

    if not isinstance(data, dict):
        return None, [ValidationIssue(
            field="root",
            message=f"Parse error: expected a mapping, got {type(data).__name__}",
        )]

    return data, []
