"""
Schema Registry

Loads one JSON Schema document per record type and compiles it into a
validator that is reused for every record of that type during a run.
Returns ValidationIssue lists instead of raising for invalid records.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List

from jsonschema import Draft7Validator, FormatChecker
from jsonschema.exceptions import SchemaError
from jsonschema.validators import validator_for

from claims.validation.errors import SchemaLoadError
from claims.validation.records import RecordType
from claims.validation.report import ValidationIssue


logger = logging.getLogger(__name__)

SCHEMA_SUFFIX = ".schema.json"


def _error_path(error) -> str:
    """JSON path of a jsonschema error, 'root' for the document itself."""
    if not error.absolute_path:
        return "root"
    return "/".join(str(part) for part in error.absolute_path)


class RecordValidator:
    """Compiled structural contract for one record type."""

    def __init__(self, record_type: RecordType, schema: Dict[str, Any]):
        self.record_type = record_type
        validator_cls = validator_for(schema, default=Draft7Validator)
        self._validator = validator_cls(schema, format_checker=FormatChecker())

    def check(self, record: Any) -> List[ValidationIssue]:
        """Validate a record, collecting every violation.

        Args:
            record: Parsed record content.

        Returns:
            List of ValidationIssue (empty if valid), ordered by path.
        """
        errors = sorted(self._validator.iter_errors(record), key=_error_path)
        issues = []
        for err in errors:
            path = _error_path(err)
            issues.append(ValidationIssue(
                field=path,
                message=f"{path}: {err.message}",
            ))
        return issues


class SchemaRegistry:
    """Loads and caches compiled validators by record type.

    Example:
        >>> registry = SchemaRegistry("schemas")
        >>> issues = registry.compile(RecordType.EFFECTS).check(record)
    """

    def __init__(self, schema_dir):
        self.schema_dir = Path(schema_dir)
        self._validators: Dict[RecordType, RecordValidator] = {}

    def schema_path(self, record_type: RecordType) -> Path:
        return self.schema_dir / f"{record_type.value}{SCHEMA_SUFFIX}"

    def compile(self, record_type: RecordType) -> RecordValidator:
        """Return the compiled validator for a record type.

        Raises:
            SchemaLoadError: If the schema is missing, not JSON or not a valid schema.
        """
        if record_type not in self._validators:
            schema = self._load(record_type)
            self._validators[record_type] = RecordValidator(record_type, schema)
            logger.debug(f"Compiled schema for {record_type.value}")
        return self._validators[record_type]

    def load_all(self, record_types: Iterable[RecordType]) -> None:
        """Compile every given type up front."""
        for record_type in record_types:
            self.compile(record_type)

    def _load(self, record_type: RecordType) -> Dict[str, Any]:
        path = self.schema_path(record_type)
        try:
            with open(path, "r", encoding="utf-8") as f:
                schema = json.load(f)
        except FileNotFoundError:
            raise SchemaLoadError(f"Schema not found for type '{record_type.value}'", path)
        except json.JSONDecodeError as e:
            raise SchemaLoadError(f"Schema is not valid JSON: {e}", path)
        except (OSError, UnicodeDecodeError) as e:
            raise SchemaLoadError(f"Cannot read schema: {e}", path)

        if not isinstance(schema, dict):
            raise SchemaLoadError("Schema must be a JSON object", path)

        validator_cls = validator_for(schema, default=Draft7Validator)
        try:
            validator_cls.check_schema(schema)
        except SchemaError as e:
            raise SchemaLoadError(f"Invalid schema: {e.message}", path)
        return schema
