"""
Vocabulary Registry

Controlled vocabularies are flat YAML lists of allowed strings, one file per
vocabulary name. A vocabulary that cannot be loaded aborts the run; a record
value missing from a loaded vocabulary is an ordinary validation issue.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, NamedTuple, Optional, Tuple

import yaml

from claims.validation.errors import VocabularyLoadError
from claims.validation.records import RecordType
from claims.validation.report import ValidationIssue


logger = logging.getLogger(__name__)

VOCABULARY_SUFFIX = ".yml"


class VocabularyRule(NamedTuple):
    """Binds one record field to the vocabulary its values must come from."""
    field: str
    vocabulary: str


VOCABULARY_RULES: Dict[RecordType, VocabularyRule] = {
    RecordType.EFFECTS: VocabularyRule(field="effect", vocabulary="effects"),
    RecordType.BIOMARKERS: VocabularyRule(field="biomarker", vocabulary="biomarkers"),
}


def rule_for(record_type: RecordType) -> Optional[VocabularyRule]:
    return VOCABULARY_RULES.get(record_type)


class VocabularyRegistry:
    """Loads and caches vocabularies by name."""

    def __init__(self, vocab_dir):
        self.vocab_dir = Path(vocab_dir)
        self._vocabularies: Dict[str, Tuple[str, ...]] = {}

    def vocabulary_path(self, name: str) -> Path:
        return self.vocab_dir / f"{name}{VOCABULARY_SUFFIX}"

    def load(self, name: str) -> Tuple[str, ...]:
        """Load a vocabulary as an ordered tuple of unique strings.

        Args:
            name: Vocabulary name (file stem in the vocabulary directory).

        Returns:
            Allowed values in file order, duplicates removed.

        Raises:
            VocabularyLoadError: If the file is unreadable, empty, or not a
                flat list of strings.
        """
        if name in self._vocabularies:
            return self._vocabularies[name]

        path = self.vocabulary_path(name)
        try:
            with open(path, "r", encoding="utf-8") as f:
                content = yaml.safe_load(f)
        except FileNotFoundError:
            raise VocabularyLoadError(f"Failed to load vocabulary '{name}': file not found", path)
        except yaml.YAMLError as e:
            raise VocabularyLoadError(f"Failed to load vocabulary '{name}': {e}", path)
        except (OSError, UnicodeDecodeError) as e:
            raise VocabularyLoadError(f"Failed to load vocabulary '{name}': {e}", path)

        if not content:
            raise VocabularyLoadError(f"Failed to load vocabulary '{name}': vocabulary is empty", path)
        if not isinstance(content, list) or not all(isinstance(v, str) for v in content):
            raise VocabularyLoadError(
                f"Failed to load vocabulary '{name}': expected a flat list of strings", path
            )

        values = tuple(dict.fromkeys(content))
        self._vocabularies[name] = values
        logger.debug(f"Loaded vocabulary '{name}' with {len(values)} entries")
        return values

    def check(self, record_type: RecordType, record: Dict[str, Any]) -> List[ValidationIssue]:
        """Check a record's controlled field against its vocabulary.

        Types without a vocabulary rule always pass. A missing value is
        left to the schema check.
        """
        rule = rule_for(record_type)
        if rule is None:
            return []

        value = record.get(rule.field)
        if value is None:
            return []

        allowed = self.load(rule.vocabulary)
        if value in allowed:
            return []
        return [ValidationIssue(
            field=rule.field,
            message=f"Invalid {rule.field}: '{value}' not found in vocabulary",
            suggestion=f"Use a value from {self.vocabulary_path(rule.vocabulary)} or add it there.",
        )]
