"""
Validation Contract Errors

Errors raised while loading the contracts a run depends on (schemas and
vocabularies). These are fatal: the run stops before any record is checked.
Problems found in record files are never raised; they are reported as
ValidationIssue entries.

Error Hierarchy:
    ContractError (base)
    ├── SchemaLoadError (missing or corrupt JSON schema)
    └── VocabularyLoadError (missing, empty or malformed vocabulary)
"""

from pathlib import Path
from typing import Optional


class ContractError(Exception):
    """Base exception for contract loading failures."""

    def __init__(self, message: str, source: Optional[Path] = None):
        self.source = source
        if source is not None:
            message = f"{message} | File: {source}"
        super().__init__(message)


class SchemaLoadError(ContractError):
    """Raised when a record type's schema cannot be loaded or compiled."""
    pass


class VocabularyLoadError(ContractError):
    """Raised when a vocabulary file is unreadable, empty or not a list of strings."""
    pass
