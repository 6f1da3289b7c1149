"""
Validation Engine

Central orchestrator for a validation run. Loads the schema and vocabulary
contracts, resolves every cited DOI in batches, then validates each record
file: schema, vocabulary, filename and DOI checks are all applied and all
of their issues are reported together.

A run moves through fixed phases:

    Init -> LoadContracts -> ResolveIdentifiers -> ValidateRecords -> Report

DOI resolution finishes, and the verification cache is frozen, before the
first record is validated, so per-record DOI checks are pure cache reads.
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence

from claims.config.schema import ValidatorConfig
from claims.identifiers.cache import VerificationCache
from claims.identifiers.client import DOILookupClient, LookupClientConfig
from claims.identifiers.retry import RetryPolicy
from claims.identifiers.verifier import BatchVerifier
from claims.utils.logging_config import phase
from claims.validation.discovery import discover_corpus, flatten
from claims.validation.filenames import check_filename
from claims.validation.loader import load_record
from claims.validation.records import RecordType, extract_identifier, record_type_from_path
from claims.validation.report import RunSummary, ValidationIssue, ValidationReport
from claims.validation.schema_registry import SchemaRegistry
from claims.validation.vocabulary import VocabularyRegistry, rule_for


logger = logging.getLogger(__name__)


@dataclass
class LoadedRecord:
    """A target file after reading, before validation."""
    file_path: str
    record_type: Optional[RecordType]
    data: Optional[Dict[str, Any]] = None
    issues: List[ValidationIssue] = field(default_factory=list)

    @property
    def is_loaded(self) -> bool:
        return self.data is not None and self.record_type is not None


class ValidationEngine:
    """Validates claim record files against their contracts.

    Example:
        >>> engine = ValidationEngine.from_config(config)
        >>> summary = engine.run()                      # whole corpus
        >>> summary = engine.run(["a/claims/effects/x.yml"])  # selected files
    """

    def __init__(
        self,
        schema_registry: SchemaRegistry,
        vocabulary_registry: VocabularyRegistry,
        verifier: Optional[BatchVerifier] = None,
        corpus_dir: str = "supplements",
        max_workers: int = 1,
    ):
        """Initialize the validation engine.

        Args:
            schema_registry: Source of compiled schemas
            vocabulary_registry: Source of controlled vocabularies
            verifier: DOI verifier; None disables DOI checks entirely
            corpus_dir: Corpus root used when no files are given
            max_workers: Upper bound on threads used for file validation
        """
        self.schema_registry = schema_registry
        self.vocabulary_registry = vocabulary_registry
        self.verifier = verifier
        self.corpus_dir = corpus_dir
        self.max_workers = max(1, max_workers)

    @classmethod
    def from_config(cls, config: ValidatorConfig) -> "ValidationEngine":
        """Build an engine and its collaborators from configuration."""
        verifier = None
        if config.verifier.enabled:
            client = DOILookupClient(LookupClientConfig(
                endpoint=config.verifier.endpoint,
                api_key=config.verifier.api_key,
                timeout=config.verifier.timeout,
            ))
            policy = RetryPolicy(
                max_attempts=config.verifier.retry_attempts,
                base_delay=config.verifier.retry_delay,
                multiplier=config.verifier.retry_multiplier,
            )
            verifier = BatchVerifier(
                client,
                policy=policy,
                batch_size=config.verifier.batch_size,
                max_workers=config.max_workers,
            )
        return cls(
            SchemaRegistry(config.schema_dir),
            VocabularyRegistry(config.vocab_dir),
            verifier=verifier,
            corpus_dir=config.corpus_dir,
            max_workers=config.max_workers,
        )

    def run(self, files: Optional[Sequence[str]] = None) -> RunSummary:
        """Validate the given files, or the whole corpus if none are given.

        Args:
            files: Explicit file list (selective mode); None for full mode

        Returns:
            RunSummary with one report per file, ordered by path

        Raises:
            ContractError: If a schema or vocabulary cannot be loaded
        """
        start = time.time()

        # Init
        mode = "full" if files is None else "selective"
        targets = self._select_targets(files)
        logger.info(f"Validating {len(targets)} file(s) in {mode} mode")

        with phase("LoadContracts"):
            record_types = {record_type_from_path(path) for path in targets} - {None}
            self.load_contracts(record_types)

        with phase("ResolveIdentifiers"):
            loaded = [self._load(path) for path in targets]
            cache = self.resolve_identifiers(loaded)

        with phase("ValidateRecords"):
            reports = self._validate_all(loaded, cache)

        # Report
        summary = RunSummary(
            reports=reports,
            mode=mode,
            identifiers_checked=len(cache) if cache is not None else 0,
            duration_ms=int((time.time() - start) * 1000),
        )
        if summary.is_success:
            logger.info(f"All {len(reports)} file(s) passed")
        else:
            logger.info(f"{len(summary.failures)} of {len(reports)} file(s) failed")
        return summary

    def load_contracts(self, record_types: Iterable[RecordType]) -> None:
        """Compile schemas and load vocabularies for the given types.

        Raises:
            ContractError: On the first schema or vocabulary that cannot be loaded
        """
        ordered = sorted(record_types, key=lambda t: t.value)
        self.schema_registry.load_all(ordered)
        for record_type in ordered:
            rule = rule_for(record_type)
            if rule is not None:
                self.vocabulary_registry.load(rule.vocabulary)

    def resolve_identifiers(self, loaded: Sequence[LoadedRecord]) -> Optional[VerificationCache]:
        """Resolve every DOI cited by the loaded records.

        Returns:
            The frozen cache, or None when DOI verification is disabled
        """
        if self.verifier is None:
            logger.info("DOI verification disabled")
            return None

        dois = set()
        for item in loaded:
            if item.data is not None:
                doi = extract_identifier(item.data)
                if doi:
                    dois.add(doi)
        return self.verifier.verify(dois)

    def validate_record(
        self,
        file_path: str,
        record: Dict[str, Any],
        record_type: RecordType,
        cache: Optional[VerificationCache],
    ) -> List[ValidationIssue]:
        """Apply every check to one parsed record.

        Checks never short-circuit: all issues found are returned, in the
        order schema, vocabulary, filename, DOI.
        """
        issues: List[ValidationIssue] = []
        issues.extend(self.schema_registry.compile(record_type).check(record))
        issues.extend(self.vocabulary_registry.check(record_type, record))
        issues.extend(check_filename(file_path, record, record_type))
        if self.verifier is not None:
            issues.extend(self._check_identifier(record, cache))
        return issues

    def _select_targets(self, files: Optional[Sequence[str]]) -> List[str]:
        if files is not None:
            return sorted(dict.fromkeys(str(f) for f in files))
        return flatten(discover_corpus(self.corpus_dir))

    def _load(self, file_path: str) -> LoadedRecord:
        record_type = record_type_from_path(file_path)
        data, issues = load_record(file_path)
        if data is not None and record_type is None:
            issues = [ValidationIssue(
                field="root",
                message="Cannot determine record type from path",
                suggestion="Place the file under <collection>/claims/<type>/ or name it meta.yml.",
            )]
            data = None
        return LoadedRecord(file_path=file_path, record_type=record_type, data=data, issues=issues)

    def _validate_all(
        self,
        loaded: Sequence[LoadedRecord],
        cache: Optional[VerificationCache],
    ) -> List[ValidationReport]:
        def validate(item: LoadedRecord) -> ValidationReport:
            return self._validate_loaded(item, cache)

        if self.max_workers > 1 and len(loaded) > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                return list(executor.map(validate, loaded))
        return [validate(item) for item in loaded]

    def _validate_loaded(self, item: LoadedRecord, cache: Optional[VerificationCache]) -> ValidationReport:
        start = time.time()
        record_type = item.record_type.value if item.record_type else "unknown"

        if not item.is_loaded:
            issues = item.issues
        else:
            try:
                issues = self.validate_record(item.file_path, item.data, item.record_type, cache)
            except Exception as e:
                logger.exception(f"Unexpected error validating {item.file_path}")
                issues = [ValidationIssue(
                    field="root",
                    message=f"Unexpected validation error: {e}",
                )]

        return ValidationReport(
            file_path=item.file_path,
            record_type=record_type,
            issues=issues,
            duration_ms=int((time.time() - start) * 1000),
        )

    def _check_identifier(self, record: Dict[str, Any], cache: Optional[VerificationCache]) -> List[ValidationIssue]:
        doi = extract_identifier(record)
        if doi is None:
            return []

        verified = cache.lookup(doi) if cache is not None else None
        if verified is None:
            return [ValidationIssue(
                field="paper",
                message=f"DOI '{doi}' was not resolved before validation",
            )]
        if not verified:
            return [ValidationIssue(
                field="paper",
                message=f"DOI '{doi}' could not be verified",
                suggestion="Check the DOI for typos, or rerun if the lookup service was unavailable.",
            )]
        return []
