"""
Configuration schema and data models for the claims validator.

Defines the settings for corpus and contract locations, the worker pool,
and the DOI verifier (endpoint, timeout, batching and retry policy).
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class LogLevel(Enum):
    """Supported logging levels."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass
class VerifierConfig:
    """Configuration for DOI verification.

    Attributes:
        enabled: Whether DOIs are resolved and checked at all
        endpoint: Batch lookup URL
        api_key: Optional lookup service API key
        timeout: Per-request timeout in seconds
        batch_size: Identifiers per request (service maximum is 500)
        retry_attempts: Total attempts per batch
        retry_delay: Delay before the first retry in seconds
        retry_multiplier: Growth factor between retry delays
    """
    enabled: bool = True
    endpoint: str = "https://api.semanticscholar.org/graph/v1/paper/batch"
    api_key: Optional[str] = None
    timeout: float = 30.0
    batch_size: int = 500
    retry_attempts: int = 3
    retry_delay: float = 1.0
    retry_multiplier: float = 2.0


@dataclass
class ValidatorConfig:
    """Complete validator configuration."""

    corpus_dir: str = "supplements"
    schema_dir: str = "schemas"
    vocab_dir: str = "vocab"
    log_level: str = LogLevel.INFO.value
    max_workers: int = 1

    verifier: VerifierConfig = field(default_factory=VerifierConfig)

    def validate(self) -> List[str]:
        """Validate configuration and return list of errors."""
        errors = []

        try:
            LogLevel(self.log_level)
        except ValueError:
            valid_levels = [l.value for l in LogLevel]
            errors.append(f"Invalid log_level '{self.log_level}'. Valid options: {valid_levels}")

        if self.max_workers < 1:
            errors.append("max_workers must be at least 1")

        if self.verifier.timeout <= 0:
            errors.append("verifier.timeout must be positive")
        if not 1 <= self.verifier.batch_size <= 500:
            errors.append("verifier.batch_size must be between 1 and 500")
        if self.verifier.retry_attempts < 1:
            errors.append("verifier.retry_attempts must be at least 1")
        if self.verifier.retry_delay < 0:
            errors.append("verifier.retry_delay must be non-negative")
        if self.verifier.retry_multiplier < 1:
            errors.append("verifier.retry_multiplier must be at least 1")

        return errors
