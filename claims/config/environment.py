"""
Environment variable integration for the claims validator.

Centralizes the environment variable names read by the configuration
manager, with their documentation.
"""

import os
from typing import Dict, List, Tuple


class EnvironmentVariables:
    """Centralized environment variable definitions and utilities."""

    CORPUS_DIR = "CLAIMS_CORPUS_DIR"
    SCHEMA_DIR = "CLAIMS_SCHEMA_DIR"
    VOCAB_DIR = "CLAIMS_VOCAB_DIR"
    LOG_LEVEL = "CLAIMS_LOG_LEVEL"
    MAX_WORKERS = "CLAIMS_MAX_WORKERS"

    DOI_ENDPOINT = "CLAIMS_DOI_ENDPOINT"
    SEMANTIC_SCHOLAR_API_KEY = "SEMANTIC_SCHOLAR_API_KEY"

    @classmethod
    def get_variable_documentation(cls) -> Dict[str, str]:
        """Get documentation for all environment variables."""
        return {
            cls.CORPUS_DIR: "Root directory of the claims corpus (default: supplements)",
            cls.SCHEMA_DIR: "Directory holding <type>.schema.json files (default: schemas)",
            cls.VOCAB_DIR: "Directory holding <name>.yml vocabularies (default: vocab)",
            cls.LOG_LEVEL: "Default logging level (debug, info, warning, error)",
            cls.MAX_WORKERS: "Worker threads for DOI batches and file validation (default: 1)",
            cls.DOI_ENDPOINT: "Batch lookup URL for DOI verification",
            cls.SEMANTIC_SCHOLAR_API_KEY: "API key for the Semantic Scholar Graph API",
        }

    @classmethod
    def validate_environment_setup(cls) -> Tuple[List[str], List[str]]:
        """
        Validate current environment variable setup.

        Returns:
            Tuple of (warnings, errors)
        """
        warnings = []
        errors = []

        max_workers = os.environ.get(cls.MAX_WORKERS)
        if max_workers is not None:
            if not max_workers.isdigit() or int(max_workers) < 1:
                errors.append(f"Invalid {cls.MAX_WORKERS}: '{max_workers}'. Expected a positive integer")

        log_level = os.environ.get(cls.LOG_LEVEL)
        if log_level and log_level.lower() not in ('debug', 'info', 'warning', 'error'):
            errors.append(f"Invalid {cls.LOG_LEVEL}: '{log_level}'. "
                          f"Valid options: debug, info, warning, error")

        if not os.environ.get(cls.SEMANTIC_SCHOLAR_API_KEY):
            warnings.append(f"{cls.SEMANTIC_SCHOLAR_API_KEY} not set; DOI lookups use the "
                            f"shared unauthenticated rate limit")

        return warnings, errors
