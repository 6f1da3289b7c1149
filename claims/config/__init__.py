"""
Configuration for the claims validator.
"""

from claims.config.manager import ConfigurationManager
from claims.config.schema import ValidatorConfig, VerifierConfig

__all__ = [
    "ConfigurationManager",
    "ValidatorConfig",
    "VerifierConfig",
]
