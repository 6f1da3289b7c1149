"""
Configuration Manager for the claims validator.

Loads, validates and merges configuration from multiple sources:
- System defaults
- User configuration (~/.claims/config.yaml)
- Project configuration (./.claims/config.yaml)
- Explicit configuration (--config file.yaml)
- Environment variables
- CLI arguments (highest precedence)
"""

import os
import re
from pathlib import Path
from typing import Optional, Dict, Any, List
from dataclasses import asdict

from .schema import ValidatorConfig, VerifierConfig
from .environment import EnvironmentVariables
from .yaml_parser import ConfigurationYAMLParser, YAMLParsingError


class ConfigurationManager:
    """Manages configuration loading, validation, and environment variable integration."""

    def __init__(self):
        self.user_config_path = Path.home() / ".claims" / "config.yaml"
        self.project_config_path = Path.cwd() / ".claims" / "config.yaml"
        self.yaml_parser = ConfigurationYAMLParser()

    def load_configuration(self,
                           config_file: Optional[str] = None,
                           cli_overrides: Optional[Dict[str, Any]] = None) -> ValidatorConfig:
        """
        Load configuration from all sources with proper precedence.

        Precedence order (highest to lowest):
        1. CLI arguments (cli_overrides)
        2. Environment variables
        3. Explicit config file (--config)
        4. Project config (./.claims/config.yaml)
        5. User config (~/.claims/config.yaml)
        6. System defaults

        Args:
            config_file: Optional explicit configuration file path
            cli_overrides: Dictionary of CLI argument overrides (None values are ignored)

        Returns:
            ValidatorConfig: Merged configuration

        Raises:
            ValueError: If configuration files contain invalid YAML or values
        """
        config_dict = asdict(ValidatorConfig())

        if self.user_config_path.exists():
            config_dict = self._merge_configs(config_dict, self._load_yaml_file(self.user_config_path))

        if self.project_config_path.exists():
            config_dict = self._merge_configs(config_dict, self._load_yaml_file(self.project_config_path))

        if config_file:
            config_dict = self._merge_configs(config_dict, self._load_yaml_file(Path(config_file)))

        config_dict = self._merge_configs(config_dict, self._load_environment_variables())

        if cli_overrides:
            config_dict = self._merge_configs(config_dict, self._drop_unset(cli_overrides))

        config_dict = self.substitute_environment_variables(config_dict)

        try:
            config = self._dict_to_config(config_dict)
        except (TypeError, ValueError) as e:
            raise ValueError(f"Failed to create configuration object: {e}")

        errors = config.validate()
        if errors:
            raise ValueError("Invalid configuration:\n" + "\n".join(f"  - {e}" for e in errors))

        return config

    def substitute_environment_variables(self, config_dict: Dict[str, Any]) -> Dict[str, Any]:
        """
        Substitute ${VAR} and ${VAR:-default} syntax with environment variable values.

        Raises:
            ValueError: If required environment variable is missing
        """
        def substitute_value(value):
            if not isinstance(value, str):
                return value

            pattern = r'\$\{([^}]+)\}'

            def replace_var(match):
                var_expr = match.group(1)

                if ':-' in var_expr:
                    var_name, default_value = var_expr.split(':-', 1)
                    return os.environ.get(var_name, default_value)
                if var_expr not in os.environ:
                    raise ValueError(f"Required environment variable '{var_expr}' is not set")
                return os.environ[var_expr]

            return re.sub(pattern, replace_var, value)

        def substitute_recursive(obj):
            if isinstance(obj, dict):
                return {k: substitute_recursive(v) for k, v in obj.items()}
            elif isinstance(obj, list):
                return [substitute_recursive(item) for item in obj]
            else:
                return substitute_value(obj)

        return substitute_recursive(config_dict)

    def _load_yaml_file(self, file_path: Path) -> Dict[str, Any]:
        """Load and parse YAML configuration file with enhanced error reporting."""
        try:
            config_dict, validation_errors = self.yaml_parser.validate_and_parse_file(file_path)
        except YAMLParsingError as e:
            raise ValueError(str(e))

        if validation_errors:
            raise ValueError(
                f"Configuration validation errors in {file_path}:\n" +
                "\n".join(f"  - {error}" for error in validation_errors)
            )
        return config_dict

    def _load_environment_variables(self) -> Dict[str, Any]:
        """Load configuration from environment variables."""
        env_config: Dict[str, Any] = {}
        env_vars = EnvironmentVariables

        if env_vars.CORPUS_DIR in os.environ:
            env_config['corpus_dir'] = os.environ[env_vars.CORPUS_DIR]

        if env_vars.SCHEMA_DIR in os.environ:
            env_config['schema_dir'] = os.environ[env_vars.SCHEMA_DIR]

        if env_vars.VOCAB_DIR in os.environ:
            env_config['vocab_dir'] = os.environ[env_vars.VOCAB_DIR]

        if env_vars.LOG_LEVEL in os.environ:
            env_config['log_level'] = os.environ[env_vars.LOG_LEVEL].lower()

        if env_vars.MAX_WORKERS in os.environ:
            try:
                env_config['max_workers'] = int(os.environ[env_vars.MAX_WORKERS])
            except ValueError:
                raise ValueError(f"{env_vars.MAX_WORKERS} must be an integer")

        if env_vars.DOI_ENDPOINT in os.environ:
            env_config.setdefault('verifier', {})['endpoint'] = os.environ[env_vars.DOI_ENDPOINT]

        if env_vars.SEMANTIC_SCHOLAR_API_KEY in os.environ:
            env_config.setdefault('verifier', {})['api_key'] = os.environ[env_vars.SEMANTIC_SCHOLAR_API_KEY]

        return env_config

    def _drop_unset(self, overrides: Dict[str, Any]) -> Dict[str, Any]:
        result = {}
        for key, value in overrides.items():
            if isinstance(value, dict):
                nested = self._drop_unset(value)
                if nested:
                    result[key] = nested
            elif value is not None:
                result[key] = value
        return result

    def _merge_configs(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Recursively merge configuration dictionaries."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge_configs(result[key], value)
            else:
                result[key] = value

        return result

    def _dict_to_config(self, config_dict: Dict[str, Any]) -> ValidatorConfig:
        """Convert configuration dictionary to ValidatorConfig object."""
        verifier_dict = config_dict.get('verifier') or {}
        return ValidatorConfig(
            corpus_dir=config_dict.get('corpus_dir', 'supplements'),
            schema_dir=config_dict.get('schema_dir', 'schemas'),
            vocab_dir=config_dict.get('vocab_dir', 'vocab'),
            log_level=config_dict.get('log_level', 'info'),
            max_workers=config_dict.get('max_workers', 1),
            verifier=VerifierConfig(**verifier_dict),
        )
