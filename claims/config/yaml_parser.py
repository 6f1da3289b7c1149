"""
YAML parsing with detailed error reporting.

Used both for configuration files and for claim record files: syntax errors
carry the file path and the line/column reported by PyYAML.
"""

import yaml
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple


class YAMLParsingError(Exception):
    """Custom exception for YAML parsing errors with enhanced context."""

    def __init__(self, message: str, file_path: Optional[Path] = None,
                 line_number: Optional[int] = None, column: Optional[int] = None,
                 syntax_error: bool = False):
        self.file_path = file_path
        self.line_number = line_number
        self.column = column
        self.syntax_error = syntax_error

        # Build detailed error message
        error_parts = [message]

        if file_path:
            error_parts.append(f"File: {file_path}")

        if line_number is not None:
            if column is not None:
                error_parts.append(f"Line {line_number}, Column {column}")
            else:
                error_parts.append(f"Line {line_number}")

        super().__init__(" | ".join(error_parts))


def _from_yaml_error(e: yaml.YAMLError, file_path: Optional[Path]) -> YAMLParsingError:
    line_number = None
    column = None

    mark = getattr(e, "problem_mark", None)
    if mark is not None:
        line_number = mark.line + 1  # YAML uses 0-based line numbers
        column = mark.column + 1

    problem = getattr(e, "problem", None)
    message = f"YAML parsing error: {problem or e}"
    return YAMLParsingError(message, file_path, line_number, column, syntax_error=True)


def parse_yaml_file(file_path: Path) -> Any:
    """Read and parse a YAML file, returning None for an empty document.

    Raises:
        YAMLParsingError: If the file cannot be read or the YAML is invalid
    """
    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            return yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise _from_yaml_error(e, file_path)
    except FileNotFoundError:
        raise YAMLParsingError("File not found", file_path)
    except IsADirectoryError:
        raise YAMLParsingError("Path is not a file", file_path)
    except PermissionError:
        raise YAMLParsingError("Permission denied reading file", file_path)
    except UnicodeDecodeError as e:
        raise YAMLParsingError(f"File encoding error: {e}", file_path)
    except OSError as e:
        raise YAMLParsingError(f"Cannot read file: {e}", file_path)


class ConfigurationYAMLParser:
    """YAML parser for configuration files with structure validation."""

    TOP_LEVEL_KEYS = {'corpus_dir', 'schema_dir', 'vocab_dir', 'log_level', 'max_workers', 'verifier'}
    VERIFIER_KEYS = {
        'enabled', 'endpoint', 'api_key', 'timeout', 'batch_size',
        'retry_attempts', 'retry_delay', 'retry_multiplier'
    }

    def parse_file(self, file_path: Path) -> Dict[str, Any]:
        """
        Parse YAML configuration file with enhanced error reporting.

        Args:
            file_path: Path to YAML configuration file

        Returns:
            Dictionary containing parsed configuration

        Raises:
            YAMLParsingError: If YAML is invalid, file cannot be read, or
                the document is not a mapping
        """
        content = parse_yaml_file(file_path)
        if content is None:
            return {}
        if not isinstance(content, dict):
            raise YAMLParsingError("Configuration must be a mapping", file_path)
        return content

    def validate_configuration_structure(self, config_dict: Dict[str, Any]) -> List[str]:
        """
        Validate configuration dictionary structure against expected keys.

        Args:
            config_dict: Configuration dictionary to validate

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        unknown_keys = set(config_dict.keys()) - self.TOP_LEVEL_KEYS
        if unknown_keys:
            errors.append(f"Unknown configuration keys: {', '.join(sorted(unknown_keys))}")

        if 'max_workers' in config_dict and not isinstance(config_dict['max_workers'], int):
            errors.append("max_workers must be an integer")

        if 'verifier' in config_dict:
            errors.extend(self._validate_verifier_config(config_dict['verifier']))

        return errors

    def _validate_verifier_config(self, config: Any) -> List[str]:
        """Validate verifier configuration section."""
        errors = []

        if not isinstance(config, dict):
            errors.append("verifier must be a dictionary")
            return errors

        unknown_keys = set(config.keys()) - self.VERIFIER_KEYS
        if unknown_keys:
            errors.append(f"Unknown verifier keys: {', '.join(sorted(unknown_keys))}")

        for key in ('timeout', 'retry_delay', 'retry_multiplier'):
            if key in config and not isinstance(config[key], (int, float)):
                errors.append(f"verifier.{key} must be a number")

        for key in ('batch_size', 'retry_attempts'):
            if key in config and not isinstance(config[key], int):
                errors.append(f"verifier.{key} must be an integer")

        if 'enabled' in config and not isinstance(config['enabled'], bool):
            errors.append("verifier.enabled must be true or false")

        return errors

    def validate_and_parse_file(self, file_path: Path) -> Tuple[Dict[str, Any], List[str]]:
        """
        Parse and validate YAML configuration file in one step.

        Returns:
            Tuple of (parsed_config, validation_errors)

        Raises:
            YAMLParsingError: If YAML parsing fails
        """
        config_dict = self.parse_file(file_path)
        validation_errors = self.validate_configuration_structure(config_dict)
        return config_dict, validation_errors
