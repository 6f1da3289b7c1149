"""
Logging Configuration

Configurable logging levels, optional rotating log file output, timing of
the phases of a validation run and masked configuration dumps.
"""

import logging
import logging.handlers
import sys
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, Optional

SENSITIVE_MARKERS = ("key", "token", "secret", "password")


def format_duration(seconds: float) -> str:
    if seconds < 1.0:
        return f"{seconds * 1000:.0f}ms"
    return f"{seconds:.1f}s"


class LoggingConfig:
    """
    Centralized logging configuration for the claims validator.

    Logs go to stderr so that the validation report on stdout stays
    machine-readable.
    """

    def __init__(self):
        self._configured = False
        self._log_file_handler: Optional[logging.Handler] = None
        self._console_handler: Optional[logging.Handler] = None

    def configure_logging(
        self,
        level: str = "info",
        log_file: Optional[str] = None,
        include_timestamps: bool = True,
        max_log_file_size: int = 10 * 1024 * 1024,  # 10MB
        backup_count: int = 5,
        force: bool = False,
    ) -> None:
        """
        Configure logging for the application.

        Args:
            level: Logging level (debug, info, warning, error)
            log_file: Optional log file path
            include_timestamps: Whether to include timestamps in console messages
            max_log_file_size: Maximum log file size before rotation
            backup_count: Number of backup log files to keep
            force: Reconfigure even if logging was already configured
        """
        if self._configured and not force:
            return

        log_level = self._get_log_level(level)
        debug_mode = log_level == logging.DEBUG

        root_logger = logging.getLogger()
        root_logger.setLevel(log_level)
        root_logger.handlers.clear()

        self._console_handler = logging.StreamHandler(sys.stderr)
        self._console_handler.setLevel(log_level)
        self._console_handler.setFormatter(
            self._create_console_formatter(include_timestamps, debug_mode)
        )
        root_logger.addHandler(self._console_handler)

        if log_file:
            self._configure_file_logging(log_file, log_level, max_log_file_size, backup_count)

        # urllib3 logs every connection at DEBUG
        logging.getLogger("urllib3").setLevel(max(log_level, logging.INFO))

        self._configured = True

        logger = logging.getLogger(__name__)
        logger.debug(f"Logging configured: level={level}, file={log_file}")

    def _get_log_level(self, level_str: str) -> int:
        """Convert string log level to logging constant."""
        level_map = {
            "debug": logging.DEBUG,
            "info": logging.INFO,
            "warning": logging.WARNING,
            "error": logging.ERROR
        }
        return level_map.get(level_str.lower(), logging.INFO)

    def _create_console_formatter(self, include_timestamps: bool, debug_mode: bool) -> logging.Formatter:
        """Create formatter for console output."""
        parts = []

        if include_timestamps:
            parts.append("%(asctime)s")

        if debug_mode:
            parts.append("%(name)s")

        parts.extend(["%(levelname)s", "%(message)s"])

        return logging.Formatter(
            " - ".join(parts),
            datefmt="%H:%M:%S" if not debug_mode else "%Y-%m-%d %H:%M:%S"
        )

    def _configure_file_logging(
        self,
        log_file: str,
        log_level: int,
        max_size: int,
        backup_count: int
    ) -> None:
        """Configure file logging with rotation."""
        try:
            Path(log_file).parent.mkdir(parents=True, exist_ok=True)
            self._log_file_handler = logging.handlers.RotatingFileHandler(
                log_file,
                maxBytes=max_size,
                backupCount=backup_count,
                encoding='utf-8'
            )
        except OSError as e:
            # Log file setup failed, continue with console only
            logging.getLogger(__name__).warning(f"Failed to setup log file {log_file}: {e}")
            return

        self._log_file_handler.setLevel(log_level)
        self._log_file_handler.setFormatter(logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        ))
        logging.getLogger().addHandler(self._log_file_handler)

    @contextmanager
    def phase(self, name: str) -> Iterator[None]:
        """
        Context manager timing one phase of a validation run.

        Usage:
            with logging_config.phase("LoadContracts"):
                schema_registry.load_all(record_types)
        """
        logger = logging.getLogger(__name__)
        logger.debug(f"{name} started")
        start = time.time()
        try:
            yield
        except Exception as e:
            logger.error(f"{name} failed after {format_duration(time.time() - start)}: {e}")
            raise
        logger.info(f"{name} finished in {format_duration(time.time() - start)}")

    def log_configuration_details(self, config: Dict[str, Any], prefix: str = "") -> None:
        """Log configuration values at debug level, masking credentials.

        Nested sections are flattened to dotted keys (``verifier.api_key``).
        """
        logger = logging.getLogger(__name__)

        if not logger.isEnabledFor(logging.DEBUG):
            return

        if not prefix:
            logger.debug("=== Configuration Details ===")
        for key, value in config.items():
            name = f"{prefix}{key}"
            if isinstance(value, dict):
                self.log_configuration_details(value, prefix=f"{name}.")
                continue
            if any(marker in key.lower() for marker in SENSITIVE_MARKERS):
                value = "***MASKED***" if value else None
            logger.debug(f"  {name}: {value}")
        if not prefix:
            logger.debug("=== End Configuration ===")


# Global logging configuration instance
logging_config = LoggingConfig()


def configure_logging(level: str = "info", log_file: Optional[str] = None, force: bool = False) -> None:
    """
    Convenience function to configure logging.

    Args:
        level: Logging level (debug, info, warning, error)
        log_file: Optional log file path
        force: Reconfigure even if already configured
    """
    logging_config.configure_logging(level=level, log_file=log_file, force=force)


def phase(name: str):
    return logging_config.phase(name)
