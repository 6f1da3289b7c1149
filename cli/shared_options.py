"""
Shared CLI Option Decorators

Reusable Click decorators for options common to several subcommands.
"""

import click


def config_option(help=None):
    """Decorator for configuration file options."""
    def decorator(f):
        return click.option(
            '--config',
            default=None,
            type=click.Path(dir_okay=False),
            help=help or 'Path to configuration file'
        )(f)
    return decorator


def corpus_dir_option(help=None):
    """Decorator for the corpus root directory."""
    def decorator(f):
        return click.option(
            '--corpus-dir',
            default=None,
            type=click.Path(file_okay=False),
            help=help or 'Root directory of the claims corpus (overrides config)'
        )(f)
    return decorator


def log_level_option(help=None):
    """Decorator for logging level options."""
    def decorator(f):
        return click.option(
            '--log-level',
            default=None,
            type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR'], case_sensitive=False),
            help=help or 'Logging level (overrides config)'
        )(f)
    return decorator


def log_file_option(help=None):
    """Decorator for an optional log file."""
    def decorator(f):
        return click.option(
            '--log-file',
            default=None,
            type=click.Path(dir_okay=False),
            help=help or 'Also write logs to this file'
        )(f)
    return decorator
