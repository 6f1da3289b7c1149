"""
Validate Subcommand Module

Validates claim record files against their schemas, vocabularies, filename
conventions and cited DOIs. Validates the whole corpus by default, or only
the files given on the command line (e.g. the files changed in a commit).
"""

import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path
from typing import List, Optional, Tuple

import click

from claims.config.environment import EnvironmentVariables
from claims.config.manager import ConfigurationManager
from claims.utils.logging_config import configure_logging, logging_config
from claims.validation.engine import ValidationEngine
from claims.validation.errors import ContractError
from claims.validation.records import RECORD_EXTENSIONS, record_type_from_path

from .shared_options import config_option, corpus_dir_option, log_file_option, log_level_option


logger = logging.getLogger(__name__)

EXIT_INVALID = 1
EXIT_FATAL = 2


def _environment_help() -> str:
    # \b keeps click from rewrapping the table
    lines = ["\b", "Environment variables:"]
    for name, doc in EnvironmentVariables.get_variable_documentation().items():
        lines.append(f"  {name}  {doc}")
    return "\n".join(lines)


@click.command(
    help="Validate claim files against schemas, vocabularies, filenames and DOIs",
    epilog=_environment_help(),
)
@click.argument("files", nargs=-1, type=click.Path())
@click.option(
    "--files-from",
    type=click.File("r"),
    help="Read the files to validate from this file, one per line ('-' for stdin)",
)
@config_option()
@corpus_dir_option()
@click.option("--schema-dir", type=click.Path(file_okay=False), help="Directory of <type>.schema.json files")
@click.option("--vocab-dir", type=click.Path(file_okay=False), help="Directory of <name>.yml vocabularies")
@click.option("--skip-doi", is_flag=True, help="Do not resolve or check cited DOIs")
@click.option("--workers", "-w", type=click.IntRange(min=1), help="Worker threads for DOI batches and file checks")
@click.option(
    "--report", "-r",
    "report_path",
    type=click.Path(dir_okay=False),
    help="Output JSON report to this path",
)
@click.option("--verbose", "-v", is_flag=True, help="List passing files as well as failures")
@log_level_option()
@log_file_option()
def validate(
    files: Tuple[str, ...],
    files_from,
    config: Optional[str],
    corpus_dir: Optional[str],
    schema_dir: Optional[str],
    vocab_dir: Optional[str],
    skip_doi: bool,
    workers: Optional[int],
    report_path: Optional[str],
    verbose: bool,
    log_level: Optional[str],
    log_file: Optional[str],
):
    """Validate claim files.

    Examples:
        # Validate the whole corpus
        claims validate

        # Validate only some files
        claims validate supplements/creatine/claims/effects/physical-muscle-strength-up-strong.yml

        # Validate the files changed since main
        git diff --name-only main | claims validate --files-from -

        # Offline run with a JSON report
        claims validate --skip-doi --report report.json
    """
    overrides = {
        "corpus_dir": corpus_dir,
        "schema_dir": schema_dir,
        "vocab_dir": vocab_dir,
        "log_level": log_level.lower() if log_level else None,
        "max_workers": workers,
        "verifier": {"enabled": False} if skip_doi else {},
    }

    try:
        settings = ConfigurationManager().load_configuration(config, cli_overrides=overrides)
    except ValueError as e:
        click.echo(f"❌ Configuration error: {e}", err=True)
        sys.exit(EXIT_FATAL)

    configure_logging(level=settings.log_level, log_file=log_file, force=True)
    logging_config.log_configuration_details(asdict(settings))

    if settings.verifier.enabled and not settings.verifier.api_key:
        for warning in EnvironmentVariables.validate_environment_setup()[0]:
            logger.info(warning)

    targets = _collect_targets(files, files_from)
    if targets is not None and not targets:
        click.echo("No claim files to validate.")
        return

    engine = ValidationEngine.from_config(settings)
    try:
        summary = engine.run(targets)
    except ContractError as e:
        click.echo(f"❌ Cannot load validation contracts: {e}", err=True)
        sys.exit(EXIT_FATAL)
    except FileNotFoundError as e:
        click.echo(f"❌ {e}", err=True)
        sys.exit(EXIT_FATAL)

    click.echo(summary.format_human(verbose=verbose))

    if report_path:
        _write_report(report_path, summary.to_dict())
        click.echo(f"\nReport saved: {report_path}")

    if not summary.is_success:
        sys.exit(EXIT_INVALID)


def _collect_targets(files: Tuple[str, ...], files_from) -> Optional[List[str]]:
    """Explicit target list, or None for a full corpus run."""
    if not files and files_from is None:
        return None

    targets = [f for f in files if Path(f).suffix in RECORD_EXTENSIONS]
    if files_from is not None:
        # Changed-file lists also contain schemas, vocabularies, docs and
        # files the change deleted.
        listed = [line.strip() for line in files_from if line.strip()]
        records = [p for p in listed if record_type_from_path(p) is not None and Path(p).exists()]
        if len(records) < len(listed):
            logger.debug(f"Ignoring {len(listed) - len(records)} listed path(s) that are missing "
                         f"or outside the claims layout")
        targets.extend(records)
    return targets


def _write_report(path: str, data: dict):
    """Write a JSON report to disk."""
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)
