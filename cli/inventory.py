"""
List Subcommand Module

Lists the collections (supplements) in the corpus, optionally with the
number of claim files per record type.
"""

import sys
from typing import Optional

import click

from claims.config.manager import ConfigurationManager
from claims.validation.discovery import discover_corpus, list_collections

from .shared_options import config_option, corpus_dir_option


@click.command(name="list", help="List the supplements found in the corpus")
@config_option()
@corpus_dir_option()
@click.option("--counts", is_flag=True, help="Show claim file counts per record type")
def list_collections_command(config: Optional[str], corpus_dir: Optional[str], counts: bool):
    """List supplements in the corpus.

    Examples:
        claims list
        claims list --counts --corpus-dir ./supplements
    """
    try:
        settings = ConfigurationManager().load_configuration(
            config, cli_overrides={"corpus_dir": corpus_dir}
        )
        if counts:
            corpus = discover_corpus(settings.corpus_dir)
            slugs = list(corpus)
        else:
            corpus = {}
            slugs = list_collections(settings.corpus_dir)
    except (ValueError, FileNotFoundError) as e:
        click.echo(f"❌ Failed to list supplements: {e}", err=True)
        sys.exit(2)

    click.echo(f"📦 Supplements found ({len(slugs)}):\n")
    for slug in slugs:
        if counts:
            groups = corpus[slug]
            detail = ", ".join(f"{t.value}: {len(files)}" for t, files in groups.items())
            click.echo(f"- {slug} ({detail or 'no claims'})")
        else:
            click.echo(f"- {slug}")
