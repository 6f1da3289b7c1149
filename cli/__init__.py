"""
CLI Package for the Supplement Claims Validator

Click group with one module per subcommand. The cli() function is the
console script entry point declared in setup.py.
"""

import os
import click
from dotenv import load_dotenv

from claims import __version__

# Load environment variables from .env files
# Priority: .env.dev (if exists) overrides .env
if os.path.exists('.env.dev'):
    load_dotenv('.env.dev')
elif os.path.exists('.env'):
    load_dotenv('.env')

from .validate import validate
from .inventory import list_collections_command


@click.group()
@click.version_option(version=__version__, prog_name='claims')
def main():
    """Supplement Claims CLI - validate claim records and their citations.

    Checks every claim file against its JSON schema, controlled
    vocabularies, filename convention and cited DOI, and reports all
    violations in one pass.
    """
    pass


# Register subcommands
main.add_command(validate)
main.add_command(list_collections_command)


# Entry point for setup.py console script
def cli():
    """Console script entry point."""
    main()
