"""slnsync CLI -- Keep an IDE solution in step with a repository's submodules.

Entry point for the ``slnsync`` command-line tool. Registers all
subcommands under a single Click group.

Commands:
    update     -- Regenerate (or patch) the solution file from the submodules.
    submodules -- List the submodule paths declared in the manifest.

Usage::

    slnsync update                          # Patch Zonit.sln (create if missing)
    slnsync update --clean                  # Full rewrite, old file backed up
    slnsync update --dry-run                # Preview the structure only
    slnsync update --update-submodules      # git fetch/checkout/pull first
    slnsync -v update -s Sdk.sln -m .gitmodules
    slnsync submodules --format json
"""

from __future__ import annotations

import logging

import click
from rich.logging import RichHandler

from slnsync import __version__
from slnsync.cli.submodules_cmd import submodules_command
from slnsync.cli.update_cmd import update_command


def configure_logging(verbose: bool) -> None:
    """Route library logging through rich.

    Per-submodule warnings are reported by the commands themselves from the
    scan results, so library records below ERROR are only shown when verbose.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.ERROR,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(show_path=False, rich_tracebacks=True)],
        force=True,
    )


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable debug logging.")
def cli(verbose: bool) -> None:
    """slnsync: Regenerate a solution file from Git submodules.

    Discovers the submodules declared in the manifest, finds their project
    files and solution items, and nests them by category and submodule in
    the solution file.
    """
    configure_logging(verbose)


# Register all subcommands
cli.add_command(update_command)
cli.add_command(submodules_command)
