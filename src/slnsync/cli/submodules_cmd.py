"""``slnsync submodules`` -- List the submodule paths declared in the manifest.

Prints one normalized path per line, sorted and without duplicates, the
same order the update command processes them in.

Exit Codes:
    0 -- At least one submodule listed.
    1 -- Manifest file missing.
    2 -- Manifest declares no submodule paths.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from slnsync.config import DEFAULT_MANIFEST_FILENAME
from slnsync.discovery.classify import classify_category
from slnsync.discovery.manifest import list_submodules


@click.command("submodules")
@click.option(
    "--manifest", "-m",
    type=click.Path(dir_okay=False, path_type=Path),
    default=DEFAULT_MANIFEST_FILENAME,
    show_default=True,
    help="Submodule manifest to read.",
)
@click.option(
    "--format", "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format: text (default) or json.",
)
def submodules_command(manifest: Path, output_format: str) -> None:
    """List the submodules declared in the manifest, with their category."""
    if not manifest.is_file():
        click.echo(f"Error: Submodule manifest not found: {manifest}", err=True)
        sys.exit(1)

    paths = list_submodules(manifest)
    if not paths:
        click.echo("No submodules declared in the manifest.")
        sys.exit(2)

    if output_format == "json":
        data = [{"path": p, "category": classify_category(p).value} for p in paths]
        click.echo(json.dumps(data, indent=2))
    else:
        for path in paths:
            click.echo(f"{classify_category(path).value:<11s} {path}")
