"""``slnsync update`` -- Regenerate the solution file from the submodules.

Reads the submodule manifest, optionally updates every submodule from its
remote, scans the submodule trees, and writes the solution file: a full
rewrite with ``--clean`` (or when the file does not exist yet), an
incremental patch otherwise. ``--dry-run`` prints the computed structure
and writes nothing.

Exit Codes:
    0 -- Solution written, patched, already up to date, or previewed.
    1 -- Configuration or structural error (missing manifest, invalid
         config, unparseable solution file, failed backup or write).
    2 -- No submodules declared, or no projects found in any submodule.
"""

from __future__ import annotations

import sys
from pathlib import Path

import click

from slnsync.config import (
    DEFAULT_CONFIG_FILENAME,
    DEFAULT_MANIFEST_FILENAME,
    DEFAULT_SOLUTION_FILENAME,
    load_config,
)
from slnsync.core.sync import SolutionSync
from slnsync.exceptions import SlnSyncError

EXIT_ERROR = 1
EXIT_NOTHING_FOUND = 2


def _fail(message: str, code: int = EXIT_ERROR) -> None:
    click.echo(f"Error: {message}", err=True)
    sys.exit(code)


def _warn(message: str) -> None:
    click.echo(f"Warning: {message}", err=True)


def _run_update(
    solution: Path,
    manifest: Path,
    config_path: Path | None,
    dry_run: bool,
    update_submodules: bool,
    clean: bool,
) -> None:
    """Run one sync pass; see the module docstring for exit codes."""
    from slnsync.cli.output import (
        print_discovery_summary,
        print_preview,
        print_sync_result,
        print_update_report,
    )

    config = load_config(
        config_path or manifest.parent / DEFAULT_CONFIG_FILENAME,
        required=config_path is not None,
    )
    sync = SolutionSync(config)

    submodules = sync.list_submodules(manifest)
    if not submodules:
        _fail(f"No submodules declared in {manifest}", EXIT_NOTHING_FOUND)
    click.echo(f"Found {len(submodules)} submodule(s) in {manifest}")

    if update_submodules:
        from slnsync.git import SubmoduleUpdater

        click.echo("Updating submodules...")
        report = SubmoduleUpdater().update_all(manifest.resolve().parent, submodules)
        if report.init_error:
            _warn(f"submodule initialization failed: {report.init_error}")
        for submodule, error in report.failed.items():
            _warn(f"failed to update {submodule}: {error}")
        print_update_report(report)

    discovery = sync.discover(manifest, solution)
    for submodule in discovery.missing:
        _warn(f"submodule directory not found: {submodule}")
    for submodule in discovery.empty:
        _warn(f"no projects found in submodule: {submodule}")
    print_discovery_summary(discovery)

    if discovery.project_count == 0:
        _fail("No projects found in any submodule; solution not modified", EXIT_NOTHING_FOUND)
    click.echo(f"Found {discovery.project_count} project(s)")

    if dry_run:
        model = sync.build(discovery)
        print_preview(model, solution.name)
        click.echo("Dry run: no files were written.")
        return

    result = sync.apply(discovery, solution, mode="rewrite" if clean else "auto")
    print_sync_result(result)


@click.command("update")
@click.option(
    "--solution", "-s",
    type=click.Path(dir_okay=False, path_type=Path),
    default=DEFAULT_SOLUTION_FILENAME,
    show_default=True,
    help="Solution file to write or patch.",
)
@click.option(
    "--manifest", "-m",
    type=click.Path(dir_okay=False, path_type=Path),
    default=DEFAULT_MANIFEST_FILENAME,
    show_default=True,
    help="Submodule manifest to read.",
)
@click.option(
    "--config", "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help=f"YAML config file (default: {DEFAULT_CONFIG_FILENAME} next to the manifest, if present).",
)
@click.option(
    "--dry-run",
    is_flag=True,
    default=False,
    help="Print the computed structure without writing anything.",
)
@click.option(
    "--update-submodules",
    is_flag=True,
    default=False,
    help="Fetch, check out, and pull every submodule before scanning.",
)
@click.option(
    "--clean",
    is_flag=True,
    default=False,
    help="Rewrite the whole solution instead of patching it (backs up the old file).",
)
def update_command(
    solution: Path,
    manifest: Path,
    config_path: Path | None,
    dry_run: bool,
    update_submodules: bool,
    clean: bool,
) -> None:
    """Regenerate the solution file from the declared submodules.

    Scans every submodule listed in the manifest for project files and
    auxiliary solution items, nests them under category and submodule
    folders, and writes the result to the solution file.

    Exit code 0 on success, 1 on errors, 2 if nothing was found.
    """
    try:
        _run_update(solution, manifest, config_path, dry_run, update_submodules, clean)
    except SlnSyncError as exc:
        _fail(str(exc))
    except OSError as exc:
        _fail(f"{exc.strerror or exc}: {exc.filename or solution}")
