"""Rich output formatting helpers for the slnsync CLI.

Provides the dry-run structure preview, per-stage status summaries, and
the post-write result panel.

Style Mapping:
    category = bold magenta, folder = cyan, project = green,
    solution item = dim, warning = yellow
"""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.tree import Tree

from slnsync.core.hierarchy import SolutionModel, path_key
from slnsync.core.sync import Discovery, SyncResult
from slnsync.git import UpdateReport

console = Console()


def summary_counts(model: SolutionModel) -> dict[str, int]:
    """Count categories, non-category folders, projects, and items."""
    categories = len(model.categories)
    return {
        "categories": categories,
        "folders": len(model.folders) - categories,
        "projects": len(model.projects),
        "files": model.item_count,
    }


def format_summary(model: SolutionModel) -> str:
    """One-line summary, e.g. ``2 categories | 4 folders | 2 projects | 0 files``."""
    counts = summary_counts(model)
    return " | ".join(f"{value} {name}" for name, value in counts.items())


def build_preview_tree(model: SolutionModel, title: str = "Solution") -> Tree:
    """Build a rich ``Tree``: category -> folder -> subfolder -> file/project."""
    root = Tree(f"[bold]{escape(title)}[/bold]")
    branches: dict[str, Tree] = {}
    projects_by_folder: dict[str, list[str]] = {}
    for project in model.projects:
        projects_by_folder.setdefault(path_key(project.folder.path), []).append(project.path)

    for folder in model.folders:
        parent = root if folder.parent is None else branches[path_key(folder.parent.path)]
        style = "bold magenta" if folder.parent is None else "cyan"
        branch = parent.add(f"[{style}]{escape(folder.name)}[/{style}]")
        branches[path_key(folder.path)] = branch

    for folder in model.folders:
        branch = branches[path_key(folder.path)]
        for item in model.items_for(folder):
            branch.add(f"[dim]{escape(item.path)}[/dim]")
        for project_path in projects_by_folder.get(path_key(folder.path), []):
            branch.add(f"[green]{escape(project_path)}[/green]")
    return root


def print_discovery_summary(discovery: Discovery) -> None:
    """Print per-submodule category, project and file counts."""
    table = Table(title="Submodules", show_header=True, header_style="bold")
    table.add_column("Submodule", style="bold")
    table.add_column("Category")
    table.add_column("Projects", justify="right")
    table.add_column("Files", justify="right")
    for scan in discovery.scans:
        projects = str(len(scan.projects)) if scan.exists else "[yellow]missing[/yellow]"
        table.add_row(
            escape(scan.submodule), scan.category.value, projects, str(len(scan.items)),
        )
    console.print(table)


def print_preview(model: SolutionModel, title: str) -> None:
    """Print the dry-run structure preview and summary line."""
    console.print(build_preview_tree(model, title))
    console.print(f"[bold]Summary:[/bold] {format_summary(model)}")


def print_update_report(report: UpdateReport) -> None:
    """Print the submodules that were updated. Failures are echoed as warnings."""
    for submodule, branch in report.updated.items():
        console.print(f"  [green]updated[/green] {escape(submodule)} ({escape(branch)})")


def print_sync_result(result: SyncResult) -> None:
    """Print the post-write panel."""
    if result.mode == "rewrite":
        title = "Solution rewritten"
    elif result.written:
        title = "Solution patched"
    else:
        title = "Solution up to date"
    body = (
        f"Folders added: [bold]{result.added_folders}[/bold]\n"
        f"Projects added: [bold]{result.added_projects}[/bold]\n"
        f"Items added: [bold]{result.added_items}[/bold]"
    )
    if result.backup is not None:
        body += f"\nBackup: {escape(str(result.backup))}"
    console.print(Panel(body, title=title))
    console.print(f"[bold]Summary:[/bold] {format_summary(result.model)}")
