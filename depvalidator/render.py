"""
Rendering functions for depvalidator output.

This module handles all pretty-printing and table formatting.
Services return validation results, this module makes them human-readable.
"""

from rich.table import Table
from rich.console import Console
from rich.panel import Panel
from rich import box
from rich.markup import escape
from typing import List, Optional

from .domain import RepositoryValidation, ReleaseValidation

console = Console()


def _release_row(result: RepositoryValidation, release: ReleaseValidation) -> List[str]:
    """Build one table row for a release of a repository."""
    if release.component_valid:
        status = "[green]✅[/green]"
        component = release.component_kind.value
    else:
        status = "[red]❌[/red]"
        component = "Invalid"

    return [
        status,
        escape(result.repository),
        escape(release.tag),
        component,
        escape(release.matched_asset_name or ""),
        escape(", ".join(release.dependency_names)),
        escape("\n".join(release.errors)),
    ]


def render_validation_table(results: List[RepositoryValidation], title: Optional[str] = None) -> None:
    """
    Render validation results as a pretty table.

    Repositories without inspected releases get a single row with their
    repository-level errors.

    Args:
        results: Validation results to display
        title: Optional table title
    """
    if not results:
        console.print("[yellow]No repositories validated.[/yellow]")
        return

    table = Table(
        title=title or "Component Validation",
        box=box.ROUNDED,
        show_header=True,
        header_style="bold magenta"
    )

    table.add_column("", width=2)
    table.add_column("Repository", style="cyan")
    table.add_column("Release", style="green")
    table.add_column("Component", style="yellow")
    table.add_column("ZIP", style="dim")
    table.add_column("Dependencies", style="blue")
    table.add_column("Errors", style="red")

    for result in results:
        if not result.release_validations:
            table.add_row(
                "[red]❌[/red]", escape(result.repository), "", "", "", "",
                escape("\n".join(result.errors))
            )
            continue
        for release in result.release_validations:
            table.add_row(*_release_row(result, release))
        if not result.is_valid and result.errors:
            table.add_row("", "", "", "", "", "", escape("\n".join(result.errors)))

    console.print(table)


def render_summary(results: List[RepositoryValidation]) -> None:
    """
    Render the batch summary: counts, valid repositories with their
    component kinds and invalid repositories with their first error.
    """
    valid = [r for r in results if r.is_valid]
    invalid = [r for r in results if not r.is_valid]

    lines = [
        f"Total repositories: {len(results)}",
        f"[green]✅ Valid: {len(valid)}[/green]",
        f"[red]❌ Invalid: {len(invalid)}[/red]",
    ]

    if valid:
        lines.append("")
        lines.append("[bold]Valid repositories:[/bold]")
        for r in valid:
            kinds = ", ".join(kind.value for kind in r.valid_component_kinds)
            lines.append(f"  - {escape(r.repository)} ({kinds})")

    if invalid:
        lines.append("")
        lines.append("[bold]Invalid repositories:[/bold]")
        for r in invalid:
            reason = r.errors[0] if r.errors else "Unknown error"
            lines.append(f"  - {escape(r.repository)}: {escape(reason)}")

    console.print(Panel("\n".join(lines), title="Summary", box=box.ROUNDED))
