"""Rich output formatting helpers for the vim-flavor CLI.

Status colors:
    new = green, upgraded/changed = yellow, removed = red, unchanged = dim
"""

from __future__ import annotations

from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from vimflavor.core.lockfile import Lockfile

console = Console()
err_console = Console(stderr=True)


def _status(repo_uri: str, diff: dict[str, Any]) -> Text:
    if repo_uri in diff["added"]:
        return Text("new", style="green")
    for change in diff["changed"]:
        if change["repo_uri"] == repo_uri:
            return Text(f"{change['old']} -> {change['new']}", style="yellow")
    return Text("unchanged", style="dim")


def print_lock_summary(lockfile: Lockfile, diff: dict[str, Any]) -> None:
    """Print one row per locked flavor, with what changed since the last lock.

    Args:
        lockfile: The lockfile just written.
        diff: ``previous.diff(lockfile)``.
    """
    if lockfile.flavor_count == 0 and not diff["removed"]:
        console.print("[dim]No flavors declared.[/dim]")
        return

    table = Table(title="Flavors", show_header=True, header_style="bold")
    table.add_column("Flavor", style="bold")
    table.add_column("Constraint", style="dim")
    table.add_column("Version", justify="right")
    table.add_column("Status", justify="center")
    table.add_column("Groups", style="dim")

    for flavor in sorted(lockfile, key=lambda f: f.repo_name):
        table.add_row(
            escape(flavor.repo_name),
            flavor.version_constraint,
            flavor.locked_version.text,
            _status(flavor.repo_uri, diff),
            ", ".join(flavor.groups),
        )
    for repo_uri in diff["removed"]:
        table.add_row(escape(repo_uri), "-", "-", Text("removed", style="red"), "-")

    console.print(table)


def print_runtimepath(entries: list[str]) -> None:
    """Print runtimepath entries, one per line, in order."""
    for entry in entries:
        console.print(entry, markup=False, highlight=False, soft_wrap=True)


def print_error(message: str) -> None:
    """Print an error message to stderr."""
    err_console.print(
        f"[bold red]Error:[/bold red] {escape(message)}", highlight=False, soft_wrap=True
    )
