"""Console output for samplepush.

Upload progress goes to the log stream; this module renders the end-of-run
summary (a counts panel plus a table of failed samples, or JSON) and the
one-line status messages the CLI prints around it.
"""

from __future__ import annotations

import json
from enum import Enum
from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from samplepush.models.progress import RunSummary, UploadOutcome

# =============================================================================
# Console Instances
# =============================================================================

console = Console()
err_console = Console(stderr=True)


class OutputFormat(Enum):
    """Summary rendering modes."""

    JSON = "json"
    TABLE = "table"

    @classmethod
    def from_string(cls, value: str) -> OutputFormat:
        return cls(value.lower())


# =============================================================================
# Run Summary
# =============================================================================


def summary_counts_table(summary: RunSummary) -> Table:
    """Two-column grid of run totals."""
    grid = Table.grid(padding=(0, 2))
    grid.add_column(style="bold")
    grid.add_column(justify="right")

    grid.add_row("Dispatched", str(summary.dispatched))
    grid.add_row("Succeeded", f"[green]{summary.succeeded}[/green]")
    failed_style = "red" if summary.failed else "green"
    grid.add_row("Failed", f"[{failed_style}]{summary.failed}[/{failed_style}]")
    grid.add_row("Skipped", str(summary.skipped))
    grid.add_row("Success rate", f"{summary.success_rate:.1f}%")
    grid.add_row("Duration", f"{summary.duration:.2f}s")
    if summary.aborted:
        grid.add_row("Aborted", "[red]Yes[/red]")
    return grid


def failures_table(outcomes: list[UploadOutcome]) -> Table | None:
    """Table of failed samples, or None when every upload succeeded."""
    failed = [o for o in outcomes if not o.success]
    if not failed:
        return None

    table = Table(title="Failed samples", show_header=True, header_style="bold")
    table.add_column("Sample", overflow="fold")
    table.add_column("Status", justify="right")
    table.add_column("Error", overflow="fold")

    for outcome in failed:
        status = str(outcome.status_code) if outcome.completed else "-"
        table.add_row(Text(outcome.reference), status, Text(outcome.error))
    return table


def print_summary(summary: RunSummary, output_format: OutputFormat = OutputFormat.TABLE) -> None:
    """Render the end-of-run summary.

    JSON goes to stdout as a single document including every outcome. The
    table form prints a status line, the totals and any failed samples.
    """
    if output_format == OutputFormat.JSON:
        print_json(summary.to_dict())
        return

    if summary.success:
        print_success(f"Uploaded {summary.succeeded} samples")
    elif summary.aborted:
        print_warning("Run aborted after the first failed upload")
    else:
        print_warning(f"{summary.failed} of {summary.dispatched} uploads failed")

    console.print(summary_counts_table(summary))

    table = failures_table(summary.outcomes)
    if table is not None:
        console.print(table)

    # Errors with no outcome behind them, e.g. a failed directory walk
    failed_refs = {o.reference for o in summary.outcomes if not o.success}
    for error in summary.errors:
        if not any(error.startswith(f"{ref}: ") for ref in failed_refs):
            print_error(error)


def print_json(data: Any, *, indent: int = 2) -> None:
    """Print data as JSON."""
    print(json.dumps(data, indent=indent, default=str))


# =============================================================================
# Status Messages
# =============================================================================


def print_error(message: str) -> None:
    """Print error message to stderr."""
    err_console.print(f"[red]Error:[/red] {escape(message)}", highlight=False)


def print_warning(message: str) -> None:
    err_console.print(f"[yellow]Warning:[/yellow] {escape(message)}", highlight=False)


def print_success(message: str) -> None:
    console.print(f"[green]✓[/green] {escape(message)}")
