"""Console summary of a run's visual results."""

from __future__ import annotations

from rich.console import Console
from rich.table import Table

from acme_visual.models.results import RunResults

_STATUS_STYLES = {
    "passed": "green",
    "failed": "red",
    "unresolved": "yellow",
    "pending": "blue",
    "aborted": "red",
}


def build_results_table(results: RunResults) -> Table:
    table = Table(title=f"Visual test results: {results.batch_name}")
    table.add_column("Test", style="bold")
    table.add_column("Status")
    table.add_column("Checkpoints")
    table.add_column("Dashboard")
    for r in results.session_results:
        style = _STATUS_STYLES.get(r.status, "white")
        checkpoints = ", ".join(f"{c.label} ({c.status})" for c in r.checkpoints) or "-"
        table.add_row(r.test_name or "?", f"[{style}]{r.status}[/{style}]", checkpoints, r.url or "-")
    return table


def print_results(results: RunResults, console: Console | None = None) -> None:
    console = console or Console()
    console.print(build_results_table(results))
    console.print(results.summary_text())
    if results.pending:
        console.print(
            "[blue]Some checkpoints were still pending when results were collected; "
            "see the dashboard for final outcomes.[/blue]"
        )
