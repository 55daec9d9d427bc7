"""CLI output formatting utilities for remoteclick.

This module provides the OutputFormatter class for displaying outcomes of
the run, info and health commands, either as rich text or as the same JSON
the HTTP service returns.
"""

import json
from typing import Any

from rich.console import Console

from remoteclick.core.protocols import LivenessReport, Outcome

RULE = "=" * 60


class OutputFormatter:
    """Formats and displays CLI output.

    Attributes:
        console: Rich console that receives all output.
        as_json: Print wire-format JSON instead of formatted text.
    """

    def __init__(self, console: Console | None = None, as_json: bool = False):
        """Initialize the output formatter.

        Args:
            console: Console to print to. Defaults to a new stdout console.
            as_json: Print JSON only. Defaults to False.
        """
        self.console = console or Console()
        self.as_json = as_json

    def show_outcome(self, outcome: Outcome, title: str) -> None:
        """Show a run or probe outcome.

        Args:
            outcome: The outcome to display.
            title: Heading for the success banner (e.g. "CLICK SUCCEEDED").
        """
        if self.as_json:
            self.show_json(outcome.to_dict())
        elif outcome.success:
            self.show_success(outcome, title)
        else:
            self.show_failure(outcome)

    def show_success(self, outcome: Outcome, title: str) -> None:
        """Show success banner with the result fields."""
        assert outcome.result is not None
        self.console.print(RULE)
        self.console.print(f"[green]✓ {title}[/green]")
        self.console.print(RULE)
        self._show_fields(outcome.result.to_dict())
        self.console.print(RULE)

    def show_failure(self, outcome: Outcome) -> None:
        """Show failure message with diagnostics and hint."""
        failure = outcome.failure
        assert failure is not None
        self.console.print(RULE)
        self.console.print(f"[red]✗ FAILED ({failure.kind.value})[/red]")
        self.console.print(RULE)
        self.console.print(f"Error: {failure.message}", markup=False)
        self._show_fields(failure.details)
        if failure.hint:
            self.console.print(f"\n[yellow]Hint:[/yellow] {failure.hint}")
        self.console.print(RULE)

    def show_health(self, report: LivenessReport) -> None:
        if self.as_json:
            self.show_json(report.to_dict())
        elif report.ok:
            self.console.print(
                f"[green]✓ Browser executable:[/green] {report.executable}"
            )
        else:
            self.console.print("[red]✗ No usable browser executable.[/red] Checked:")
            for candidate in report.candidates:
                self.console.print(f"  - {candidate}", markup=False)

    def show_json(self, data: dict[str, Any]) -> None:
        # Plain print keeps the output machine-readable (no wrapping or markup).
        print(json.dumps(data, indent=2))

    def _show_fields(self, fields: dict[str, Any]) -> None:
        for key, value in fields.items():
            shown = "-" if value is None else value
            self.console.print(f"{key}: {shown}", markup=False)
