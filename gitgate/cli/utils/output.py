"""Output formatting utilities for CLI."""

import json
from enum import Enum
from typing import Any, Dict, List, Optional

import yaml
from rich.console import Console
from rich.table import Table

from gitgate.core.results import RunResult, format_report


class OutputFormat(Enum):
    """Output format options."""

    TEXT = "text"
    JSON = "json"
    YAML = "yaml"


class OutputFormatter:
    """Handle output formatting for different formats."""

    def __init__(self, format_type: str = "text", console: Optional[Console] = None):
        """
        Initialize output formatter.

        Args:
            format_type: Output format (text, json, yaml)
            console: Console to write to; hook diagnostics belong on stderr
        """
        self.console = console or Console(stderr=True)
        try:
            self.format = OutputFormat(format_type.lower())
        except ValueError:
            self.format = OutputFormat.TEXT

    def _print_plain(self, text: str):
        self.console.print(text, markup=False, highlight=False, emoji=False, soft_wrap=True)

    def _print_structured(self, data: Any):
        if self.format == OutputFormat.JSON:
            self._print_plain(json.dumps(data, indent=2, default=str))
        else:
            self._print_plain(yaml.safe_dump(data, default_flow_style=False, sort_keys=False))

    def print_report(self, result: RunResult, verbose: bool = False):
        """
        Print the outcome of a hook run.

        Text output is silent for accepted runs unless verbose is set.
        """
        if self.format != OutputFormat.TEXT:
            self._print_structured(result.to_dict())
            return

        if verbose:
            for verdict in result.verdicts:
                target = f" {verdict.target}" if verdict.target else ""
                message = f": {verdict.message}" if verdict.message else ""
                self._print_plain(f"{verdict.status.value:5} [{verdict.plugin_name}]{target}{message}")

        for line in format_report(result):
            self._print_plain(line)

    def print_list(
        self,
        items: List[Dict[str, Any]],
        columns: Optional[List[str]] = None,
        title: Optional[str] = None,
    ):
        """
        Print a list of items.

        Args:
            items: List of items to print
            columns: Column names to display (for text format)
            title: Table title (for text format)
        """
        if not items:
            self.console.print("[dim]No items found[/dim]")
            return

        if self.format != OutputFormat.TEXT:
            self._print_structured(items)
            return

        if not columns:
            columns = list(items[0].keys())

        table = Table(title=title)
        for col in columns:
            table.add_column(col.replace("_", " ").title())

        for item in items:
            row = []
            for col in columns:
                value = item.get(col, "")
                if value is None:
                    value = "[dim]-[/dim]"
                elif isinstance(value, bool):
                    value = "[green]✓[/green]" if value else "[red]✗[/red]"
                elif isinstance(value, (list, tuple)):
                    value = ", ".join(str(v) for v in value)
                else:
                    value = str(value)
                row.append(value)
            table.add_row(*row)

        self.console.print(table)

    def print_success(self, message: str):
        """Print success message."""
        if self.format != OutputFormat.TEXT:
            self._print_structured({"status": "success", "message": message})
        else:
            self.console.print(f"[green]✓[/green] {message}")

    def print_error(self, message: str):
        """Print error message."""
        if self.format != OutputFormat.TEXT:
            self._print_structured({"status": "error", "message": message})
        else:
            self.console.print("[red]✗[/red] ", end="")
            self._print_plain(message)

    def print_warning(self, message: str):
        """Print warning message."""
        if self.format != OutputFormat.TEXT:
            self._print_structured({"status": "warning", "message": message})
        else:
            self.console.print(f"[yellow]⚠[/yellow] {message}")
