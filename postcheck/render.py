"""Output rendering and formatting utilities.

This module renders suite reports and scenario listings as rich tables,
JSON, or YAML.
"""

import sys
import json
import os
from typing import Any, Dict, List, Optional

import yaml
from rich.console import Console
from rich.table import Table
from rich import box

from .exceptions import ValidationError
from .runner import SuiteReport
from .scenarios import Scenario

FORMATS = ("table", "json", "yaml")

STATUS_STYLES = {
    "passed": "green",
    "failed": "red",
}


class OutputFormatter:
    """Renders data in table, JSON or YAML format."""

    def __init__(self, console: Optional[Console] = None) -> None:
        """Initialize output formatter.

        Args:
            console: Rich console instance. If None, creates a new one.
        """
        self.console = console or Console()

    def determine_format(self, format_override: Optional[str] = None) -> str:
        """Determine the output format to use.

        Args:
            format_override: Explicit format override

        Returns:
            Format name (table, json, yaml)

        Raises:
            ValidationError: If the format is not supported
        """
        if format_override:
            format_name = format_override.lower()
        elif os.environ.get("POSTCHECK_OUTPUT_FORMAT"):
            format_name = os.environ["POSTCHECK_OUTPUT_FORMAT"].lower()
        elif sys.stdout.isatty():
            format_name = "table"
        else:
            format_name = "json"

        if format_name not in FORMATS:
            raise ValidationError(f"Unknown output format: {format_name}")
        return format_name

    def render_json(self, data: Any, indent: int = 2) -> None:
        """Render data as JSON."""
        try:
            print(json.dumps(data, indent=indent, ensure_ascii=False, default=str))
        except (TypeError, ValueError) as e:
            raise ValidationError(f"Failed to serialize data to JSON: {e}")

    def render_yaml(self, data: Any) -> None:
        """Render data as YAML."""
        try:
            print(yaml.safe_dump(data, default_flow_style=False, allow_unicode=True, sort_keys=False), end="")
        except yaml.YAMLError as e:
            raise ValidationError(f"Failed to serialize data to YAML: {e}")

    def render_table(
        self,
        rows: List[Dict[str, Any]],
        columns: List[str],
        title: Optional[str] = None,
        styles: Optional[Dict[str, str]] = None,
    ) -> None:
        """Render rows as a rich table.

        Args:
            rows: Rows to render
            columns: Keys to show, in order
            title: Table title
            styles: Optional column styles
        """
        if not rows:
            self.console.print("[dim]No data to display[/dim]")
            return

        styles = styles or {}
        table = Table(title=title, box=box.ROUNDED)
        for column in columns:
            table.add_column(column.replace("_", " ").title(), style=styles.get(column))

        for row in rows:
            table.add_row(*[self._format_cell(column, row.get(column)) for column in columns])

        self.console.print(table)

    def _format_cell(self, column: str, value: Any) -> str:
        if value is None:
            return "-"
        if column == "status" and value in STATUS_STYLES:
            return f"[{STATUS_STYLES[value]}]{value}[/{STATUS_STYLES[value]}]"
        if column == "duration" and isinstance(value, float):
            return f"{value * 1000:.0f} ms"
        if isinstance(value, bool):
            return "yes" if value else "no"
        return str(value)

    def render_scenarios(self, scenarios: List[Scenario], format: Optional[str] = None) -> None:
        """Render the list of available scenarios."""
        rows = [
            {"number": s.number, "name": s.name, "title": s.title, "requires_session": s.requires_session}
            for s in scenarios
        ]

        format_name = self.determine_format(format)
        if format_name == "json":
            self.render_json(rows)
        elif format_name == "yaml":
            self.render_yaml(rows)
        else:
            self.render_table(
                rows,
                ["number", "name", "title", "requires_session"],
                title="Scenarios",
                styles={"number": "cyan", "name": "bold"},
            )

    def render_report(self, report: SuiteReport, format: Optional[str] = None) -> None:
        """Render a suite report."""
        format_name = self.determine_format(format)

        if format_name in ("json", "yaml"):
            data = report.summary()
            data["results"] = [r.model_dump(mode="json") for r in report.results]
            if format_name == "json":
                self.render_json(data)
            else:
                self.render_yaml(data)
            return

        self.console.print(f"[bold]Target:[/bold] {report.base_url}")
        if report.account:
            self.console.print(f"[bold]Account:[/bold] {report.account}")

        if report.aborted:
            self.console.print("[red]Suite aborted[/red]")
            self.console.print(report.setup_error, markup=False)
            return

        rows = [r.model_dump() for r in report.results]
        self.render_table(
            rows,
            ["number", "title", "status", "duration"],
            title=f"Results ({report.passed}/{len(report.results)} passed)",
            styles={"number": "cyan"},
        )

        for result in report.results:
            if not result.passed and result.error:
                self.console.print(f"[red]{result.number}. {result.title}[/red]")
                self.console.print(result.error, markup=False)
