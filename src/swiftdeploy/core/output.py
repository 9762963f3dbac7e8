"""Terminal rendering for swiftdeploy commands.

Deployment progress, single records and history all go through
:class:`OutputFormatter`, which prints Rich tables by default and plain
JSON/YAML/raw data when another format is selected.
"""

import json
from enum import Enum
from typing import Any

import yaml
from rich.console import Console
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table

from swiftdeploy.deploy.models import Deployment, DeploymentPhase, DeploymentStatus

console = Console()
error_console = Console(stderr=True)


class OutputFormat(str, Enum):
    """Supported output formats."""

    TABLE = "table"
    JSON = "json"
    YAML = "yaml"
    RAW = "raw"


def format_duration(seconds: float | None) -> str:
    """Format seconds to human-readable duration."""
    if seconds is None:
        return "-"
    if seconds < 60:
        return f"{seconds:.1f}s"
    elif seconds < 3600:
        return f"{seconds / 60:.1f}m"
    return f"{seconds / 3600:.1f}h"


def format_result(status: DeploymentStatus) -> str:
    """Rich markup for how a deployment ended."""
    if status.phase == DeploymentPhase.SUCCEEDED:
        return "[green]succeeded[/green]"
    if status.phase == DeploymentPhase.FAILED:
        return f"[red]{escape(status.reason or 'failed')}[/red]"
    return status.phase.value


class OutputFormatter:
    """Handles output formatting for CLI commands."""

    def __init__(
        self,
        format: OutputFormat = OutputFormat.TABLE,
        color: bool = True,
        quiet: bool = False,
    ):
        self.format = format
        self.color = color
        self.quiet = quiet
        self._console = Console(force_terminal=color, no_color=not color)

    @property
    def is_table(self) -> bool:
        return self.format == OutputFormat.TABLE

    def print(self, message: str, style: str | None = None) -> None:
        """Print a message to stdout."""
        if self.quiet:
            return
        self._console.print(message, style=style)

    def print_error(self, message: str) -> None:
        """Print an error message to stderr."""
        error_console.print(f"[red]Error:[/red] {message}")

    def print_success(self, message: str) -> None:
        if self.quiet:
            return
        self._console.print(f"[green]✓[/green] {message}")

    def print_info(self, message: str) -> None:
        if self.quiet:
            return
        self._console.print(f"[blue]ℹ[/blue] {message}")

    # Deployment rendering

    def print_status(self, status: DeploymentStatus) -> None:
        """Print one progress line of a running deployment.

        Terminal statuses are left to :meth:`print_outcome`.
        """
        if not status.is_terminal:
            self.print(f"[dim]{escape(status.message)}[/dim]")

    def print_outcome(self, status: DeploymentStatus, deployment: Deployment | None = None) -> None:
        """Print how a deployment ended; failures go to stderr."""
        if status.phase != DeploymentPhase.SUCCEEDED:
            self.print_error(escape(status.reason or status.message))
            return

        line = status.message
        if deployment is not None:
            line += f" ({deployment.owner}/{deployment.repository}, deployment {deployment.id})"
        self.print_success(escape(line))

    def print_deployment(self, deployment: Deployment) -> None:
        """Print a recorded deployment with its event log."""
        if not self.is_table:
            self.print_data(deployment.to_dict())
            return

        self.print_data(
            {
                "ID": deployment.id,
                "Repository": f"{deployment.owner}/{deployment.repository}",
                "Status": deployment.status.message,
                "Created": deployment.created_at.strftime("%Y-%m-%d %H:%M:%S"),
                "Duration": format_duration(deployment.duration_seconds),
            },
            title=f"Deployment {deployment.id}",
        )

        if deployment.events:
            self.print_data(
                [
                    {
                        "Time": e.timestamp.strftime("%H:%M:%S"),
                        "Phase": e.phase.value,
                        "Message": e.message,
                    }
                    for e in deployment.events
                ],
                headers=["Time", "Phase", "Message"],
                title="Events",
            )

    def print_history(self, deployments: list[Deployment]) -> None:
        """Print a list of recorded deployments, in the order given."""
        if not deployments:
            self.print_info("No deployments recorded")
            return

        if not self.is_table:
            self.print_data([d.to_dict() for d in deployments])
            return

        rows = [
            {
                "ID": d.id,
                "Repository": f"{d.owner}/{d.repository}",
                "Result": format_result(d.status),
                "Created": d.created_at.strftime("%Y-%m-%d %H:%M"),
                "Duration": format_duration(d.duration_seconds),
            }
            for d in deployments
        ]
        self.print_data(
            rows,
            headers=["ID", "Repository", "Result", "Created", "Duration"],
            title=f"Deployments ({len(rows)} shown)",
        )

    # Generic data

    def print_data(
        self,
        data: list[dict[str, Any]] | dict[str, Any],
        headers: list[str] | None = None,
        title: str | None = None,
    ) -> None:
        """Print data in the configured format."""
        if self.format == OutputFormat.JSON:
            self._print_serialized(json.dumps(data, indent=2, default=str), "json")
        elif self.format == OutputFormat.YAML:
            self._print_serialized(
                yaml.safe_dump(data, default_flow_style=False, allow_unicode=True), "yaml"
            )
        elif self.format == OutputFormat.RAW:
            self._print_raw(data)
        else:
            self._print_table(data, headers, title)

    def _print_serialized(self, text: str, lexer: str) -> None:
        # Plain print keeps the output machine-readable when color is off
        if self.color:
            self._console.print(Syntax(text, lexer, theme="monokai"))
        else:
            print(text)

    @staticmethod
    def _print_raw(data: Any) -> None:
        if isinstance(data, dict):
            for key, value in data.items():
                print(f"{key}: {value}")
        else:
            for item in data:
                print(item)

    def _print_table(
        self,
        data: list[dict[str, Any]] | dict[str, Any],
        headers: list[str] | None,
        title: str | None,
    ) -> None:
        if isinstance(data, dict):
            headers = ["Field", "Value"]
            rows = [[str(k), str(v)] for k, v in data.items()]
        elif data:
            headers = headers or list(data[0].keys())
            rows = [[str(row.get(h, "")) for h in headers] for row in data]
        else:
            self._console.print("[dim]No data to display[/dim]")
            return

        table = Table(title=title, show_header=True, header_style="bold cyan")
        for header in headers:
            table.add_column(header)
        for row in rows:
            table.add_row(*row)
        self._console.print(table)
