"""Main Typer application for the postcheck CLI.

Provides the ``run`` command that verifies an API against the posts
contract and the ``list`` command that shows the available scenarios.
"""

import sys
from functools import wraps
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console

from . import __version__
from .exceptions import ConfigError, PostCheckError, format_error_for_user
from .render import OutputFormatter
from .runner import ScenarioResult, SuiteRunner
from .scenarios import all_scenarios, select_scenarios
from .utils.client_factory import get_client_and_formatter, settings_from_context

EXIT_FAILED = 1
EXIT_ABORTED = 2
EXIT_CONFIG = 3

app = typer.Typer(
    name="postcheck",
    help="Verify a REST API against the posts CRUD contract",
    context_settings={"help_option_names": ["-h", "--help"]},
    no_args_is_help=True,
    rich_markup_mode="rich",
)

console = Console()


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        typer.echo(f"postcheck {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Print requests, responses and full error details",
    ),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """postcheck - black-box contract checks for a posts REST API.

    Examples:
        # Run every scenario against the default http://localhost:3000
        postcheck run

        # Run scenarios 5 and 10 against another host, as JSON
        postcheck run --base-url http://api.test:3000 --only 5 --only 10 -o json
    """
    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug
    ctx.obj["console"] = console

    if debug:
        console.print("[dim]Debug mode enabled[/dim]")


def handle_exceptions(func):
    """Decorator to handle common exceptions in commands."""
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except typer.Exit:
            raise
        except ConfigError as e:
            console.print(format_error_for_user(e), style="red", markup=False)
            raise typer.Exit(EXIT_CONFIG)
        except PostCheckError as e:
            ctx = kwargs.get("ctx")
            debug = ctx.obj.get("debug", False) if ctx is not None and ctx.obj else False
            console.print(format_error_for_user(e, debug), style="red", markup=False)
            if not debug:
                console.print("[dim]Use --debug for more details[/dim]")
            raise typer.Exit(EXIT_FAILED)
        except KeyboardInterrupt:
            console.print("\n[yellow]Operation cancelled by user[/yellow]")
            raise typer.Exit(130)
    return wrapper


@app.command()
@handle_exceptions
def run(
    ctx: typer.Context,
    base_url: Optional[str] = typer.Option(
        None, "--base-url", "-u", help="Base URL of the API (default http://localhost:3000)"
    ),
    timeout: Optional[float] = typer.Option(None, "--timeout", help="Request timeout in seconds"),
    config_file: Optional[Path] = typer.Option(
        None, "--config", "-c", help="TOML file with a [postcheck] table", exists=True, dir_okay=False
    ),
    only: Optional[List[int]] = typer.Option(
        None, "--only", "-n", help="Run only this scenario number (repeatable)"
    ),
    output_format: Optional[str] = typer.Option(
        None, "--output", "-o", help="Output format (table, json, yaml)"
    ),
) -> None:
    """Register, log in, and run the contract scenarios."""
    settings = settings_from_context(ctx, base_url=base_url, timeout=timeout, config_file=config_file)
    scenarios = select_scenarios(only)
    client, formatter = get_client_and_formatter(ctx, settings)
    format_name = formatter.determine_format(output_format)

    def show_progress(result: ScenarioResult) -> None:
        mark = "[green]✓[/green]" if result.passed else "[red]✗[/red]"
        console.print(f"{mark} {result.number}. {result.title}")

    runner = SuiteRunner(
        client,
        scenarios=scenarios,
        debug=settings.debug,
        on_result=show_progress if format_name == "table" else None,
    )

    with client:
        report = runner.run()

    formatter.render_report(report, format=format_name)

    if report.aborted:
        raise typer.Exit(EXIT_ABORTED)
    if not report.ok:
        raise typer.Exit(EXIT_FAILED)


@app.command("list")
@handle_exceptions
def list_scenarios(
    ctx: typer.Context,
    output_format: Optional[str] = typer.Option(
        None, "--output", "-o", help="Output format (table, json, yaml)"
    ),
) -> None:
    """List the contract scenarios."""
    OutputFormatter(console).render_scenarios(all_scenarios(), format=output_format)


def cli():
    """Entry point for the CLI."""
    try:
        app()
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        sys.exit(130)


if __name__ == "__main__":
    cli()
