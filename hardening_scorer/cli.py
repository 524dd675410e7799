"""
Command Line Interface for the hardening scorer.

Provides commands to score the live system and to inspect the
configured checks.
"""

import json
import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from . import __version__
from .core.exceptions import ScorerError
from .core.orchestrator import HardeningScorer
from .core.scoring import max_points


console = Console()


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True
    )


@click.group()
@click.version_option(version=__version__)
@click.option('--config', '-c', help="Path to YAML settings file")
@click.option('--verbose', '-v', is_flag=True, help="Enable verbose output")
@click.pass_context
def cli(ctx, config: Optional[str], verbose: bool):
    """
    Hardening Scorer

    Scores a live system against declarative hardening checks.
    """
    _setup_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj['config'] = config
    ctx.obj['verbose'] = verbose

    if 'scorer' not in ctx.obj:
        try:
            ctx.obj['scorer'] = HardeningScorer(config_path=config)
        except Exception as e:
            console.print(f"[red]Failed to initialize scorer: {e}[/red]")
            sys.exit(1)


@cli.command()
@click.option('--checks', help="Path to the JSON checks file")
@click.option('--output', '-o', help="Output file for the report (JSON format)")
@click.option('--format', type=click.Choice(['json', 'table', 'summary']),
              default='table', help="Output format")
@click.pass_context
def score(ctx, checks: Optional[str], output: Optional[str], format: str):
    """
    Score the live system.

    Evaluates every configured check once and prints the points earned.
    """
    scorer: HardeningScorer = ctx.obj['scorer']

    try:
        report = scorer.score(checks_path=checks)
    except ScorerError as e:
        console.print(f"[red]Scoring failed: {e}[/red]")
        sys.exit(1)

    if format == 'summary':
        _display_summary(report)
    elif format == 'json':
        click.echo(report.model_dump_json(indent=2))
    else:
        _display_table(report)

    if output:
        _save_json_report(report, output)
        console.print(f"\n[green]Report saved to: {output}[/green]")


@cli.group()
def checks():
    """Inspect configured checks."""
    pass


@checks.command('list')
@click.option('--checks', 'checks_path', help="Path to the JSON checks file")
@click.pass_context
def list_checks(ctx, checks_path: Optional[str]):
    """List configured checks."""
    scorer: HardeningScorer = ctx.obj['scorer']

    try:
        loaded = scorer.load_checks(checks_path)
    except ScorerError as e:
        console.print(f"[red]Failed to list checks: {e}[/red]")
        sys.exit(1)

    table = Table(title="Configured Checks")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Kind")
    table.add_column("Points", justify="right")
    table.add_column("Parameters")

    for index, check in enumerate(loaded):
        params = check.kind.model_dump(exclude={"type"})
        table.add_row(
            str(index),
            check.kind.type,
            str(check.points),
            ", ".join(f"{k}={v}" for k, v in params.items())
        )

    console.print(table)


@checks.command('max-points')
@click.option('--checks', 'checks_path', help="Path to the JSON checks file")
@click.pass_context
def show_max_points(ctx, checks_path: Optional[str]):
    """Print the maximum possible score."""
    scorer: HardeningScorer = ctx.obj['scorer']

    try:
        loaded = scorer.load_checks(checks_path)
    except ScorerError as e:
        console.print(f"[red]Failed to load checks: {e}[/red]")
        sys.exit(1)

    click.echo(max_points(loaded))


def _display_summary(report):
    """Display a summary of a scoring pass."""
    table = Table(title="Score Summary")
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")

    table.add_row("Score", f"{report.awarded_points}/{report.max_points}")
    table.add_row("Total Checks", str(report.total_checks))
    table.add_row("Passed", f"[green]{report.passed_checks}[/green]")
    table.add_row("Failed", f"[red]{report.failed_checks}[/red]" if report.failed_checks else "0")
    table.add_row("Errors", f"[yellow]{report.error_checks}[/yellow]" if report.error_checks else "0")

    console.print(table)

    if report.error_checks:
        console.print("\n[yellow bold]Checks that could not be evaluated:[/yellow bold]")
        for outcome in report.outcomes:
            if outcome.error:
                console.print(f"  • #{outcome.index} {outcome.kind}: {outcome.error}")


def _display_table(report):
    """Display per-check outcomes in table format."""
    if report.system_info:
        console.print(Panel(
            f"OS: {report.system_info.os_type.value} {report.system_info.os_version}\n"
            f"Hostname: {report.system_info.hostname}",
            title="System Information"
        ))

    table = Table(title="Check Results")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Kind")
    table.add_column("Status")
    table.add_column("Points", justify="right")
    table.add_column("Message", max_width=50)

    for outcome in report.outcomes:
        status_color = {
            "pass": "green",
            "fail": "red",
            "error": "yellow",
        }.get(outcome.status.value, "white")

        table.add_row(
            str(outcome.index),
            outcome.kind,
            f"[{status_color}]{outcome.status.value.upper()}[/{status_color}]",
            str(outcome.points),
            outcome.message
        )

    console.print(table)
    _display_summary(report)


def _save_json_report(report, output_path: str):
    """Save a report to a JSON file."""
    output_file = Path(output_path)
    output_file.parent.mkdir(parents=True, exist_ok=True)

    with open(output_file, 'w') as f:
        json.dump(report.model_dump(mode="json"), f, indent=2)


def main():
    """Main CLI entry point."""
    cli()


if __name__ == "__main__":
    main()
