#!/usr/bin/env python3
"""
Threadrunner CLI

Command line interface for running dependency-gated task sets from a task
file and for checking task files before running them.
"""

import json
import logging
import sys
from pathlib import Path
from typing import Optional, Tuple

import click
from rich.console import Console
from rich.table import Table

from threadrunner import __version__
from threadrunner.config import RunnerConfig, load_config, setup_logging
from threadrunner.core.coordinator import run_tasks
from threadrunner.core.errors import ThreadRunnerError
from threadrunner.core.models import RunReport
from threadrunner.core.reporter import ConsoleReporter, NullReporter
from threadrunner.core.task_loader import (
    TaskLoadResult,
    find_missing_predecessors,
    load_tasks_from_file,
    validate_tasks,
)
from threadrunner.core.work import FaultInjectingWork, SimulatedWork

logger = logging.getLogger(__name__)


@click.group()
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.option('--debug', is_flag=True, help='Enable debug logging')
@click.option('--config', 'config_file', type=click.Path(dir_okay=False),
              help='YAML config file (default: ~/.threadrunner/config.yaml)')
@click.version_option(version=__version__, prog_name='Threadrunner')
@click.pass_context
def cli(ctx: click.Context, verbose: bool, debug: bool, config_file: Optional[str]):
    """
    Threadrunner - run timed tasks concurrently, each optionally blocked by another

    Task files list one task per line as ``id,seconds[,blocking_id]``, or a
    ``tasks`` list in YAML/JSON.
    """
    try:
        config = load_config(config_file)
        if debug:
            config = config.merged(log_level='DEBUG')
        elif verbose:
            config = config.merged(log_level='INFO')
        config.validate()
    except ThreadRunnerError as e:
        raise click.ClickException(str(e))

    setup_logging(config)
    ctx.obj = config


def _load(task_file: str) -> Optional[TaskLoadResult]:
    """Load a task file, echoing problems; None means nothing usable was loaded"""
    try:
        result = load_tasks_from_file(task_file)
    except ThreadRunnerError as e:
        click.echo(f"Error: {e}", err=True)
        return None

    for diagnostic in result.diagnostics:
        click.echo(f"⚠️  {diagnostic}", err=True)

    if not result.records:
        click.echo("No task definitions found in the task file.", err=True)
        return None

    return result


def _print_summary(report: RunReport, console: Console):
    """Display per-task outcomes in a table"""
    table = Table(title="Task Outcomes", show_header=True)
    table.add_column("Task", style="yellow")
    table.add_column("State", style="cyan")
    table.add_column("Details", style="white")

    for outcome in report.outcomes.values():
        details = outcome.error_message or "; ".join(outcome.warnings)
        state_style = "green" if outcome.succeeded else "red"
        table.add_row(
            outcome.task_id,
            f"[{state_style}]{outcome.state.value}[/{state_style}]",
            details,
        )

    console.print(table)


@cli.command()
@click.argument('task_file', required=False, type=click.Path(dir_okay=False))
@click.option('--time-scale', type=float, help='Seconds of real time per task second')
@click.option('--fail', 'fail_tasks', multiple=True, help='Make the named task fail (repeatable)')
@click.option('--summary', is_flag=True, help='Show a table of task outcomes')
@click.option('--json', 'as_json', is_flag=True, help='Print the run report as JSON')
@click.option('--quiet', '-q', is_flag=True, help='Suppress task progress messages')
@click.option('--no-timestamps', is_flag=True, help='Omit timestamps from progress messages')
@click.option('--strict', is_flag=True, help='Exit with status 2 if any task failed')
@click.pass_obj
def run(
    config: RunnerConfig,
    task_file: Optional[str],
    time_scale: Optional[float],
    fail_tasks: Tuple[str, ...],
    summary: bool,
    as_json: bool,
    quiet: bool,
    no_timestamps: bool,
    strict: bool,
):
    """Run every task in TASK_FILE (default: threads.csv)"""
    config = config.merged(
        task_file=task_file,
        time_scale=time_scale,
        timestamps=False if no_timestamps else None,
    )
    try:
        config.validate()
    except ThreadRunnerError as e:
        raise click.ClickException(str(e))

    if not as_json:
        click.echo("Parallel Thread Runner")
        click.echo("======================")

    if not Path(config.task_file).exists():
        click.echo(f"Error: Task file '{config.task_file}' not found.", err=True)
        sys.exit(1)

    result = _load(config.task_file)
    if result is None:
        sys.exit(1)

    # Blocking cycles and duplicate ids would hang or be refused by the run
    errors = validate_tasks(result.records)
    if errors:
        for error in errors:
            click.echo(f"❌ {error}", err=True)
        sys.exit(1)

    console = Console(highlight=False, stderr=as_json)
    reporter = NullReporter() if quiet else ConsoleReporter(console, timestamps=config.timestamps)

    work = SimulatedWork(config.time_scale)
    if fail_tasks:
        known = {record.task_id for record in result.records}
        for task_id in sorted(set(fail_tasks) - known):
            click.echo(f"⚠️  --fail: task '{task_id}' not found; ignored", err=True)
        work = FaultInjectingWork(fail_tasks, inner=work)

    try:
        report = run_tasks(result.records, reporter=reporter, work=work)
    except ThreadRunnerError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(report.to_dict(), indent=2))
    else:
        click.echo()
        click.echo(f"Program Completed. Run time: {report.elapsed_seconds:.3f} seconds")
        if summary:
            _print_summary(report, console)

    if strict and report.failed:
        sys.exit(2)


@cli.command()
@click.argument('task_file', type=click.Path(dir_okay=False))
def validate(task_file: str):
    """Check a task file without running it"""
    result = _load(task_file)
    if result is None:
        sys.exit(1)

    click.echo(f"📄 {len(result.records)} task(s) in {task_file}")

    for task_id, missing in find_missing_predecessors(result.records).items():
        click.echo(f"⚠️  Task {task_id}: blocking task '{missing}' not found; it will start unblocked")

    errors = validate_tasks(result.records)
    if errors:
        click.echo("❌ Task validation failed:")
        for error in errors:
            click.echo(f"  • {error}")
        sys.exit(1)

    click.echo("✅ Task file is valid")


def main():
    """Main CLI entry point"""
    try:
        cli()
    except KeyboardInterrupt:
        click.echo("\n⚠️  Interrupted by user")
        sys.exit(130)


if __name__ == '__main__':
    main()
