"""
Update command for lapupdater.

Checks for changes and publishes them with git add/commit/push.
"""

import asyncio
import json
import sys

import click

from ..cli_utils import console_log, standard_command
from ..config import load_config
from ..domain.operation import PublishResult
from ..exit_codes import PublishFailedError
from ..services.update_service import UpdateService


@click.command('update')
@click.option('--json', 'output_json', is_flag=True, help='Output as JSON')
@click.option('--pretty', is_flag=True, help='Display with rich formatting')
@click.option('--force', is_flag=True, help='Publish without checking for changes first')
@click.option('--yes', '-y', is_flag=True, help='Skip confirmation prompt (required with --json)')
@click.option('--skip-network', is_flag=True, help='Skip the connectivity pre-check')
@click.option('--debug', is_flag=True, help='Enable debug logging')
@standard_command
def update_handler(
    output_json: bool,
    pretty: bool,
    force: bool,
    yes: bool,
    skip_network: bool,
    debug: bool,
):
    """
    Publish the lap-time update to the website repository.

    Copies personalbest.ini, checks for changes, then runs `git add .`,
    `git commit -m "Updated: Laptime"` and `git push`. A commit with
    nothing to commit is not an error. The outcome is remembered and
    shown by `lapupdater status`.

    \b
    Examples:
        # Check, confirm, publish
        lapupdater update
        # Publish without prompting
        lapupdater update --yes
        # Retry a failed push without re-checking
        lapupdater update --force --yes
        # Machine-readable output
        lapupdater update --json --yes
    """
    if output_json and not yes:
        raise click.UsageError("--json cannot prompt for confirmation; pass --yes to publish")

    config = load_config()
    service = UpdateService(config=config, log=console_log(pretty))
    check_network = not skip_network

    if not force:
        state = asyncio.run(service.check_changes(check_network=check_network))
        if not state.has_changes:
            if output_json:
                print(json.dumps({'type': 'check', **state.to_dict()}), flush=True)
            else:
                click.echo(state.label)
            return
        if not output_json:
            click.echo(state.label, err=True)

        if not yes:
            if not click.confirm("Publish changes now?"):
                print("Aborted.", file=sys.stderr)
                return
        # Connectivity was just verified by the check
        check_network = False

    result = asyncio.run(service.update(check_network=check_network, force=force))

    if output_json:
        print(json.dumps(result.to_dict()), flush=True)
    elif pretty:
        _update_output_pretty(result)
    else:
        click.echo(result.outcome.label)

    if not result.success:
        raise PublishFailedError()


def _update_output_pretty(result: PublishResult):
    """Rich summary table of the publish steps."""
    from rich.console import Console
    from rich.table import Table

    console = Console()
    table = Table(title="Publish Summary", show_header=True)
    table.add_column("Step", style="cyan")
    table.add_column("Exit code", justify="right")
    table.add_column("Result")

    for step in result.steps:
        if step.noop:
            status = "[yellow]nothing to commit[/yellow]"
        elif step.succeeded:
            status = "[green]ok[/green]"
        else:
            status = "[red]failed[/red]"
        table.add_row(step.name, str(step.result.exit_code), status)

    console.print(table)

    if result.success:
        console.print(f"\n[bold green]✓[/bold green] {result.outcome.label}")
    else:
        console.print(f"\n[bold red]✗[/bold red] {result.outcome.label}")
        for error in result.errors:
            console.print(f"  [red]•[/red] {error}")
