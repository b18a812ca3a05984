"""
Check command for lapupdater.

Copies the lap-time file into the website repository and reports whether
there is anything to publish.
"""

import asyncio
import json

import click

from ..cli_utils import console_log, standard_command
from ..config import load_config
from ..services.update_service import UpdateService


@click.command('check')
@click.option('--json', 'output_json', is_flag=True, help='Output as JSON')
@click.option('--pretty', is_flag=True, help='Display with rich formatting')
@click.option('--skip-network', is_flag=True, help='Skip the connectivity pre-check')
@click.option('--debug', is_flag=True, help='Enable debug logging')
@standard_command
def check_handler(output_json: bool, pretty: bool, skip_network: bool, debug: bool):
    """
    Copy personalbest.ini into the repo and check for changes.

    Runs `git fetch` and `git status -sb` in the website repository and
    reports one of: "No changes", "Changes found", "Commits pending push".

    \b
    Examples:
        lapupdater check
        lapupdater check --json
        lapupdater check --skip-network
    """
    config = load_config()
    service = UpdateService(config=config, log=console_log(pretty))

    state = asyncio.run(service.check_changes(check_network=not skip_network))

    if output_json:
        print(json.dumps(state.to_dict()), flush=True)
    elif pretty:
        from rich.console import Console
        color = "green" if state.has_changes else "white"
        Console().print(f"[bold {color}]{state.label}[/bold {color}]")
    else:
        click.echo(state.label)
