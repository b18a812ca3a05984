"""
Status command for lapupdater.
"""

import json
from pathlib import Path

import click

from ..cli_utils import standard_command
from ..config import SettingsStore, get_config_path, get_repo_data_target
from ..infra.git_client import GitClient
from ..services.update_service import UpdateService


def build_status(service: UpdateService) -> dict:
    """Snapshot of the configured paths, readiness and last outcome."""
    source = service.source_path
    repo_root = service.repo_root
    return {
        'config_path': str(get_config_path()),
        'source_ini': source,
        'source_exists': bool(source) and Path(source).is_file(),
        'repo_root': repo_root,
        'repo_root_exists': service.repo_root_ready(),
        'is_git_repo': service.repo_root_ready() and GitClient().is_git_repo(repo_root),
        'target': str(get_repo_data_target(repo_root)) if repo_root else None,
        'ready': service.paths_ready(),
        'last_outcome': service.last_outcome.value,
        'last_outcome_label': service.last_outcome.label,
    }


@click.command('status')
@click.option('--json', 'output_json', is_flag=True, help='Output as JSON')
@standard_command
def status_handler(output_json: bool):
    """
    Show configured paths, readiness and the last publish outcome.

    \b
    Examples:
        lapupdater status
        lapupdater status --json
    """
    service = UpdateService(settings=SettingsStore())
    status = build_status(service)

    if output_json:
        print(json.dumps(status, ensure_ascii=False), flush=True)
        return

    from rich.console import Console
    from rich.table import Table

    def mark(ok: bool) -> str:
        return "[green]✓[/green]" if ok else "[red]✗[/red]"

    console = Console()
    table = Table(title="lapupdater status", show_header=False)
    table.add_column("Key", style="cyan")
    table.add_column("Value")
    table.add_column("", justify="center")

    table.add_row("Config", status['config_path'], "")
    table.add_row("personalbest.ini", status['source_ini'] or "[dim](not set)[/dim]", mark(status['source_exists']))
    table.add_row("Repository root", status['repo_root'] or "[dim](not set)[/dim]", mark(status['repo_root_exists']))
    table.add_row("Git repository", "yes" if status['is_git_repo'] else "no", mark(status['is_git_repo']))
    if status['target']:
        table.add_row("Copy target", status['target'], "")
    table.add_row("Last update", status['last_outcome_label'], "")

    console.print(table)
