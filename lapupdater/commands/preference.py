"""
Preference commands: view and edit the website's `src/data/config.json`.
"""

import json

import click

from ..cli_utils import standard_command
from ..config import get_repo_root, load_config
from ..domain.website import EDITABLE_FIELDS
from ..exit_codes import PreconditionError
from ..services.website_config_service import WebsiteConfigService


def _service() -> WebsiteConfigService:
    repo_root = get_repo_root(load_config())
    if not repo_root:
        raise PreconditionError("Select a valid repository root folder.", title="Missing folder")
    return WebsiteConfigService(repo_root)


@click.group('preference')
def preference_cmd():
    """Edit the website configuration (driver profile, featured lap, meta)."""
    pass


@preference_cmd.command('show')
@click.option('--json', 'output_json', is_flag=True, help='Output the raw config as JSON')
@standard_command
def show_preference(output_json: bool):
    """Show the editable website fields."""
    service = _service()
    config = service.load()

    if output_json:
        print(json.dumps(config.to_dict(), ensure_ascii=False), flush=True)
        return

    from rich.console import Console
    from rich.table import Table

    table = Table(title=str(service.path), show_header=True)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    for path, value in config.editable_items():
        table.add_row(path, "" if value is None else str(value))
    Console().print(table)


@preference_cmd.command('set')
@click.argument('field', type=click.Choice(list(EDITABLE_FIELDS)))
@click.argument('value')
@standard_command
def set_preference(field: str, value: str):
    """
    Set one website field and save.

    \b
    Examples:
        lapupdater preference set driverProfile.name "Jane Doe"
        lapupdater preference set featuredLap.show false
    """
    service = _service()
    config = service.set_field(field, value)
    click.echo(f"{field} = {config.get_field(field)}")


@preference_cmd.command('fields')
def list_fields():
    """List the editable field paths."""
    for path in EDITABLE_FIELDS:
        click.echo(path)
