import click
from lapupdater.config import load_config
import json
from pathlib import Path

from ..cli_utils import standard_command
from ..config import SettingsStore
from ..exit_codes import PreconditionError


@click.group("config")
def config_cmd():
    """Configuration management commands."""
    pass


@config_cmd.command("show")
@click.option("--pretty", is_flag=True, help="Display as formatted JSON instead of single-line JSONL")
@click.option("--path", is_flag=True, help="Show the config file path being used")
def show_config(pretty, path):
    """Show the current configuration with all merges applied.

    By default, outputs single-line JSON (JSONL format).
    Use --pretty for human-readable formatted output.
    Use --path to see which config file is being used.
    """
    from lapupdater.config import get_config_path

    if path:
        config_path = get_config_path()
        print(json.dumps({"config_path": str(config_path)}))
        return

    config = load_config()

    if pretty:
        print(json.dumps(config, indent=2, ensure_ascii=False))
    else:
        print(json.dumps(config, ensure_ascii=False))


@config_cmd.command("path")
def config_path():
    """Print the config file path."""
    from lapupdater.config import get_config_path
    click.echo(str(get_config_path()))


@config_cmd.command("set-source")
@click.argument("path", type=click.Path(dir_okay=False))
@standard_command
def set_source(path):
    """Select the personalbest.ini file to publish."""
    resolved = Path(path).expanduser().resolve()
    if not resolved.is_file():
        raise PreconditionError(f"File not found: {resolved}", title="Missing file")
    if resolved.name.lower() != "personalbest.ini":
        click.echo(f"Warning: {resolved.name} is not named personalbest.ini", err=True)

    SettingsStore().set_path("source_ini", str(resolved))
    click.echo(f"Source file set to {resolved}")


@config_cmd.command("set-repo")
@click.argument("path", type=click.Path(file_okay=False))
@standard_command
def set_repo(path):
    """Select the website repository root folder."""
    from ..infra.git_client import GitClient

    resolved = Path(path).expanduser().resolve()
    if not resolved.is_dir():
        raise PreconditionError(f"Folder not found: {resolved}", title="Missing folder")
    if not GitClient().is_git_repo(str(resolved)):
        click.echo(f"Warning: {resolved} is not a git repository", err=True)

    SettingsStore().set_path("repo_root", str(resolved))
    click.echo(f"Repository root set to {resolved}")
