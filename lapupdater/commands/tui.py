import click


@click.command('tui')
@click.option('--config', 'config_path', type=click.Path(exists=True, dir_okay=False),
              help='Use this config file instead of ~/.lapupdater/config.json')
def tui_handler(config_path):
    """Launch the interactive terminal UI."""
    from ..tui.app import run_tui
    run_tui(config_path)
