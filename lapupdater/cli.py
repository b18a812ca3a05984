#!/usr/bin/env python3

import click

from lapupdater import __version__
from lapupdater.config import configure_logging, load_config

from lapupdater.commands.check import check_handler
from lapupdater.commands.update import update_handler
from lapupdater.commands.status import status_handler
from lapupdater.commands.config import config_cmd
from lapupdater.commands.preference import preference_cmd
from lapupdater.commands.side_image import side_image_cmd
from lapupdater.commands.tui import tui_handler


@click.group()
@click.version_option(version=__version__, prog_name='lapupdater')
def cli():
    """lapupdater - Publish lap times to a git-hosted website.

    Copies personalbest.ini into the website repository, detects changes
    with git, and publishes them with add/commit/push.
    """
    configure_logging(load_config(create_if_missing=False))


# Workflow commands
cli.add_command(check_handler, name='check')
cli.add_command(update_handler, name='update')
cli.add_command(status_handler)
cli.add_command(tui_handler, name='tui')

# Command groups
cli.add_command(config_cmd)
cli.add_command(preference_cmd)
cli.add_command(side_image_cmd)


def main():
    cli()

if __name__ == "__main__":
    main()
