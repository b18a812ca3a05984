"""
Side image commands for lapupdater.
"""

import json
from typing import Optional

import click

from ..cli_utils import standard_command
from ..services.side_image_service import (
    SIDE_IMAGE_WIDTH_MAX,
    SIDE_IMAGE_WIDTH_MIN,
    SideImageService,
)


@click.group('side-image')
def side_image_cmd():
    """Choose the decorative side image shown in the TUI."""
    pass


@side_image_cmd.command('list')
@click.option('--json', 'output_json', is_flag=True, help='Output as JSON')
@standard_command
def list_images(output_json: bool):
    """List available bitmap images and the current selection."""
    service = SideImageService()
    images = service.list_images()
    current = service.current()

    if output_json:
        print(json.dumps({
            'directory': str(service.image_dir),
            'images': images,
            'current': current.to_dict(),
        }), flush=True)
        return

    if not images:
        click.echo(f"No .bmp images in {service.image_dir}")
        return
    for name in images:
        marker = "*" if current.file_name and name.lower() == current.file_name.lower() else " "
        click.echo(f"{marker} {name}")


@side_image_cmd.command('set')
@click.argument('name')
@click.option('--width', type=click.IntRange(SIDE_IMAGE_WIDTH_MIN, SIDE_IMAGE_WIDTH_MAX, clamp=True),
              help='Fixed width in pixels')
@click.option('--based-on-picture/--fixed', default=None,
              help='Derive the width from the picture aspect ratio')
@standard_command
def set_image(name: str, width: Optional[int], based_on_picture: Optional[bool]):
    """Select NAME from the image directory."""
    selection = SideImageService().select(name, width=width, based_on_picture=based_on_picture)
    click.echo(f"Side image: {selection.file_name} (width {selection.width})")


@side_image_cmd.command('clear')
@standard_command
def clear_image():
    """Hide the side image."""
    SideImageService().select(None)
    click.echo("Side image cleared")


@side_image_cmd.command('width')
@click.argument('width', type=int)
@click.option('--based-on-picture/--fixed', default=False,
              help='Derive the width from the picture aspect ratio')
@standard_command
def set_width(width: int, based_on_picture: bool):
    """Set the side image WIDTH (clamped to 120-520)."""
    selection = SideImageService().set_width(width, based_on_picture=based_on_picture)
    click.echo(f"Side image width: {selection.width}")
