"""
Side image selection for lapupdater.

The interactive UI can show a decorative bitmap beside the main screen.
This service lists the available `*.bmp` files, keeps the chosen file and
width in settings, and can derive the width from the picture's aspect
ratio. Only the BMP header is read; pixels are never decoded.
"""

import logging
import struct
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from ..config import SettingsStore, get_config_dir
from ..exit_codes import ConfigError

logger = logging.getLogger(__name__)

SIDE_IMAGE_WIDTH_MIN = 120
SIDE_IMAGE_WIDTH_MAX = 520
DEFAULT_SIDE_IMAGE_WIDTH = 300
DEFAULT_AREA_HEIGHT = 480


def clamp_width(value: int) -> int:
    return max(SIDE_IMAGE_WIDTH_MIN, min(SIDE_IMAGE_WIDTH_MAX, int(value)))


def read_bmp_size(path: Path) -> Optional[Tuple[int, int]]:
    """
    Return (width, height) from a BMP file header, or None if unreadable.

    Handles the OS/2 12-byte core header and the Windows info headers.
    Top-down bitmaps store a negative height.
    """
    try:
        with open(path, 'rb') as f:
            header = f.read(26)
    except OSError as e:
        logger.debug(f"Cannot read {path}: {e}")
        return None

    if len(header) < 26 or header[:2] != b'BM':
        return None

    (dib_size,) = struct.unpack_from('<I', header, 14)
    if dib_size == 12:
        width, height = struct.unpack_from('<HH', header, 18)
    else:
        width, height = struct.unpack_from('<ii', header, 18)

    width, height = abs(width), abs(height)
    if width <= 0 or height <= 0:
        return None
    return width, height


@dataclass
class SideImageSelection:
    """Persisted side image choice."""
    file_name: Optional[str]
    width: int
    based_on_picture: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            'file_name': self.file_name,
            'width': self.width,
            'based_on_picture': self.based_on_picture,
        }


class SideImageService:
    """
    Service for listing and selecting the decorative side image.

    Example:
        service = SideImageService()
        print(service.list_images())
        service.select("car.bmp", based_on_picture=True)
    """

    def __init__(self, settings: Optional[SettingsStore] = None):
        """
        Initialize SideImageService.

        Args:
            settings: Settings store (loads default if None)
        """
        self.settings = settings or SettingsStore()

    @property
    def section(self) -> Dict[str, Any]:
        return self.settings.config.setdefault('side_image', {})

    @property
    def image_dir(self) -> Path:
        configured = str(self.section.get('directory') or '').strip()
        if configured:
            return Path(configured).expanduser()
        return get_config_dir() / 'img'

    @property
    def area_height(self) -> int:
        try:
            return max(1, int(self.section.get('area_height') or DEFAULT_AREA_HEIGHT))
        except (TypeError, ValueError):
            return DEFAULT_AREA_HEIGHT

    def list_images(self) -> List[str]:
        """Bitmap file names in the image directory, sorted case-insensitively."""
        if not self.image_dir.is_dir():
            return []
        names = [
            p.name for p in self.image_dir.iterdir()
            if p.is_file() and p.suffix.lower() == '.bmp'
        ]
        return sorted(names, key=str.lower)

    def resolve(self, file_name: str) -> Optional[str]:
        """Match a file name case-insensitively against the available images."""
        for name in self.list_images():
            if name.lower() == file_name.lower():
                return name
        return None

    def compute_width(self, file_name: str) -> Optional[int]:
        """Width that keeps the picture's aspect ratio at the area height."""
        size = read_bmp_size(self.image_dir / file_name)
        if size is None:
            return None
        width, height = size
        return clamp_width(round(self.area_height * width / height))

    def current(self) -> SideImageSelection:
        section = self.section
        try:
            width = clamp_width(section.get('width') or DEFAULT_SIDE_IMAGE_WIDTH)
        except (TypeError, ValueError):
            width = DEFAULT_SIDE_IMAGE_WIDTH
        return SideImageSelection(
            file_name=section.get('file_name') or None,
            width=width,
            based_on_picture=bool(section.get('based_on_picture', True)),
        )

    def select(
        self,
        file_name: Optional[str],
        width: Optional[int] = None,
        based_on_picture: Optional[bool] = None
    ) -> SideImageSelection:
        """
        Choose an image (None hides the side image) and persist it.

        With `based_on_picture` the width is derived from the image when its
        header can be read; otherwise the given (or current) width is clamped.

        Raises:
            ConfigError: If the file is not in the image directory
        """
        current = self.current()

        resolved = None
        if file_name:
            resolved = self.resolve(file_name)
            if resolved is None:
                raise ConfigError(f"Image not found in {self.image_dir}: {file_name}")

        if based_on_picture is None:
            based_on_picture = current.based_on_picture
        new_width = clamp_width(width if width is not None else current.width)
        if based_on_picture and resolved:
            computed = self.compute_width(resolved)
            if computed is not None:
                new_width = computed

        selection = SideImageSelection(resolved, new_width, based_on_picture)
        self.section.update({
            'file_name': selection.file_name or "",
            'width': selection.width,
            'based_on_picture': selection.based_on_picture,
        })
        self.settings.save()
        return selection

    def set_width(self, width: int, based_on_picture: bool = False) -> SideImageSelection:
        """Change only the width, keeping the current image (if any)."""
        current = self.current()
        new_width = clamp_width(width)
        if based_on_picture and current.file_name:
            resolved = self.resolve(current.file_name)
            computed = self.compute_width(resolved) if resolved else None
            if computed is not None:
                new_width = computed

        self.section.update({'width': new_width, 'based_on_picture': based_on_picture})
        self.settings.save()
        return SideImageSelection(current.file_name, new_width, based_on_picture)
