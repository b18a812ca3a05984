"""
File store infrastructure for lapupdater.

Provides JSON document persistence with:
- Atomic writes (write to temp, then rename)
- Pretty formatting for human readability
- UTF-8 encoding
- Automatic parent directory creation

Used for both the application settings file and the website's
`src/data/config.json`.
"""

import json
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Dict
import logging

logger = logging.getLogger(__name__)


class FileStore:
    """
    JSON file persistence with atomic writes.

    Example:
        store = FileStore(Path("~/.lapupdater/config.json"))
        data = store.load()
        data["last_push_status"] = "success"
        store.write(data)
    """

    def __init__(self, path: Path, indent: int = 2):
        """
        Initialize FileStore.

        Args:
            path: Path to JSON file
            indent: Indentation used when writing
        """
        self.path = Path(path).expanduser()
        self.indent = indent
        self._lock = threading.Lock()

    def exists(self) -> bool:
        return self.path.is_file()

    def _write_atomic(self, data: Dict[str, Any]) -> None:
        """Write data atomically using temp file and rename."""
        self.path.parent.mkdir(parents=True, exist_ok=True)

        # Write to temp file in same directory
        fd, temp_path = tempfile.mkstemp(
            dir=self.path.parent,
            prefix=f".{self.path.name}.",
            suffix=".tmp"
        )

        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=self.indent, ensure_ascii=False)
                f.write('\n')  # Trailing newline

            # Atomic rename
            os.replace(temp_path, self.path)

        except Exception:
            # Clean up temp file on error
            try:
                os.unlink(temp_path)
            except OSError:
                pass
            raise

    def load(self) -> Dict[str, Any]:
        """
        Read the document, raising on missing or malformed files.

        Raises:
            FileNotFoundError: If the file does not exist
            json.JSONDecodeError: If the file is not valid JSON
        """
        with self._lock:
            with open(self.path, 'r', encoding='utf-8-sig') as f:
                data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Expected a JSON object in {self.path}")
        return data

    def write(self, data: Dict[str, Any]) -> None:
        """
        Write entire document.

        Args:
            data: Dictionary to write
        """
        with self._lock:
            self._write_atomic(data)
        logger.debug(f"Wrote {self.path}")
