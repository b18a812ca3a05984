"""
Textual application for lapupdater.
"""

from textual.app import App
from typing import Optional

from .main_screen import MainScreen


class LapUpdaterApp(App):
    """Check and publish lap-time updates from the terminal."""

    TITLE = "Lap Time Updater"

    def __init__(self, config_path: Optional[str] = None):
        """Initialize app.

        Args:
            config_path: Optional path to config file
        """
        super().__init__()
        self.config_path = config_path

    def on_mount(self) -> None:
        """Mount the main screen directly."""
        from ..config import load_config

        if self.config_path:
            import os
            os.environ['LAPUPDATER_CONFIG'] = self.config_path

        config = load_config()
        self.push_screen(MainScreen(config))


def run_tui(config_path: Optional[str] = None) -> None:
    """Run the interactive application.

    Args:
        config_path: Path to configuration file
    """
    app = LapUpdaterApp(config_path)
    app.run()
