"""
Main screen: paths, check/update buttons, status and console log.
"""

import asyncio
import logging
from typing import Any, Dict, Optional

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import Screen
from textual.widgets import Button, Footer, Header, Input, Label, RichLog, Static

from ..config import SettingsStore
from ..exit_codes import CommandError
from ..services.side_image_service import SideImageService
from ..services.update_service import UpdateService
from .preference_screen import PreferenceScreen

logger = logging.getLogger(__name__)

# Side image pixels per terminal cell
PIXELS_PER_CELL = 8


class MainScreen(Screen):
    """Lap-time update workflow screen."""

    CSS = """
    MainScreen {
        background: $surface;
        layout: horizontal;
    }

    #side-image {
        height: 100%;
        background: $panel;
        color: $text-muted;
        content-align: center middle;
    }

    #main {
        width: 1fr;
        padding: 0 1;
    }

    .path-row {
        height: 3;
    }

    .path-row Label {
        width: 20;
        padding: 1 1 0 0;
    }

    .path-row Input {
        width: 1fr;
    }

    #buttons {
        height: 3;
    }

    #buttons Button {
        margin-right: 1;
    }

    #status {
        height: 1;
        padding: 0 1;
        text-style: bold;
    }

    #console {
        height: 1fr;
        border: round $primary;
    }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit", show=True),
        Binding("c", "check", "Check", show=True),
        Binding("u", "update", "Update", show=True),
        Binding("l", "clear_console", "Clear", show=True),
    ]

    def __init__(self, config: Dict[str, Any], service: Optional[UpdateService] = None):
        """Initialize screen.

        Args:
            config: Loaded configuration
            service: UpdateService (creates one logging to the console if None)
        """
        super().__init__()
        self.settings = SettingsStore(config)
        self.service = service or UpdateService(settings=self.settings, log=self.write_console)
        self.working = False
        self.status_text = self.service.last_outcome.label

    def compose(self) -> ComposeResult:
        yield Header()

        images = SideImageService(self.settings)
        side = images.current()
        if side.file_name and images.resolve(side.file_name):
            panel = Static(side.file_name, id="side-image")
            panel.styles.width = max(1, side.width // PIXELS_PER_CELL)
            yield panel

        with Vertical(id="main"):
            with Horizontal(classes="path-row"):
                yield Label("personalbest.ini")
                yield Input(value=self.service.source_path, placeholder="Path to personalbest.ini",
                            id="source-path")
            with Horizontal(classes="path-row"):
                yield Label("Repository root")
                yield Input(value=self.service.repo_root, placeholder="Path to the website repository",
                            id="repo-root")
            with Horizontal(id="buttons"):
                yield Button("Check changes", id="check", variant="primary")
                yield Button("Update Laptime", id="update", variant="success")
                yield Button("Preference", id="preference")
                yield Button("Clear console", id="clear")
            yield Label(self.status_text, id="status")
            yield RichLog(id="console", wrap=True, markup=False)

        yield Footer()

    def on_mount(self) -> None:
        self.refresh_buttons()

    # -- helpers -----------------------------------------------------------

    def write_console(self, line: str) -> None:
        self.query_one("#console", RichLog).write(line)

    def set_status(self, text: str) -> None:
        self.status_text = text
        self.query_one("#status", Label).update(text)

    def refresh_buttons(self) -> None:
        busy = self.working or self.service.busy
        self.query_one("#check", Button).disabled = busy or not self.service.paths_ready()
        self.query_one("#update", Button).disabled = busy or not self.service.publish_available
        self.query_one("#preference", Button).disabled = busy or not self.service.repo_root_ready()
        self.query_one("#clear", Button).disabled = busy

    def report_error(self, error: CommandError) -> None:
        logger.debug(f"Workflow error: {error!r}")
        title = getattr(error, 'title', None) or "Error"
        self.notify(str(error), title=title, severity="error")
        self.write_console(f"Error: {error}")

    # -- events ------------------------------------------------------------

    def on_input_submitted(self, event: Input.Submitted) -> None:
        value = event.value.strip()
        if event.input.id == "source-path":
            self.settings.set_path("source_ini", value)
        elif event.input.id == "repo-root":
            self.settings.set_path("repo_root", value)
        # New paths need a fresh check
        self.service.publish_available = False
        self.refresh_buttons()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        button_id = event.button.id
        if button_id == "check":
            self.action_check()
        elif button_id == "update":
            self.action_update()
        elif button_id == "preference":
            self.app.push_screen(PreferenceScreen(self.service.repo_root), self._on_preference_closed)
        elif button_id == "clear":
            self.action_clear_console()

    def _on_preference_closed(self, saved: Optional[bool]) -> None:
        if saved:
            self.write_console("Website configuration saved.")

    # -- actions -----------------------------------------------------------

    def action_check(self) -> None:
        if self.working or not self.service.paths_ready():
            return
        # Set before the worker starts; repeated presses are ignored
        self.working = True
        self.refresh_buttons()
        self.run_worker(self._run_check(), group="git")

    def action_update(self) -> None:
        if self.working or not self.service.publish_available:
            return
        self.working = True
        self.refresh_buttons()
        self.run_worker(self._run_update(), group="git")

    def action_clear_console(self) -> None:
        self.query_one("#console", RichLog).clear()

    async def _run_check(self) -> None:
        self.set_status("Checking...")
        try:
            self.service.ensure_paths()
            # The reachability probe blocks; keep it off the event loop
            await asyncio.to_thread(self.service.ensure_connectivity)
            state = await self.service.check_changes(check_network=False)
            self.set_status(state.label)
        except CommandError as e:
            self.report_error(e)
            self.set_status(self.service.last_outcome.label)
        finally:
            self.working = False
            self.refresh_buttons()

    async def _run_update(self) -> None:
        self.set_status("Publishing...")
        try:
            self.service.ensure_paths()
            await asyncio.to_thread(self.service.ensure_connectivity)
            result = await self.service.update(check_network=False)
            self.set_status(result.outcome.label)
            if result.success:
                self.notify(result.outcome.label, title="Update Laptime")
            else:
                self.notify(result.outcome.label, title="Update Laptime", severity="error")
        except CommandError as e:
            self.report_error(e)
        finally:
            self.working = False
            self.refresh_buttons()
