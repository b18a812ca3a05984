"""
Modal form for the website's `src/data/config.json`.
"""

from typing import Dict, Optional

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, VerticalScroll
from textual.screen import ModalScreen
from textual.widgets import Button, Checkbox, Input, Label

from ..domain.website import EDITABLE_FIELDS, WebsiteConfig
from ..exit_codes import ConfigError
from ..services.website_config_service import WebsiteConfigService

BOOLEAN_FIELDS = {'featuredLap.show'}


def _widget_id(path: str) -> str:
    return "field-" + path.replace('.', '-')


class PreferenceScreen(ModalScreen[bool]):
    """Edit driver profile, featured lap and meta fields. Dismisses with True when saved."""

    CSS = """
    PreferenceScreen {
        align: center middle;
    }

    #form {
        width: 80%;
        height: 80%;
        border: thick $primary;
        background: $surface;
        padding: 1 2;
    }

    .field-row {
        height: 3;
    }

    .field-row Label {
        width: 36;
        padding: 1 1 0 0;
    }

    .field-row Input {
        width: 1fr;
    }

    #form-buttons {
        height: 3;
        align-horizontal: right;
    }
    """

    BINDINGS = [
        Binding("escape", "cancel", "Cancel", show=True),
    ]

    def __init__(self, repo_root: str):
        super().__init__()
        self.service = WebsiteConfigService(repo_root)
        self.config: Optional[WebsiteConfig] = None

    def compose(self) -> ComposeResult:
        with VerticalScroll(id="form"):
            for path in EDITABLE_FIELDS:
                with Horizontal(classes="field-row"):
                    yield Label(path)
                    if path in BOOLEAN_FIELDS:
                        yield Checkbox(id=_widget_id(path))
                    else:
                        yield Input(id=_widget_id(path))
            with Horizontal(id="form-buttons"):
                yield Button("Save", id="save", variant="primary")
                yield Button("Cancel", id="cancel")

    def on_mount(self) -> None:
        try:
            self.config = self.service.load()
        except ConfigError as e:
            self.notify(str(e), title="Preference", severity="error")
            self.dismiss(False)
            return

        for path, value in self.config.editable_items():
            if path in BOOLEAN_FIELDS:
                self.query_one(f"#{_widget_id(path)}", Checkbox).value = bool(value)
            else:
                self.query_one(f"#{_widget_id(path)}", Input).value = "" if value is None else str(value)

    def form_values(self) -> Dict[str, object]:
        values: Dict[str, object] = {}
        for path in EDITABLE_FIELDS:
            if path in BOOLEAN_FIELDS:
                values[path] = self.query_one(f"#{_widget_id(path)}", Checkbox).value
            else:
                values[path] = self.query_one(f"#{_widget_id(path)}", Input).value
        return values

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "save":
            self.action_save()
        else:
            self.action_cancel()

    def action_save(self) -> None:
        if self.config is None:
            return
        try:
            for path, value in self.form_values().items():
                self.config.set_field(path, value)
            self.service.save(self.config)
        except (ConfigError, ValueError) as e:
            self.notify(str(e), title="Preference", severity="error")
            return
        self.dismiss(True)

    def action_cancel(self) -> None:
        self.dismiss(False)
