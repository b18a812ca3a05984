"""
Tests for the interactive terminal UI, driven headless with textual's pilot.
"""

import asyncio
import json
from unittest.mock import AsyncMock, MagicMock

from textual.widgets import Button

from lapupdater.tui.app import LapUpdaterApp


def button_states(screen):
    return {
        name: screen.query_one(f"#{name}", Button).disabled
        for name in ("check", "update", "preference", "clear")
    }


def test_buttons_disabled_without_paths():
    async def scenario():
        app = LapUpdaterApp()
        async with app.run_test() as pilot:
            await pilot.pause()
            return button_states(app.screen), app.screen.status_text

    states, status = asyncio.run(scenario())

    assert states == {"check": True, "update": True, "preference": True, "clear": False}
    assert status == "No changes"


def test_buttons_follow_configured_paths(isolated_home, tmp_path):
    source = tmp_path / "personalbest.ini"
    source.write_text("[x]\n", encoding="utf-8")
    repo = tmp_path / "website"
    repo.mkdir()
    config_dir = isolated_home / ".lapupdater"
    config_dir.mkdir()
    (config_dir / "config.json").write_text(json.dumps({
        "paths": {"source_ini": str(source), "repo_root": str(repo)},
        "last_push_status": "failure",
    }), encoding="utf-8")

    async def scenario():
        app = LapUpdaterApp()
        async with app.run_test() as pilot:
            await pilot.pause()
            return button_states(app.screen), app.screen.status_text

    states, status = asyncio.run(scenario())

    assert states == {"check": False, "update": True, "preference": False, "clear": False}
    assert status == "An error occurred!"


def test_repeated_check_does_not_restart_running_sequence(isolated_home, tmp_path):
    source = tmp_path / "personalbest.ini"
    source.write_text("[x]\n", encoding="utf-8")
    repo = tmp_path / "website"
    repo.mkdir()
    config_dir = isolated_home / ".lapupdater"
    config_dir.mkdir()
    (config_dir / "config.json").write_text(json.dumps({
        "paths": {"source_ini": str(source), "repo_root": str(repo)},
    }), encoding="utf-8")

    async def scenario():
        app = LapUpdaterApp()
        async with app.run_test() as pilot:
            await pilot.pause()
            screen = app.screen
            release = asyncio.Event()

            async def slow_check(check_network=True):
                await release.wait()
                return MagicMock(label="Changes detected")

            screen.service.ensure_connectivity = MagicMock()
            screen.service.check_changes = AsyncMock(side_effect=slow_check)

            screen.action_check()
            screen.action_check()
            await pilot.pause()
            busy_states = button_states(screen)

            release.set()
            await app.workers.wait_for_complete()
            await pilot.pause()
            return screen.service.check_changes.await_count, busy_states, screen.status_text, screen.working

    awaits, busy_states, status, working = asyncio.run(scenario())

    assert awaits == 1
    assert busy_states["check"] is True
    assert status == "Changes detected"
    assert working is False
