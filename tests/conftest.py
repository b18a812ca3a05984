"""
Shared fixtures for lapupdater tests.
"""

import os

import pytest


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """Point HOME at a temp dir so no test touches the real ~/.lapupdater."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    for key in list(os.environ):
        if key.startswith("LAPUPDATER_"):
            monkeypatch.delenv(key, raising=False)
    return home
