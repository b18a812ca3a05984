"""
Interactive terminal UI for lapupdater.

Provides:
- MainScreen: path inputs, Check changes / Update Laptime, console log
- PreferenceScreen: website configuration form
"""

from .app import LapUpdaterApp, run_tui

__all__ = ['LapUpdaterApp', 'run_tui']
