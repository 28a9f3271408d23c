"""Shared pytest fixtures: one offscreen QApplication and isolated settings."""
from __future__ import annotations

import os
import sys

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from PyQt6.QtWidgets import QApplication

import settings
from canvas import items
from settings import SettingsManager


@pytest.fixture(scope="session", autouse=True)
def isolated_settings(tmp_path_factory):
    """Point the settings singleton at an empty directory so user config never leaks in."""
    settings._settings_manager = SettingsManager(settings_dir=tmp_path_factory.mktemp("settings"))
    items._CachedCanvasSettings.reset()
    yield settings._settings_manager
    items._CachedCanvasSettings.reset()


@pytest.fixture(scope="session")
def qapp():
    """Provide a single QApplication for the entire test session."""
    app = QApplication.instance() or QApplication(sys.argv)
    yield app
