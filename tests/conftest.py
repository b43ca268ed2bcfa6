import os

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PyQt6.QtWidgets import QApplication


@pytest.fixture(scope="session")
def app():
    return QApplication.instance() or QApplication([])


@pytest.fixture
def config():
    return {
        "map": {"PIXELS_PER_DEGREE": 100.0, "ORIGIN_LAT": 0.0, "ORIGIN_LNG": 0.0},
        "marker_edit": {"LONG_PRESS_DELETE_MS": 50, "DELETE_MODIFIER": "control"},
    }
