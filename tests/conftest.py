"""Shared pytest setup: one widget-capable Qt application for the whole session.

Several test modules create their own Qt application instance; whichever runs
first wins for the rest of the process.  Creating a QApplication up front keeps
widget tests from reusing a bare QCoreApplication created by non-widget tests.
"""

from __future__ import annotations

import os

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


@pytest.fixture(scope="session", autouse=True)
def _shared_qt_application():
    try:
        from PySide6 import QtWidgets
    except ImportError:
        yield None
        return
    app = QtWidgets.QApplication.instance() or QtWidgets.QApplication([])
    yield app
