"""Test configuration and fixtures.

Widgets run on Qt's offscreen platform, so no display is required.
A single QApplication is shared by the whole session.
"""

import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PySide6.QtWidgets import QApplication

from formfield.form.state import FormStateProvider


class DictReader:
    """FieldValueReader backed by a plain dict."""

    def __init__(self, values=None):
        self.values = dict(values or {})

    def watch(self, name):
        return self.values.get(name)


@pytest.fixture(scope="session")
def qapp():
    """Create (or reuse) the QApplication for the test session."""
    app = QApplication.instance() or QApplication([])
    yield app


@pytest.fixture
def provider(qapp):
    """Form state provider validating on every change."""
    form = FormStateProvider(mode="on_change")
    yield form
    form.deleteLater()


@pytest.fixture
def reader():
    """Reader whose password field currently holds 'Secret1!'."""
    return DictReader({"password": "Secret1!"})


@pytest.fixture
def empty_reader():
    """Reader for a form with no password field."""
    return DictReader()
