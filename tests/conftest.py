"""
Shared fixtures: a silent rich console, a recorder for file-system writes and
a stubbed Node.js version.
"""

from __future__ import annotations

import io
from pathlib import Path

import pytest
from rich.console import Console

from backend_scaffold import checks

_WRITE_METHODS = ("mkdir", "write_text", "write_bytes", "touch", "chmod")


@pytest.fixture
def quiet_console() -> Console:
    return Console(file=io.StringIO(), force_terminal=False, width=120)


@pytest.fixture
def fs_writes(monkeypatch, tmp_path):
    """
    Record every pathlib write made during the test.

    Depends on ``tmp_path`` so the temporary directory already exists before
    recording starts.
    """
    calls: list[tuple[str, str]] = []

    def recorder(name, original):
        def wrapper(self, *args, **kwargs):
            calls.append((name, str(self)))
            return original(self, *args, **kwargs)
        return wrapper

    for name in _WRITE_METHODS:
        monkeypatch.setattr(Path, name, recorder(name, getattr(Path, name)))
    return calls


@pytest.fixture
def node_20(monkeypatch):
    monkeypatch.setattr(checks, "detect_node_version", lambda: "v20.11.1")

