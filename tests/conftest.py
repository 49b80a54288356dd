"""Shared pytest fixtures for the mimepost test suite."""

from __future__ import annotations

# Disable Rich colors and force wide terminal BEFORE any imports
# Rich checks these at import time
import os

os.environ["NO_COLOR"] = "1"
os.environ["TERM"] = "dumb"
os.environ["COLUMNS"] = "200"  # Prevent text wrapping in CLI output

from collections.abc import Iterator
from pathlib import Path

import pytest

from mimepost.config import CONFIG_ENV_VAR, reset_config

# pylint: disable=redefined-outer-name


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Iterator[Path]:
    """Run every test from an empty working directory with no active configuration."""
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    monkeypatch.chdir(tmp_path)
    reset_config()
    yield tmp_path
    reset_config()


@pytest.fixture
def report_pdf(tmp_path: Path) -> Path:
    """Create a small binary file named like a PDF report."""
    file_path = tmp_path / "report.pdf"
    file_path.write_bytes(b"%PDF-1.4\n" + bytes(range(256)) * 3)
    return file_path
