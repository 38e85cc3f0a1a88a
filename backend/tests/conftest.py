"""Pytest configuration and fixtures."""
import sys
import textwrap
from pathlib import Path

import pytest

# Add backend to path
backend_path = Path(__file__).parent.parent
sys.path.insert(0, str(backend_path))

from app.config import Settings  # noqa: E402


@pytest.fixture
def echo_model_path():
    """Path to the echo stand-in for the quantitative model."""
    return Path(__file__).parent.parent.parent / "examples" / "echo_model.py"


@pytest.fixture
def write_model(tmp_path):
    """Write a throwaway Python model script and return its command prefix."""

    def _write(body: str, name: str = "model.py"):
        script = tmp_path / name
        script.write_text(textwrap.dedent(body), encoding="utf-8")
        return (sys.executable, str(script))

    return _write


@pytest.fixture
def make_settings(tmp_path):
    """Build settings that keep every file the server writes under tmp_path."""

    def _make(command, **overrides):
        values = {
            "model_command": tuple(command),
            "model_timeout": 10.0,
            "work_dir": tmp_path / "work",
            "archive_dir": tmp_path / "runs",
            "index_path": tmp_path / "index.html",
        }
        values.update(overrides)
        return Settings(**values)

    return _make


@pytest.fixture
def echo_settings(make_settings, echo_model_path):
    return make_settings((sys.executable, str(echo_model_path)))
