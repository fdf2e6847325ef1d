"""Shared test fixtures for cmdschemas.

Provides reusable fixtures for loading service-model fixtures, creating
isolated config environments, managing output state, and running CLI
commands. These fixtures are automatically discovered by pytest and
available to all test modules without explicit imports.
"""

from __future__ import annotations

import json
import shutil
from pathlib import Path
from typing import Any

import pytest

from cmdschemas.models import ServiceModel
from cmdschemas.output import OutputFormat, OutputManager, reset_output, set_output
from cmdschemas.parser.store import ShapeStore


FIXTURES_DIR = Path(__file__).parent / "fixtures"
BOTOCORE_DATA = FIXTURES_DIR / "botocore_data"
WIDGETS_MODEL = BOTOCORE_DATA / "widgets" / "2021-06-15" / "service-2.json"
GADGETS_MODEL = BOTOCORE_DATA / "gadgets" / "2019-05-05" / "service-2.json"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time.  When Typer's CliRunner redirects those streams during
    a test and the test finishes, the cached references become stale
    ("I/O operation on closed file").  Resetting forces a fresh manager
    to be created on next use.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Service model fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def widgets_raw() -> dict[str, Any]:
    """Raw widgets service model (newest version)."""
    with open(WIDGETS_MODEL) as f:
        return json.load(f)


@pytest.fixture
def gadgets_raw() -> dict[str, Any]:
    """Raw gadgets service model (one missing member shape, one missing input shape)."""
    with open(GADGETS_MODEL) as f:
        return json.load(f)


@pytest.fixture
def widgets_model(widgets_raw: dict[str, Any]) -> ServiceModel:
    return ServiceModel.model_validate(widgets_raw)


@pytest.fixture
def gadgets_model(gadgets_raw: dict[str, Any]) -> ServiceModel:
    return ServiceModel.model_validate(gadgets_raw)


@pytest.fixture
def widgets_store(widgets_model: ServiceModel) -> ShapeStore:
    return ShapeStore.from_model(widgets_model)


@pytest.fixture
def botocore_data(tmp_path: Path) -> Path:
    """A writable copy of the fixture botocore data directory."""
    target = tmp_path / "botocore_data"
    shutil.copytree(BOTOCORE_DATA, target)
    return target


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Sets XDG_CONFIG_HOME, XDG_CACHE_HOME, and XDG_DATA_HOME to
    subdirectories of tmp_path so that tests never touch real user
    config. Clears every environment variable the config layer reads
    and changes the working directory to tmp_path.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setattr("cmdschemas.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path / "cache"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))

    for var in [
        "CMDSCHEMAS_DATA_PATH",
        "BOTOCORE_DATA_PATH",
        "CMDSCHEMAS_OUTPUT_DIR",
        "SCHEMAS_PATH",
        "CMDSCHEMAS_WORKERS",
    ]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a PLAIN-format, quiet OutputManager as the global output."""
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner.

    Returns a CliRunner instance that captures stdout/stderr and
    provides a consistent interface for invoking Typer apps in tests.
    """
    from typer.testing import CliRunner

    return CliRunner()


@pytest.fixture
def cli_app():
    """The root Typer app with every built-in command registered."""
    from cmdschemas.app import app, register_commands

    register_commands()
    return app
