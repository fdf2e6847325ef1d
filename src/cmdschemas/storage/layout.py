"""File names and paths of a persisted corpus."""

from __future__ import annotations

from pathlib import Path

INDEX_FILENAME = "index.json"
README_FILENAME = "README.md"
SERVICE_SUMMARY_FILENAME = "_service-summary.json"


def service_dir(root: Path, service: str) -> Path:
    return root / service


def command_path(root: Path, service: str, command: str) -> Path:
    return root / service / f"{command}.json"
