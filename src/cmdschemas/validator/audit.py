"""Offline audit of a persisted schema corpus.

Walks the directory written by :class:`~cmdschemas.storage.SchemaWriter`::

    aws-schemas/
    +-- index.json
    +-- README.md
    +-- <service>/
        +-- _service-summary.json
        +-- <Operation>Command.json

and checks the index, every service summary, and every command document.
Command documents go through :func:`~cmdschemas.validator.consistency.validate_schema`
plus two file-level checks: ``command`` must equal the file name and
``service`` must equal the directory name.  The command total is taken from
the index and each summary's ``totalCommands`` is checked against the
command files actually present.

The audit never raises: unreadable files and invalid JSON are recorded as
errors so one broken file cannot stop the rest of the corpus from being
checked.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Optional

from cmdschemas.models import AuditReport
from cmdschemas.output import debug
from cmdschemas.storage.layout import INDEX_FILENAME, SERVICE_SUMMARY_FILENAME
from cmdschemas.validator.consistency import validate_schema

_INDEX_FIELDS = ("generatedAt", "generator", "stats", "services")
_INDEX_STATS_FIELDS = ("totalServices", "totalOperations", "successfulExtractions")
_SUMMARY_FIELDS = ("service", "generatedAt", "totalCommands", "commands")


def audit_corpus(root: str | Path) -> AuditReport:
    """Audit every file of a persisted corpus.

    Args:
        root: The corpus directory (``output_dir`` of an extraction run).

    Returns:
        An :class:`~cmdschemas.models.AuditReport` aggregating errors,
        warnings, and file counts across all services.
    """
    report = AuditReport()
    root = Path(root)
    if not root.is_dir():
        report.errors.append(f"Schemas directory not found: {root}")
        return report

    _audit_index(root, report)

    try:
        service_dirs = sorted(p for p in root.iterdir() if p.is_dir())
    except OSError as exc:
        report.errors.append(f"Could not read schemas directory: {exc}")
        return report

    report.stats.total_services = len(service_dirs)
    for service_dir in service_dirs:
        _audit_service(service_dir, report)

    return report


def _audit_index(root: Path, report: AuditReport) -> None:
    data, problem = _read_json(root / INDEX_FILENAME)
    if problem is not None:
        report.errors.append(f"Invalid index file: {problem}")
        return

    for field in _INDEX_FIELDS:
        if field not in data:
            report.errors.append(f"Index file missing required field: {field}")

    stats = data.get("stats")
    if isinstance(stats, Mapping):
        for field in _INDEX_STATS_FIELDS:
            if field not in stats:
                report.warnings.append(f"Index stats missing field: {field}")
        debug(f"Index reports {stats.get('totalServices', 0)} services")

    services = data.get("services")
    if isinstance(services, Mapping):
        report.stats.total_commands = sum(
            entry.get("commandCount", 0)
            for entry in services.values()
            if isinstance(entry, Mapping) and isinstance(entry.get("commandCount"), int)
        )
        debug(f"Index reports {report.stats.total_commands} commands")


def _audit_service(service_dir: Path, report: AuditReport) -> None:
    service = service_dir.name
    debug(f"Auditing service: {service}")

    summary, problem = _read_json(service_dir / SERVICE_SUMMARY_FILENAME)
    if problem is not None:
        report.errors.append(f"Service {service} missing or invalid summary: {problem}")
    else:
        for field in _SUMMARY_FIELDS:
            if field not in summary:
                report.errors.append(f"Service {service} summary missing field: {field}")
        if "service" in summary and summary["service"] != service:
            report.errors.append(
                f"Service {service} summary has wrong service name: {summary['service']}"
            )

    try:
        command_files = sorted(
            p for p in service_dir.glob("*.json") if not p.name.startswith("_")
        )
    except OSError as exc:
        report.errors.append(f"Could not read service {service} files: {exc}")
        return

    reported = summary.get("totalCommands") if summary is not None else None
    if isinstance(reported, int) and reported != len(command_files):
        report.warnings.append(
            f"Service {service} summary reports {reported} commands "
            f"but {len(command_files)} command files found"
        )

    valid = 0
    for command_file in command_files:
        if _audit_command(service, command_file, report):
            valid += 1

    report.stats.total_files += len(command_files)
    report.stats.valid_files += valid
    report.stats.invalid_files += len(command_files) - valid
    debug(f"{service}: {valid}/{len(command_files)} command files valid")


def _audit_command(service: str, command_file: Path, report: AuditReport) -> bool:
    command = command_file.stem
    label = f"{service}/{command}"

    data, problem = _read_json(command_file)
    if problem is not None:
        report.errors.append(f"Command {label} invalid JSON: {problem}")
        return False

    file_errors: list[str] = []
    if "command" not in data:
        file_errors.append(f"Command {label} missing field: command")
    elif data["command"] != command:
        file_errors.append(f"Command {label} has wrong command name: {data['command']}")
    if "service" in data and data["service"] != service:
        file_errors.append(f"Command {label} has wrong service: {data['service']}")

    result = validate_schema(data, label=label)
    file_errors.extend(result.errors)

    report.errors.extend(file_errors)
    report.warnings.extend(result.warnings)
    return not file_errors


def _read_json(path: Path) -> tuple[Any, Optional[str]]:
    """Read a JSON object from *path*, returning ``(data, problem)``."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        return None, str(exc)
    if not isinstance(data, Mapping):
        return None, f"expected a JSON object, got {type(data).__name__}"
    return data, None
