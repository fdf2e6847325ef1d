"""Persist extracted command schemas as a folder-per-service corpus.

Layout written by :class:`SchemaWriter`::

    aws-schemas/
    +-- index.json                       # stats, services, errors
    +-- README.md
    +-- elasticache/
        +-- _service-summary.json
        +-- AddTagsToResourceCommand.json

Each command document carries the :class:`~cmdschemas.models.CommandSchema`
fields unchanged plus the derived ``command``, ``generatedAt``,
``parameterCount`` and ``summary`` views.  Every file is written with
:func:`~cmdschemas.config.atomic_write`.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

from cmdschemas import __version__
from cmdschemas.config import atomic_write
from cmdschemas.models import CommandSchema, ExtractionReport
from cmdschemas.output import debug
from cmdschemas.storage.layout import (
    INDEX_FILENAME,
    README_FILENAME,
    SERVICE_SUMMARY_FILENAME,
    command_path,
    service_dir,
)

GENERATOR_NAME = "cmdschemas"
SOURCE_NAME = "BOTOCORE_SERVICE_2_JSON_FILES"


def _timestamp(moment: Optional[datetime] = None) -> str:
    moment = moment or datetime.now(timezone.utc)
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace(
        "+00:00", "Z"
    )


def _dump(data: Any) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


def _typed_names(schema: CommandSchema, names: list[str]) -> list[str]:
    return [f"{name} ({schema.parameters[name].type.value})" for name in names]


def command_document(
    command: str, schema: CommandSchema, generated_at: str
) -> dict[str, Any]:
    """Build the persisted JSON document for one command."""
    return {
        "command": command,
        "service": schema.service,
        "operation": schema.operation,
        "generatedAt": generated_at,
        "parameters": {
            name: param.model_dump(mode="json") for name, param in schema.parameters.items()
        },
        "requiredParameters": list(schema.required_parameters),
        "optionalParameters": list(schema.optional_parameters),
        "documentation": schema.documentation,
        "parameterCount": len(schema.parameters),
        "summary": {
            "required": _typed_names(schema, schema.required_parameters),
            "optional": _typed_names(schema, schema.optional_parameters),
        },
    }


def service_summary(
    service: str, schemas: Mapping[str, CommandSchema], generated_at: str
) -> dict[str, Any]:
    """Build the ``_service-summary.json`` document for one service."""
    return {
        "service": service,
        "generatedAt": generated_at,
        "totalCommands": len(schemas),
        "commands": {
            command: {
                "operation": schema.operation,
                "parameterCount": len(schema.parameters),
                "requiredCount": len(schema.required_parameters),
                "optionalCount": len(schema.optional_parameters),
                "required": list(schema.required_parameters),
                "optional": list(schema.optional_parameters),
            }
            for command, schema in schemas.items()
        },
    }


class SchemaWriter:
    """Write command schemas, service summaries, the index, and a README.

    Args:
        output_dir: Root of the corpus; created on first write.
        generated_at: Timestamp stamped into every document.  Defaults to
            the moment the writer is created, so one run shares one stamp.
    """

    def __init__(self, output_dir: str | Path, generated_at: Optional[datetime] = None) -> None:
        self._root = Path(output_dir)
        self._generated_at = _timestamp(generated_at)

    @property
    def root(self) -> Path:
        return self._root

    @property
    def generated_at(self) -> str:
        return self._generated_at

    def write_service(self, service: str, schemas: Mapping[str, CommandSchema]) -> Path:
        """Write one file per command plus the service summary.

        Args:
            service: Service name; becomes the folder name.
            schemas: Command name -> schema, in the order to record them.

        Returns:
            The service folder.
        """
        folder = service_dir(self._root, service)
        for command, schema in schemas.items():
            atomic_write(
                command_path(self._root, service, command),
                _dump(command_document(command, schema, self._generated_at)),
            )
        atomic_write(
            folder / SERVICE_SUMMARY_FILENAME,
            _dump(service_summary(service, schemas, self._generated_at)),
        )
        debug(f"Wrote {service}/ ({len(schemas)} commands)")
        return folder

    def write_index(self, report: ExtractionReport, data_path: str) -> Path:
        """Write ``index.json`` and ``README.md`` describing the whole run.

        Returns:
            Path to ``index.json``.
        """
        index = self.index_document(report, data_path)
        path = self._root / INDEX_FILENAME
        atomic_write(path, _dump(index))
        atomic_write(self._root / README_FILENAME, render_readme(index))
        return path

    def index_document(self, report: ExtractionReport, data_path: str) -> dict[str, Any]:
        services: dict[str, dict[str, Any]] = {}
        for extraction in report.services:
            if not extraction.schemas:
                continue
            services[extraction.service] = {
                "commandCount": len(extraction.schemas),
                "commands": list(extraction.schemas),
            }

        return {
            "generatedAt": self._generated_at,
            "generator": GENERATOR_NAME,
            "version": __version__,
            "source": SOURCE_NAME,
            "botocoreDataPath": data_path,
            "stats": report.stats.model_dump(by_alias=True),
            "organization": "BY_SERVICE_FOLDERS",
            "structure": {
                "description": "Each service has its own folder with individual command files",
                "example": f"{self._root.name}/elasticache/AddTagsToResourceCommand.json",
            },
            "services": services,
            "errors": [f.model_dump(exclude_none=True) for f in report.failures],
        }


def render_readme(index: Mapping[str, Any]) -> str:
    """Render the corpus README from an index document."""
    stats = index.get("stats", {})
    services = index.get("services", {})

    lines = [
        "# AWS Command Schemas",
        "",
        "Generated from botocore service-2.json files.",
        "",
        "## Structure",
        "",
        "```",
        "index.json                    # Main index of all services",
        "README.md                     # This file",
        "<service>/",
        "    _service-summary.json     # Service summary",
        "    <Operation>Command.json   # One file per command",
        "```",
        "",
        "## Usage",
        "",
        "```python",
        "import json",
        "",
        'with open("elasticache/AddTagsToResourceCommand.json") as f:',
        "    schema = json.load(f)",
        'print(schema["requiredParameters"])',
        "```",
        "",
        "Or from the command line:",
        "",
        "```",
        "cmdschemas inspect command AddTagsToResourceCommand --service elasticache",
        "```",
        "",
        "## Statistics",
        "",
        f"- **Total Services**: {stats.get('totalServices', 0)}",
        f"- **Total Operations**: {stats.get('totalOperations', 0)}",
        f"- **Successful Extractions**: {stats.get('successfulExtractions', 0)}",
        f"- **Failed Extractions**: {stats.get('failedExtractions', 0)}",
        "",
        "## Services",
        "",
    ]
    lines.extend(
        f"- **{name}**: {info.get('commandCount', 0)} commands"
        for name, info in services.items()
    )
    lines.extend(
        [
            "",
            "## Generated",
            "",
            f"- **Date**: {index.get('generatedAt', '-')}",
            f"- **Source**: {index.get('source', '-')}",
            f"- **Generator**: {index.get('generator', '-')}",
            "",
        ]
    )
    return "\n".join(lines)
