"""Runtime lookups over a persisted corpus.

:class:`SchemaRepository` answers the questions a consumer of the corpus
asks at runtime -- which services exist, which commands a service has, what
a command's parameters are -- by reading the files written by
:class:`~cmdschemas.storage.writer.SchemaWriter`.  It holds no state beyond
the corpus root and reads files on demand.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

from cmdschemas.exceptions import CmdSchemasError, NotFoundError
from cmdschemas.storage.layout import (
    INDEX_FILENAME,
    SERVICE_SUMMARY_FILENAME,
    command_path,
    service_dir,
)


class SchemaRepository:
    """Read-only access to a persisted schema corpus.

    Args:
        root: The corpus directory (``output_dir`` of an extraction run).

    Example::

        repo = SchemaRepository("aws-schemas")
        params = repo.get_command_parameters("AddTagsToResourceCommand", "elasticache")
        params["required"]  # ["ResourceName (string) Required", "Tags (array) Required"]
    """

    def __init__(self, root: str | Path) -> None:
        self._root = Path(root)

    @property
    def root(self) -> Path:
        return self._root

    def load_index(self) -> dict[str, Any]:
        """Return the parsed ``index.json``.

        Raises:
            NotFoundError: If the corpus has no index.
        """
        return self._read(self._root / INDEX_FILENAME, "Schema index")

    def list_services(self) -> list[str]:
        """Return the service names recorded in the index."""
        services = self.load_index().get("services", {})
        return list(services) if isinstance(services, dict) else []

    def get_service_summary(self, service: str) -> dict[str, Any]:
        """Return the ``_service-summary.json`` of *service*.

        Raises:
            NotFoundError: If the service has no summary.
        """
        path = service_dir(self._root, service) / SERVICE_SUMMARY_FILENAME
        return self._read(path, f"Service '{service}'")

    def get_service_commands(self, service: str) -> list[str]:
        """Return the command names of *service*, in extraction order."""
        commands = self.get_service_summary(service).get("commands", {})
        return list(commands) if isinstance(commands, dict) else []

    def get_command(self, command: str, service: Optional[str] = None) -> dict[str, Any]:
        """Return a command document.

        Args:
            command: Command name, e.g. ``"PutObjectCommand"``.
            service: Service to look in.  When omitted every service in the
                index is searched and the first match wins.

        Raises:
            NotFoundError: If no matching command file exists.
        """
        if service is not None:
            return self._read(
                command_path(self._root, service, command),
                f"Command '{command}' in service '{service}'",
            )

        for candidate in self.list_services():
            path = command_path(self._root, candidate, command)
            if path.is_file():
                return self._read(path, f"Command '{command}'")

        raise NotFoundError(f"Command '{command}' not found in any service")

    def get_command_parameters(
        self, command: str, service: Optional[str] = None
    ) -> dict[str, Any]:
        """Return a command's parameters as human-readable lines plus the document."""
        schema = self.get_command(command, service)
        summary = schema.get("summary", {})
        return {
            "required": [f"{p} Required" for p in summary.get("required", [])],
            "optional": [f"{p} Optional" for p in summary.get("optional", [])],
            "schema": schema,
        }

    def search_commands(self, term: str) -> list[dict[str, str]]:
        """Find commands whose name contains *term* (case-insensitive)."""
        needle = term.lower()
        results: list[dict[str, str]] = []
        for service in self.list_services():
            try:
                commands = self.get_service_commands(service)
            except NotFoundError:
                continue
            results.extend(
                {"command": command, "service": service}
                for command in commands
                if needle in command.lower()
            )
        return results

    @staticmethod
    def _read(path: Path, what: str) -> dict[str, Any]:
        if not path.is_file():
            raise NotFoundError(f"{what} not found at {path}")
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise CmdSchemasError(f"Cannot read {path}: {exc}") from exc
        if not isinstance(data, dict):
            raise CmdSchemasError(f"Cannot read {path}: expected a JSON object")
        return data
