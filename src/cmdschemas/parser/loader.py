"""Discover and load botocore service models from disk, a URL, or stdin.

A botocore data directory holds one folder per service, each containing one
folder per API version named ``YYYY-MM-DD``::

    botocore/botocore/data/
    +-- ec2/
    |   +-- 2016-11-15/service-2.json
    +-- s3/
        +-- 2006-03-01/service-2.json

The public functions are:

* :func:`discover_services` -- list every service with its newest API version.
* :func:`latest_api_version` -- pick the newest version folder of one service.
* :func:`load_service_model` -- read and validate a single ``service-2.json``
  from a file path, an ``http(s)`` URL, or ``-`` for stdin.

JSON and YAML documents are both accepted; the format is detected from the
file extension, the response content type, or the content itself.
"""

from __future__ import annotations

import json
import re
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any, Iterable, Optional

import httpx
import yaml
from pydantic import ValidationError

from cmdschemas.exceptions import NotFoundError, ServiceModelError
from cmdschemas.models import ServiceLocation, ServiceModel
from cmdschemas.output import debug, warning

if TYPE_CHECKING:
    from cmdschemas.cache import ModelCache

_API_VERSION_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def discover_services(
    data_path: str | Path,
    only: Optional[Iterable[str]] = None,
) -> list[ServiceLocation]:
    """Find every service directory and its newest API version.

    Entries that are not directories, and services without any
    ``YYYY-MM-DD`` version folder, are skipped.

    Args:
        data_path: The botocore ``data`` directory.
        only: Optional service names to restrict discovery to.

    Returns:
        Service locations sorted by service name.

    Raises:
        NotFoundError: If *data_path* is not a directory.
    """
    root = Path(data_path)
    if not root.is_dir():
        raise NotFoundError(f"botocore data directory not found: {root}")

    wanted = set(only) if only else None
    locations: list[ServiceLocation] = []

    for service_dir in sorted(root.iterdir()):
        if not service_dir.is_dir():
            continue
        if wanted is not None and service_dir.name not in wanted:
            continue

        version = latest_api_version(service_dir)
        if version is None:
            debug(f"Skipped {service_dir.name}: no API version folders")
            continue

        locations.append(
            ServiceLocation(name=service_dir.name, version=version, path=service_dir)
        )
        debug(f"Found {service_dir.name} ({version})")

    if wanted is not None:
        missing = wanted - {loc.name for loc in locations}
        for name in sorted(missing):
            warning(f"Service '{name}' not found under {root}")

    return locations


def latest_api_version(service_path: str | Path) -> Optional[str]:
    """Return the newest ``YYYY-MM-DD`` folder name of a service, or ``None``.

    ISO dates sort lexically, so the newest version is simply the largest
    name.
    """
    path = Path(service_path)
    try:
        versions = [
            entry.name
            for entry in path.iterdir()
            if entry.is_dir() and _API_VERSION_RE.match(entry.name)
        ]
    except OSError:
        return None
    return max(versions) if versions else None


def load_service_model(
    source: str | Path,
    cache: Optional[ModelCache] = None,
) -> ServiceModel:
    """Load and validate a service model from a URL, file path, or stdin (``-``).

    Args:
        source: An ``http(s)`` URL, a file path, or ``"-"`` for stdin.
        cache: Optional cache for remote models; ignored for local sources.

    Returns:
        The validated :class:`~cmdschemas.models.ServiceModel`.

    Raises:
        ServiceModelError: If the source cannot be read, parsed, or does
            not look like a service model.
    """
    source = str(source)
    if source == "-":
        raw = _load_from_stdin()
    elif source.startswith(("http://", "https://")):
        raw = _load_from_url(source, cache)
    else:
        raw = _load_from_file(source)
    return parse_service_model(raw, origin=source)


def parse_service_model(raw: dict[str, Any], origin: str = "<dict>") -> ServiceModel:
    """Validate a raw service-model dict into a :class:`~cmdschemas.models.ServiceModel`.

    Raises:
        ServiceModelError: If the dict is not a valid service model.
    """
    if "operations" not in raw and "shapes" not in raw:
        raise ServiceModelError(
            f"{origin} is not a service model (no 'operations' or 'shapes')"
        )
    try:
        return ServiceModel.model_validate(raw)
    except ValidationError as exc:
        raise ServiceModelError(f"Invalid service model {origin}: {exc}") from exc


def _load_from_stdin() -> dict[str, Any]:
    """Read a service model from stdin.

    Raises:
        ServiceModelError: If stdin is empty or content cannot be parsed.
    """
    try:
        content = sys.stdin.read()
    except OSError as exc:
        raise ServiceModelError(f"Failed to read from stdin: {exc}") from exc

    if not content.strip():
        raise ServiceModelError("No input received from stdin")

    return _parse_content(content, hint="stdin")


def _load_from_url(url: str, cache: Optional[ModelCache] = None) -> dict[str, Any]:
    """Fetch a service model over HTTP(S), consulting *cache* first.

    Raises:
        ServiceModelError: If the URL cannot be fetched or parsed.
    """
    if cache is not None:
        cached = cache.get(url)
        if cached is not None:
            debug(f"Using cached model for {url}")
            return cached

    try:
        response = httpx.get(url, timeout=30.0, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise ServiceModelError(
            f"HTTP {exc.response.status_code} fetching service model from {url}"
        ) from exc
    except httpx.RequestError as exc:
        raise ServiceModelError(f"Failed to fetch service model from {url}: {exc}") from exc

    content_type = response.headers.get("content-type", "")
    hint = ""
    if "json" in content_type:
        hint = "json"
    elif "yaml" in content_type or "yml" in content_type:
        hint = "yaml"

    raw = _parse_content(response.text, hint=hint)
    if cache is not None:
        cache.set(url, raw)
    return raw


def _load_from_file(path: str) -> dict[str, Any]:
    """Load a service model from a local JSON or YAML file.

    Raises:
        ServiceModelError: If the file is missing, unreadable, or unparsable.
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise ServiceModelError(f"Service model file not found: {path}")

    try:
        content = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ServiceModelError(f"Failed to read service model {path}: {exc}") from exc

    if not content.strip():
        raise ServiceModelError(f"Service model file is empty: {path}")

    suffix = file_path.suffix.lower()
    hint = ""
    if suffix == ".json":
        hint = "json"
    elif suffix in (".yaml", ".yml"):
        hint = "yaml"

    return _parse_content(content, hint=hint)


def _parse_content(content: str, hint: str = "") -> dict[str, Any]:
    """Parse content as JSON or YAML.

    JSON is tried first unless the hint says YAML; an explicit JSON hint
    disables the YAML fallback.

    Raises:
        ServiceModelError: If the content cannot be parsed as either format,
            or does not hold a mapping.
    """
    json_error: Exception | None = None
    yaml_error: Exception | None = None

    if hint != "yaml":
        try:
            result = json.loads(content)
        except json.JSONDecodeError as exc:
            json_error = exc
            if hint == "json":
                raise ServiceModelError(f"Invalid JSON: {exc}") from exc
        else:
            if not isinstance(result, dict):
                raise ServiceModelError(
                    f"Service model must be a JSON/YAML object (got {type(result).__name__})"
                )
            return result

    try:
        result = yaml.safe_load(content)
    except yaml.YAMLError as exc:
        yaml_error = exc
    else:
        if not isinstance(result, dict):
            got = type(result).__name__ if result is not None else "empty document"
            raise ServiceModelError(f"Service model must be a JSON/YAML object (got {got})")
        return result

    msg = "Failed to parse service model as JSON or YAML"
    if json_error:
        msg += f"\n  JSON error: {json_error}"
    if yaml_error:
        msg += f"\n  YAML error: {yaml_error}"
    raise ServiceModelError(msg)
