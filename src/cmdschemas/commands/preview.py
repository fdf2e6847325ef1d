"""Preview command -- extract one service model and print the schemas.

Nothing is written to disk apart from the remote-model cache.  Useful for
checking a single ``service-2.json`` (local, remote, or piped on stdin)
before running a full extraction.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from cmdschemas.exceptions import CmdSchemasError
from cmdschemas.models import ServiceModel
from cmdschemas.output import error, format_response, info


def _service_name(source: str, model: ServiceModel) -> str:
    """Best-effort service name for a model given without ``--service``.

    A file inside a botocore tree (``<service>/<version>/service-2.json``)
    is named after its service folder; anything else falls back to the
    model's endpoint prefix.
    """
    if source != "-" and not source.startswith(("http://", "https://")):
        parent = Path(source).resolve().parent
        if parent.parent.name and parent.name[:4].isdigit():
            return parent.parent.name
    return model.metadata.endpoint_prefix or "service"


def preview_command(
    source: str = typer.Argument(
        help="service-2.json path, http(s) URL, or '-' for stdin."
    ),
    service: Optional[str] = typer.Option(
        None, "--service", "-s", help="Service name recorded in the schemas."
    ),
    operation: Optional[str] = typer.Option(
        None, "--operation", help="Only show this operation."
    ),
    no_cache: bool = typer.Option(
        False, "--no-cache", help="Always download remote models."
    ),
) -> None:
    """Print the command schemas extracted from one service model.

    Output is a JSON object keyed by command name, or a single schema when
    ``--operation`` is given.

    Raises:
        typer.Exit: With the error's exit code when the model cannot be
            loaded, or code 4 when the operation does not exist.

    Example::

        cmdschemas preview botocore/data/s3/2006-03-01/service-2.json
        cmdschemas preview model.json --operation PutObject --json
        curl -s https://.../service-2.json | cmdschemas preview - --service s3
    """
    from cmdschemas.cache import ModelCache
    from cmdschemas.config import get_cache_dir, resolve_config
    from cmdschemas.exit_codes import EXIT_GENERIC_FAILURE, EXIT_NOT_FOUND
    from cmdschemas.parser.extractor import command_name
    from cmdschemas.parser.loader import load_service_model
    from cmdschemas.pipeline import extract_service

    try:
        config = resolve_config()
        if no_cache:
            config.cache.enabled = False
        with ModelCache(get_cache_dir(), config.cache) as cache:
            model = load_service_model(source, cache=cache)
    except CmdSchemasError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    name = service or _service_name(source, model)

    if operation is not None:
        if operation not in model.operations:
            error(f"Operation '{operation}' not found in {name}")
            raise typer.Exit(code=EXIT_NOT_FOUND)
        model = model.model_copy(
            update={"operations": {operation: model.operations[operation]}}
        )

    extraction = extract_service(name, model, workers=config.workers)
    if operation is not None:
        schema = extraction.schemas.get(command_name(operation))
        if schema is None:
            raise typer.Exit(code=EXIT_GENERIC_FAILURE)
        format_response(schema.to_dict())
        return

    info(f"{name}: {len(extraction.schemas)}/{extraction.operation_count} operations extracted")
    format_response(
        {command: schema.to_dict() for command, schema in extraction.schemas.items()}
    )
