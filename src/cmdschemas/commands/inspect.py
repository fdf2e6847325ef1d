"""Inspect commands -- look up schemas in a persisted corpus.

Provides the ``cmdschemas inspect`` sub-command group with read-only
commands over the output of ``cmdschemas extract``: the services in the
index, the commands of one service, a single command's parameters, and a
name search across all services.  Every sub-command goes through
:class:`~cmdschemas.storage.SchemaRepository`.
"""

from __future__ import annotations

from typing import Optional

import typer

from cmdschemas.exceptions import CmdSchemasError
from cmdschemas.output import error, format_response, get_output, info
from cmdschemas.storage import SchemaRepository


inspect_app = typer.Typer(no_args_is_help=True)


def _open_repository(output_dir: Optional[str]) -> SchemaRepository:
    """Resolve the corpus directory and return a repository over it.

    Raises:
        typer.Exit: With the config error's exit code when configuration
            cannot be resolved.
    """
    from cmdschemas.config import resolve_config

    try:
        config = resolve_config(cli_output_dir=output_dir)
    except CmdSchemasError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
    return SchemaRepository(config.output_dir)


def _fail(exc: CmdSchemasError) -> typer.Exit:
    error(str(exc))
    return typer.Exit(code=exc.exit_code)


@inspect_app.command("services")
def inspect_services(
    output_dir: Optional[str] = typer.Option(
        None, "--output-dir", "-o", help="Corpus directory."
    ),
) -> None:
    """List the services recorded in the corpus index.

    Example::

        cmdschemas inspect services
    """
    repo = _open_repository(output_dir)
    try:
        services = repo.load_index().get("services", {})
    except CmdSchemasError as exc:
        raise _fail(exc) from None

    rows = [
        [name, str(entry.get("commandCount", 0))]
        for name, entry in services.items()
        if isinstance(entry, dict)
    ]
    get_output().print_table(["Service", "Commands"], rows, title=f"Services ({len(rows)})")


@inspect_app.command("commands")
def inspect_commands(
    service: str = typer.Argument(help="Service name, e.g. 'elasticache'."),
    output_dir: Optional[str] = typer.Option(
        None, "--output-dir", "-o", help="Corpus directory."
    ),
) -> None:
    """List the commands of one service with their parameter counts.

    Example::

        cmdschemas inspect commands elasticache
    """
    repo = _open_repository(output_dir)
    try:
        summary = repo.get_service_summary(service)
    except CmdSchemasError as exc:
        raise _fail(exc) from None

    rows = [
        [
            command,
            str(entry.get("requiredCount", 0)),
            str(entry.get("optionalCount", 0)),
        ]
        for command, entry in summary.get("commands", {}).items()
    ]
    get_output().print_table(
        ["Command", "Required", "Optional"], rows, title=f"{service} ({len(rows)})"
    )


@inspect_app.command("command")
def inspect_command(
    name: str = typer.Argument(help="Command name, e.g. 'AddTagsToResourceCommand'."),
    service: Optional[str] = typer.Option(
        None, "--service", "-s", help="Service to look in (default: search all)."
    ),
    output_dir: Optional[str] = typer.Option(
        None, "--output-dir", "-o", help="Corpus directory."
    ),
) -> None:
    """Show one command's parameters.

    Example::

        cmdschemas inspect command AddTagsToResourceCommand --service elasticache
        cmdschemas inspect command PutObjectCommand --json
    """
    from cmdschemas.output import OutputFormat

    repo = _open_repository(output_dir)
    try:
        params = repo.get_command_parameters(name, service)
    except CmdSchemasError as exc:
        raise _fail(exc) from None

    schema = params["schema"]
    if get_output().format == OutputFormat.JSON:
        format_response(schema)
        return

    info(f"{schema.get('service', '?')}.{schema.get('operation', name)}")
    if schema.get("documentation"):
        info(schema["documentation"])

    parameters = schema.get("parameters", {})
    rows = [
        [
            param,
            str(parameters.get(param, {}).get("type", "-")),
            label,
            str(parameters.get(param, {}).get("documentation", ""))[:60],
        ]
        for key, label in (("requiredParameters", "yes"), ("optionalParameters", ""))
        for param in schema.get(key, [])
    ]
    get_output().print_table(
        ["Parameter", "Type", "Required", "Documentation"], rows, title=name
    )


@inspect_app.command("search")
def inspect_search(
    term: str = typer.Argument(help="Case-insensitive substring of a command name."),
    output_dir: Optional[str] = typer.Option(
        None, "--output-dir", "-o", help="Corpus directory."
    ),
) -> None:
    """Find commands by name across every service.

    Example::

        cmdschemas inspect search tags
    """
    repo = _open_repository(output_dir)
    try:
        matches = repo.search_commands(term)
    except CmdSchemasError as exc:
        raise _fail(exc) from None

    if not matches:
        info(f"No commands matching '{term}'.")
        return
    rows = [[m["service"], m["command"]] for m in matches]
    get_output().print_table(["Service", "Command"], rows, title=f"Matches ({len(rows)})")
