"""Extract command -- build the schema corpus from a botocore data directory.

Discovers every service under the data directory, picks the newest API
version of each, extracts one :class:`~cmdschemas.models.CommandSchema` per
operation, and writes the corpus (command files, service summaries,
``index.json`` and ``README.md``) to the output directory.
"""

from __future__ import annotations

from typing import Optional

import typer

from cmdschemas.exceptions import CmdSchemasError, NotFoundError
from cmdschemas.output import error, get_output, info, success, suggest, warning

_TOP_SERVICES = 10


def extract_command(
    data_path: Optional[str] = typer.Option(
        None, "--data-path", "-d", help="botocore data directory."
    ),
    output_dir: Optional[str] = typer.Option(
        None, "--output-dir", "-o", help="Directory receiving the corpus."
    ),
    services: Optional[list[str]] = typer.Option(
        None, "--service", "-s", help="Only extract this service (repeatable)."
    ),
    workers: Optional[int] = typer.Option(
        None, "--workers", "-w", min=1, help="Parallel extraction workers per service."
    ),
    no_self_check: bool = typer.Option(
        False, "--no-self-check", help="Skip validating schemas right after extraction."
    ),
) -> None:
    """Extract command schemas for every service and persist them.

    Settings not given on the command line come from the environment,
    ``./cmdschemas.json``, or the user config, in that order.

    Raises:
        typer.Exit: With the error's exit code when the configuration is
            invalid or the data directory is missing.

    Example::

        cmdschemas extract --data-path ./botocore/botocore/data
        cmdschemas extract -s s3 -s ec2 --output-dir ./schemas
    """
    from cmdschemas.config import resolve_config
    from cmdschemas.parser.loader import discover_services
    from cmdschemas.pipeline import run_extraction
    from cmdschemas.storage.writer import SchemaWriter

    try:
        config = resolve_config(
            cli_data_path=data_path, cli_output_dir=output_dir, cli_workers=workers
        )
        locations = discover_services(config.data_path, only=services)
    except NotFoundError as exc:
        error(str(exc))
        suggest("git clone https://github.com/boto/botocore.git")
        raise typer.Exit(code=exc.exit_code) from None
    except CmdSchemasError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    if not locations:
        warning(f"No services found under {config.data_path}")
        return

    info(f"Extracting {len(locations)} services from {config.data_path}")
    writer = SchemaWriter(config.output_dir)
    report = run_extraction(
        locations,
        writer=writer,
        workers=config.workers,
        self_check=config.self_check and not no_self_check,
    )
    index_path = writer.write_index(report, config.data_path)

    stats = report.stats
    rows = [
        [extraction.service, str(len(extraction.schemas))]
        for extraction in sorted(
            report.services, key=lambda e: len(e.schemas), reverse=True
        )[:_TOP_SERVICES]
    ]
    get_output().print_table(["Service", "Commands"], rows, title="Top services")

    success(
        f"Extracted {stats.successful_extractions}/{stats.total_operations} operations "
        f"from {stats.total_services} services into {writer.root}"
    )
    if stats.failed_extractions or report.failures:
        warning(f"{len(report.failures)} failures recorded in {index_path}")
    if stats.skipped_members:
        warning(f"{stats.skipped_members} parameters skipped (unresolvable shapes)")
    suggest(f"cmdschemas validate --output-dir {writer.root}")
