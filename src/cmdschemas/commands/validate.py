"""Validate command -- audit a persisted schema corpus.

Runs :func:`~cmdschemas.validator.audit_corpus` over the output directory
of an extraction run and reports errors and warnings.  Exits 0 when there
are no errors, 1 otherwise; warnings never fail the run.
"""

from __future__ import annotations

from typing import Optional

import typer

from cmdschemas.output import error, format_response, get_output, info, success, warning

_MAX_WARNINGS = 10


def validate_command(
    output_dir: Optional[str] = typer.Option(
        None, "--output-dir", "-o", help="Corpus directory to audit."
    ),
    all_warnings: bool = typer.Option(
        False, "--all-warnings", help="Print every warning instead of the first few."
    ),
) -> None:
    """Audit every file of a persisted corpus.

    Raises:
        typer.Exit: With code 1 when any error was found, or the config
            error's exit code when configuration is invalid.

    Example::

        cmdschemas validate
        cmdschemas validate --output-dir ./schemas --json
    """
    from cmdschemas.config import resolve_config
    from cmdschemas.exceptions import CmdSchemasError
    from cmdschemas.exit_codes import EXIT_VALIDATION_FAILED
    from cmdschemas.output import OutputFormat
    from cmdschemas.validator import audit_corpus

    try:
        config = resolve_config(cli_output_dir=output_dir)
    except CmdSchemasError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    info(f"Validating schemas in {config.output_dir}")
    report = audit_corpus(config.output_dir)

    if get_output().format == OutputFormat.JSON:
        format_response(
            {
                "ok": report.ok,
                "stats": report.stats.model_dump(by_alias=True),
                "errors": report.errors,
                "warnings": report.warnings,
            }
        )
    else:
        stats = report.stats
        info(
            f"{stats.total_services} services, {stats.total_commands} commands, "
            f"{stats.valid_files}/{stats.total_files} files valid"
        )
        for message in report.errors:
            error(message)
        shown = report.warnings if all_warnings else report.warnings[:_MAX_WARNINGS]
        for message in shown:
            warning(message)
        hidden = len(report.warnings) - len(shown)
        if hidden:
            info(f"... and {hidden} more warnings (use --all-warnings)")

    if not report.ok:
        error(f"Validation failed with {len(report.errors)} errors")
        raise typer.Exit(code=EXIT_VALIDATION_FAILED)
    success("All schemas valid")
