"""Batch extraction across services and operations.

Two entry points:

* :func:`extract_service` -- every operation of one loaded service model.
* :func:`run_extraction` -- every discovered service of a botocore data
  directory, optionally persisting each service as soon as it is done.

Operations are independent of each other and only read the shared
:class:`~cmdschemas.parser.store.ShapeStore`, so they are extracted on a
thread pool.  Results are always recorded in the model's operation order,
whatever order the workers finish in.

A failing operation (missing input shape, or a schema rejected by the
self-check) is recorded as an :class:`~cmdschemas.models.ExtractionFailure`
and the batch moves on.  A service whose model cannot be loaded is recorded
the same way.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Optional, Sequence, Union

from cmdschemas.exceptions import CmdSchemasError
from cmdschemas.models import (
    ExtractionFailure,
    ExtractionReport,
    ExtractionResult,
    OperationDef,
    ServiceExtraction,
    ServiceLocation,
    ServiceModel,
)
from cmdschemas.output import debug, progress, warning
from cmdschemas.parser.extractor import command_name, extract_operation
from cmdschemas.parser.loader import load_service_model
from cmdschemas.parser.store import ShapeStore
from cmdschemas.storage.writer import SchemaWriter
from cmdschemas.validator.consistency import validate_schema


def extract_service(
    service: str,
    model: ServiceModel,
    *,
    version: Optional[str] = None,
    workers: int = 1,
    self_check: bool = True,
) -> ServiceExtraction:
    """Extract every operation of one service model.

    Args:
        service: Service name (the botocore folder name, e.g. ``"ec2"``).
        model: The validated service model.
        version: API version the model came from, for reporting.
        workers: Number of threads; ``1`` extracts sequentially.
        self_check: Run :func:`~cmdschemas.validator.validate_schema` on
            every schema and reject those with errors.

    Returns:
        A :class:`~cmdschemas.models.ServiceExtraction` with schemas keyed
        by command name, member diagnostics, and per-operation failures.
    """
    store = ShapeStore.from_model(model)
    names = list(model.operations)

    def run(name: str) -> Union[ExtractionResult, ExtractionFailure]:
        return _extract_one(service, name, model.operations[name], store, self_check)

    if workers > 1 and len(names) > 1:
        with ThreadPoolExecutor(max_workers=workers) as pool:
            outcomes = list(pool.map(run, names))
    else:
        outcomes = [run(name) for name in names]

    extraction = ServiceExtraction(
        service=service, version=version, operation_count=len(names)
    )
    for name, outcome in zip(names, outcomes):
        if isinstance(outcome, ExtractionFailure):
            warning(f"Failed to extract {service}.{name}: {outcome.error}")
            extraction.failures.append(outcome)
            continue
        extraction.schemas[command_name(name)] = outcome.command
        for diagnostic in outcome.diagnostics:
            warning(
                f"{service}.{name}: skipped parameter {diagnostic.member}: {diagnostic.message}"
            )
        extraction.diagnostics.extend(outcome.diagnostics)

    return extraction


def _extract_one(
    service: str,
    name: str,
    operation_def: OperationDef,
    store: ShapeStore,
    self_check: bool,
) -> Union[ExtractionResult, ExtractionFailure]:
    try:
        result = extract_operation(service, name, operation_def, store)
        if self_check:
            check = validate_schema(result.command, label=f"{service}/{command_name(name)}")
            check.raise_for_errors()
            for message in check.warnings:
                debug(message)
        return result
    except CmdSchemasError as exc:
        return ExtractionFailure(service=service, operation=name, error=str(exc))


def run_extraction(
    locations: Sequence[ServiceLocation],
    *,
    writer: Optional[SchemaWriter] = None,
    workers: int = 1,
    self_check: bool = True,
) -> ExtractionReport:
    """Extract every service in *locations*.

    Args:
        locations: Services to process, as returned by
            :func:`~cmdschemas.parser.loader.discover_services`.
        writer: When given, each service is persisted right after it is
            extracted.  The index is left to the caller.
        workers: Threads per service.
        self_check: Validate every schema right after extraction.

    Returns:
        The aggregated :class:`~cmdschemas.models.ExtractionReport`.
    """
    report = ExtractionReport()
    report.stats.total_services = len(locations)

    for location in locations:
        progress(f"Parsing {location.name} ({location.version})")
        try:
            model = load_service_model(location.service_file)
        except CmdSchemasError as exc:
            warning(f"Failed to load {location.name}: {exc}")
            report.failures.append(ExtractionFailure(service=location.name, error=str(exc)))
            continue

        debug(
            f"{location.name}: {model.metadata.service_full_name or location.name}, "
            f"protocol {model.metadata.protocol or 'unknown'}, "
            f"{len(model.operations)} operations"
        )
        extraction = extract_service(
            location.name,
            model,
            version=location.version,
            workers=workers,
            self_check=self_check,
        )
        _record(report, extraction)

        if writer is not None and extraction.schemas:
            writer.write_service(location.name, extraction.schemas)

    return report


def _record(report: ExtractionReport, extraction: ServiceExtraction) -> None:
    stats = report.stats
    stats.total_operations += extraction.operation_count
    stats.successful_extractions += len(extraction.schemas)
    stats.failed_extractions += len(extraction.failures)
    stats.skipped_members += len(extraction.diagnostics)
    report.services.append(extraction)
    report.failures.extend(extraction.failures)
