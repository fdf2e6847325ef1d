"""Extract a flat :class:`~cmdschemas.models.CommandSchema` from one operation.

The single public entry point is :func:`extract_operation`.  It looks up the
operation's input shape, walks that shape's direct members in declaration
order, resolves each member via :func:`~cmdschemas.parser.resolver.resolve_type`
and partitions the resulting descriptors into required and optional names.

Failure policy:

* An operation without an ``input`` yields an empty schema.  This is normal.
* A missing *input* shape raises
  :class:`~cmdschemas.exceptions.InputShapeNotFoundError`; nothing partial is
  returned.
* A missing *member* shape skips only that member and reports a
  :class:`~cmdschemas.models.MemberDiagnostic` next to the schema.
"""

from __future__ import annotations

from typing import Union

from cmdschemas.exceptions import InputShapeNotFoundError, ShapeNotFoundError
from cmdschemas.models import (
    CommandSchema,
    ExtractionResult,
    MemberDiagnostic,
    OperationDef,
    ParameterDescriptor,
    Shape,
    ShapeRef,
)
from cmdschemas.output import debug
from cmdschemas.parser.resolver import resolve_type
from cmdschemas.parser.store import ShapeStore

COMMAND_SUFFIX = "Command"

# Outcome of resolving a single member: built, or skipped with a reason.
_MemberOutcome = Union[ParameterDescriptor, MemberDiagnostic]


def command_name(operation_name: str) -> str:
    """Return the command identifier for an operation (``RunInstancesCommand``)."""
    return f"{operation_name}{COMMAND_SUFFIX}"


def extract_operation(
    service: str,
    operation_name: str,
    operation_def: OperationDef,
    store: ShapeStore,
) -> ExtractionResult:
    """Build the :class:`~cmdschemas.models.CommandSchema` for one operation.

    Args:
        service: Service name the operation belongs to (e.g. ``"s3"``).
        operation_name: Operation name (e.g. ``"PutObject"``).
        operation_def: The operation definition from the service model.
        store: The service's shape table.

    Returns:
        An :class:`~cmdschemas.models.ExtractionResult` holding the schema
        and one diagnostic per skipped member.

    Raises:
        InputShapeNotFoundError: If the operation's input shape is not in
            *store*.

    Example::

        store = ShapeStore.from_model(model)
        result = extract_operation("ec2", "RunInstances", model.operations["RunInstances"], store)
        result.command.required_parameters  # ["MaxCount", "MinCount"]
    """
    input_ref = operation_def.input
    if input_ref is None or not input_ref.shape_name:
        return ExtractionResult(
            command=CommandSchema(
                service=service,
                operation=operation_name,
                documentation=operation_def.documentation,
            )
        )

    input_shape_name = input_ref.shape_name
    if input_shape_name not in store:
        raise InputShapeNotFoundError(input_shape_name, operation_name)
    input_shape = store[input_shape_name]

    debug(f"{service}.{operation_name}: analysing input shape '{input_shape_name}'")

    outcomes = [
        _resolve_member(service, operation_name, member_name, member_ref, input_shape, store)
        for member_name, member_ref in input_shape.members.items()
    ]

    parameters: dict[str, ParameterDescriptor] = {}
    required: list[str] = []
    optional: list[str] = []
    diagnostics: list[MemberDiagnostic] = []

    for outcome in outcomes:
        if isinstance(outcome, MemberDiagnostic):
            diagnostics.append(outcome)
            continue
        parameters[outcome.name] = outcome
        if outcome.required:
            required.append(outcome.name)
        else:
            optional.append(outcome.name)

    return ExtractionResult(
        command=CommandSchema(
            service=service,
            operation=operation_name,
            parameters=parameters,
            required_parameters=required,
            optional_parameters=optional,
            documentation=operation_def.documentation,
        ),
        diagnostics=diagnostics,
    )


def _resolve_member(
    service: str,
    operation_name: str,
    member_name: str,
    member_ref: ShapeRef,
    input_shape: Shape,
    store: ShapeStore,
) -> _MemberOutcome:
    """Resolve one member into a descriptor, or a diagnostic if its shape is missing."""
    try:
        resolved = resolve_type(member_ref, store)
    except ShapeNotFoundError as exc:
        debug(f"{service}.{operation_name}: skipping member '{member_name}': {exc}")
        return MemberDiagnostic(
            service=service,
            operation=operation_name,
            member=member_name,
            shape_name=exc.shape_name,
            message=str(exc),
        )

    return ParameterDescriptor(
        name=member_name,
        type=resolved.type,
        required=member_name in input_shape.required,
        documentation=resolved.documentation,
    )
