"""Structural consistency checks for a single command schema.

:func:`validate_schema` is a pure function: it accepts a freshly extracted
:class:`~cmdschemas.models.CommandSchema` or a raw mapping reloaded from a
persisted JSON document, never raises, and returns the same
:class:`~cmdschemas.models.ValidationResult` every time it sees the same
input.

**Errors** (schema unusable):

* one of ``service``, ``operation``, ``parameters``, ``requiredParameters``,
  ``optionalParameters`` is missing or has the wrong container type;
* a descriptor is not an object, lacks ``name``/``type``, has a null
  ``type``, or its ``name`` differs from its key;
* ``required`` is not a boolean, or contradicts the list holding the name;
* a name appears in both the required and the optional list;
* a listed name has no entry in ``parameters``.

**Warnings** (schema usable but suspicious):

* a parameter defined in ``parameters`` but listed nowhere;
* a ``type`` outside the known set (kept as a forward-compatibility
  safeguard for shape kinds added later);
* a name repeated within one list.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Optional, Union

from cmdschemas.models import CommandSchema, ParamType, ValidationResult

REQUIRED_FIELDS = (
    "service",
    "operation",
    "parameters",
    "requiredParameters",
    "optionalParameters",
)

KNOWN_TYPES = frozenset(t.value for t in ParamType)


def validate_schema(
    schema: Union[CommandSchema, Mapping[str, Any]],
    label: Optional[str] = None,
) -> ValidationResult:
    """Check a command schema against its structural invariants.

    Args:
        schema: A :class:`~cmdschemas.models.CommandSchema` or its persisted
            dict form (camelCase keys).
        label: Prefix for every message, e.g. ``"ec2/RunInstancesCommand"``.
            Derived from the schema's service and command/operation when
            omitted.

    Returns:
        The collected errors and warnings, in a deterministic order.
    """
    data: Any = schema.to_dict() if isinstance(schema, CommandSchema) else schema
    if not isinstance(data, Mapping):
        prefix = label or "<schema>"
        return ValidationResult(
            errors=[f"{prefix}: schema must be an object, got {type(data).__name__}"]
        )

    prefix = label or _default_label(data)
    errors: list[str] = []
    warnings: list[str] = []

    for field in REQUIRED_FIELDS:
        if field not in data:
            errors.append(f"{prefix}: missing required field '{field}'")

    parameters = _mapping_field(data, "parameters", prefix, errors)
    required = _name_list_field(data, "requiredParameters", prefix, errors)
    optional = _name_list_field(data, "optionalParameters", prefix, errors)
    required_set = set(required)
    optional_set = set(optional)

    for key, descriptor in parameters.items():
        _check_descriptor(key, descriptor, required_set, optional_set, prefix, errors, warnings)

    for list_name, names in (("requiredParameters", required), ("optionalParameters", optional)):
        for name in _repeated(names):
            warnings.append(f"{prefix}: parameter {name} listed more than once in {list_name}")

    in_both = [name for name in _unique(required) if name in optional_set]
    if in_both:
        errors.append(
            f"{prefix}: parameters in both required and optional lists: {', '.join(in_both)}"
        )

    for name in _unique(required + optional):
        if name not in parameters:
            errors.append(f"{prefix}: lists parameter {name} but no definition found")

    for key in parameters:
        if key not in required_set and key not in optional_set:
            warnings.append(
                f"{prefix}: defines parameter {key} but not in required/optional lists"
            )

    return ValidationResult(errors=errors, warnings=warnings)


def _check_descriptor(
    key: Any,
    descriptor: Any,
    required_set: set[str],
    optional_set: set[str],
    prefix: str,
    errors: list[str],
    warnings: list[str],
) -> None:
    where = f"{prefix}:{key}"
    if not isinstance(descriptor, Mapping):
        errors.append(f"{where} must be an object, got {type(descriptor).__name__}")
        return

    for field in ("name", "type"):
        if field not in descriptor:
            errors.append(f"{where} missing field '{field}'")

    if "name" in descriptor and descriptor["name"] != key:
        errors.append(f"{where} has wrong name: {descriptor['name']}")

    if "type" in descriptor:
        param_type = descriptor["type"]
        if param_type is None:
            errors.append(f"{where} has null type")
        elif not (isinstance(param_type, str) and param_type in KNOWN_TYPES):
            warnings.append(f"{where} has unusual type: {param_type}")

    if "required" in descriptor:
        flag = descriptor["required"]
        if not isinstance(flag, bool):
            errors.append(
                f"{where} required field must be boolean, got: {type(flag).__name__}"
            )
        elif flag and key in optional_set:
            errors.append(f"{where} is marked required but listed in optionalParameters")
        elif not flag and key in required_set:
            errors.append(f"{where} is marked optional but listed in requiredParameters")


def _mapping_field(
    data: Mapping[str, Any], field: str, prefix: str, errors: list[str]
) -> Mapping[Any, Any]:
    if field not in data:
        return {}
    value = data[field]
    if not isinstance(value, Mapping):
        errors.append(f"{prefix}: {field} must be an object, got {type(value).__name__}")
        return {}
    return value


def _name_list_field(
    data: Mapping[str, Any], field: str, prefix: str, errors: list[str]
) -> list[str]:
    if field not in data:
        return []
    value = data[field]
    if not isinstance(value, list):
        errors.append(f"{prefix}: {field} must be an array, got {type(value).__name__}")
        return []
    names: list[str] = []
    for entry in value:
        if isinstance(entry, str):
            names.append(entry)
        else:
            errors.append(f"{prefix}: {field} entry must be a string, got {entry!r}")
    return names


def _default_label(data: Mapping[str, Any]) -> str:
    service = data.get("service")
    command = data.get("command") or data.get("operation")
    if isinstance(service, str) and isinstance(command, str):
        return f"{service}/{command}"
    return "<schema>"


def _unique(names: list[str]) -> list[str]:
    return list(dict.fromkeys(names))


def _repeated(names: list[str]) -> list[str]:
    seen: set[str] = set()
    repeated: list[str] = []
    for name in names:
        if name in seen and name not in repeated:
            repeated.append(name)
        seen.add(name)
    return repeated
