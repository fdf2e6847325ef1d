"""Resolve a shape reference to a primitive parameter kind.

A structure member in a botocore model points at another shape by name.
:func:`resolve_type` follows exactly one such reference and maps the target
shape's ``type`` onto the closed :class:`~cmdschemas.models.ParamType` set.
The mapping is deliberately shallow: list element types and structure member
types are never expanded.

Documentation for the reference is picked from the member first, then the
shape, and is always passed through :func:`clean_documentation`.
"""

from __future__ import annotations

import re
from typing import Optional

from cmdschemas.models import (
    MAX_DOCUMENTATION_LENGTH,
    ParamType,
    ResolvedType,
    ShapeRef,
)
from cmdschemas.output import debug
from cmdschemas.parser.store import ShapeStore

# botocore shape kind -> resolved parameter kind
_KIND_MAP: dict[str, ParamType] = {
    "string": ParamType.STRING,
    "integer": ParamType.NUMBER,
    "long": ParamType.NUMBER,
    "float": ParamType.NUMBER,
    "double": ParamType.NUMBER,
    "boolean": ParamType.BOOLEAN,
    "timestamp": ParamType.STRING,  # ISO-8601 string
    "blob": ParamType.STRING,  # base64 string
    "list": ParamType.ARRAY,
    "map": ParamType.OBJECT,
    "structure": ParamType.OBJECT,
}

_TAG_RE = re.compile(r"<[^>]*>")
_WHITESPACE_RE = re.compile(r"\s+")


def resolve_type(ref: ShapeRef, store: ShapeStore) -> ResolvedType:
    """Resolve *ref* to a ``(type, documentation)`` pair.

    Args:
        ref: The reference site, typically one structure member.
        store: The shape table of the service being extracted.

    Returns:
        A :class:`~cmdschemas.models.ResolvedType` whose ``type`` is always
        one of the six :class:`~cmdschemas.models.ParamType` values and
        whose documentation is cleaned and at most 200 characters long.

    Raises:
        ShapeNotFoundError: If ``ref`` names a shape that is not in
            *store*.  The caller decides whether this is recoverable.
    """
    if ref.shape_name is None:
        # A reference without a target carries nothing but its own docs.
        return ResolvedType(
            type=ParamType.UNKNOWN,
            documentation=clean_documentation(ref.documentation),
        )

    shape = store.lookup(ref.shape_name)
    return ResolvedType(
        type=map_shape_kind(shape.type),
        documentation=clean_documentation(ref.documentation or shape.documentation),
    )


def map_shape_kind(kind: Optional[str]) -> ParamType:
    """Map a botocore shape kind onto :class:`~cmdschemas.models.ParamType`.

    Total over all inputs: unrecognised or missing kinds fall back to
    ``ParamType.UNKNOWN``.
    """
    if kind is None:
        return ParamType.UNKNOWN
    mapped = _KIND_MAP.get(kind)
    if mapped is None:
        debug(f"Unrecognised shape kind '{kind}', resolving as unknown")
        return ParamType.UNKNOWN
    return mapped


def clean_documentation(doc: Optional[str]) -> str:
    """Reduce vendor HTML documentation to short plain text.

    Steps, in order: drop every ``<...>`` tag, collapse whitespace runs to
    a single space, trim both ends, then cut to the first 200 characters.
    The cut adds no ellipsis.  If it lands right after whitespace, that
    trailing whitespace is dropped so that cleaning is idempotent.

    Args:
        doc: Raw documentation, or ``None``.

    Returns:
        The cleaned text; ``""`` for ``None`` or empty input.

    Example::

        >>> clean_documentation("<p>The  name of\\n the <b>bucket</b>.</p>")
        'The name of the bucket.'
    """
    if not doc:
        return ""
    text = _TAG_RE.sub("", doc)
    text = _WHITESPACE_RE.sub(" ", text).strip()
    return text[:MAX_DOCUMENTATION_LENGTH].rstrip()
