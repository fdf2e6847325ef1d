"""Canonical Pydantic models shared across all cmdschemas modules.

This is the single source of truth for data shapes in the project. Every other
module imports from here rather than defining its own models. The models fall
into four groups:

**Service model input** -- the botocore ``service-2.json`` document, kept as an
immutable name -> definition table:
    :class:`ShapeRef`, :class:`Shape`, :class:`OperationDef`,
    :class:`ServiceMetadata`, and :class:`ServiceModel`.

**Extraction output** -- the flat per-operation parameter model:
    :class:`ParamType`, :class:`ResolvedType`, :class:`ParameterDescriptor`,
    :class:`CommandSchema`, :class:`MemberDiagnostic`, and
    :class:`ExtractionResult`.

**Batch and audit reports**:
    :class:`ServiceLocation`, :class:`ExtractionStats`,
    :class:`ExtractionFailure`, :class:`ServiceExtraction`,
    :class:`ExtractionReport`, :class:`ValidationResult`,
    :class:`AuditStats`, and :class:`AuditReport`.

**Configuration** -- serialised as JSON in the user's config directory:
    :class:`OutputConfig`, :class:`CacheConfig`, and :class:`GlobalConfig`.

Models that mirror persisted JSON use camelCase aliases; always dump them
with ``by_alias=True``.
"""

from __future__ import annotations

import enum
from pathlib import Path
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from cmdschemas.exceptions import StructuralInconsistencyError


MAX_DOCUMENTATION_LENGTH = 200
"""Hard upper bound on cleaned parameter documentation, in characters."""


# --- Service model input ---


class ShapeRef(BaseModel):
    """A reference site pointing at a shape by name.

    Appears as a structure member and as an operation's ``input``. The
    reference may carry its own ``documentation`` which takes precedence
    over the referenced shape's documentation. Other botocore keys
    (``locationName``, ``location``, ...) are preserved as extras.
    """

    model_config = ConfigDict(extra="allow", frozen=True, populate_by_name=True)

    shape_name: Optional[str] = Field(default=None, alias="shape")
    documentation: Optional[str] = None


class Shape(BaseModel):
    """A named type definition: a primitive, list, map, or structure.

    Only the fields the extractor reads are declared; ``member``, ``key``,
    ``value``, ``enum``, ``min``/``max`` and friends survive in
    ``model_extra``. ``members`` keeps the source document's declaration
    order.
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    type: Optional[str] = None
    members: dict[str, ShapeRef] = Field(default_factory=dict)
    required: list[str] = Field(default_factory=list)
    documentation: Optional[str] = None


class OperationDef(BaseModel):
    """One API operation: an optional input shape plus documentation."""

    model_config = ConfigDict(extra="allow", frozen=True)

    name: Optional[str] = None
    input: Optional[ShapeRef] = None
    documentation: Optional[str] = None


class ServiceMetadata(BaseModel):
    """The ``metadata`` block of a service model."""

    model_config = ConfigDict(extra="allow", frozen=True, populate_by_name=True)

    api_version: Optional[str] = Field(default=None, alias="apiVersion")
    service_full_name: Optional[str] = Field(default=None, alias="serviceFullName")
    protocol: Optional[str] = None
    endpoint_prefix: Optional[str] = Field(default=None, alias="endpointPrefix")


class ServiceModel(BaseModel):
    """A complete ``service-2.json`` document for one service + API version."""

    model_config = ConfigDict(extra="allow", frozen=True)

    metadata: ServiceMetadata = Field(default_factory=ServiceMetadata)
    operations: dict[str, OperationDef] = Field(default_factory=dict)
    shapes: dict[str, Shape] = Field(default_factory=dict)


# --- Extraction output ---


class ParamType(str, enum.Enum):
    """The closed set of resolved parameter kinds.

    ``UNKNOWN`` is the explicit fallback arm for shape kinds the resolver
    does not recognise.
    """

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    ARRAY = "array"
    OBJECT = "object"
    UNKNOWN = "unknown"


class ResolvedType(BaseModel):
    """Result of resolving one :class:`ShapeRef` against a shape store."""

    model_config = ConfigDict(frozen=True)

    type: ParamType
    documentation: str = ""


class ParameterDescriptor(BaseModel):
    """One resolved input parameter of an operation."""

    model_config = ConfigDict(frozen=True)

    name: str
    type: ParamType
    required: bool
    documentation: str = Field(default="", max_length=MAX_DOCUMENTATION_LENGTH)


class CommandSchema(BaseModel):
    """The flat parameter model for one operation.

    Invariants for every extracted instance:

    * ``required_parameters`` and ``optional_parameters`` are disjoint.
    * Together they cover exactly the keys of ``parameters``.
    * ``parameters[n].required`` is true iff ``n`` is in ``required_parameters``.
    * ``parameters`` and both lists follow the input shape's member order.

    Instances are never mutated; any correction produces a new instance.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    service: str
    operation: str
    parameters: dict[str, ParameterDescriptor] = Field(default_factory=dict)
    required_parameters: list[str] = Field(
        default_factory=list, alias="requiredParameters"
    )
    optional_parameters: list[str] = Field(
        default_factory=list, alias="optionalParameters"
    )
    documentation: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        """Serialise with the persisted (camelCase) field names."""
        return self.model_dump(mode="json", by_alias=True)


class MemberDiagnostic(BaseModel):
    """A non-fatal report for a structure member that was skipped."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    service: str
    operation: str
    member: str
    shape_name: Optional[str] = Field(default=None, alias="shapeName")
    message: str


class ExtractionResult(BaseModel):
    """A :class:`CommandSchema` plus the diagnostics for skipped members."""

    model_config = ConfigDict(frozen=True)

    command: CommandSchema
    diagnostics: list[MemberDiagnostic] = Field(default_factory=list)


# --- Batch and audit reports ---


class ServiceLocation(BaseModel):
    """A service directory and its newest API version folder."""

    name: str
    version: str
    path: Path

    @property
    def service_file(self) -> Path:
        """Path to the ``service-2.json`` file of the selected version."""
        return self.path / self.version / "service-2.json"


class ExtractionStats(BaseModel):
    """Counters accumulated over one extraction run."""

    model_config = ConfigDict(populate_by_name=True)

    total_services: int = Field(default=0, alias="totalServices")
    total_operations: int = Field(default=0, alias="totalOperations")
    successful_extractions: int = Field(default=0, alias="successfulExtractions")
    failed_extractions: int = Field(default=0, alias="failedExtractions")
    skipped_members: int = Field(default=0, alias="skippedMembers")


class ExtractionFailure(BaseModel):
    """A service or operation that could not be extracted."""

    service: str
    operation: Optional[str] = None
    error: str


class ServiceExtraction(BaseModel):
    """Everything extracted from one service model."""

    service: str
    version: Optional[str] = None
    operation_count: int = 0
    schemas: dict[str, CommandSchema] = Field(default_factory=dict)
    diagnostics: list[MemberDiagnostic] = Field(default_factory=list)
    failures: list[ExtractionFailure] = Field(default_factory=list)


class ExtractionReport(BaseModel):
    """Result of a full batch run across many services."""

    stats: ExtractionStats = Field(default_factory=ExtractionStats)
    services: list[ServiceExtraction] = Field(default_factory=list)
    failures: list[ExtractionFailure] = Field(default_factory=list)


class ValidationResult(BaseModel):
    """Errors and warnings produced by the consistency validator.

    Errors mean the schema is unusable; warnings flag a usable but
    suspicious schema.
    """

    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        """``True`` when no errors were found (warnings are allowed)."""
        return not self.errors

    def raise_for_errors(self) -> None:
        """Raise :class:`StructuralInconsistencyError` if any error was found."""
        if self.errors:
            raise StructuralInconsistencyError(self.errors)


class AuditStats(BaseModel):
    """Counters accumulated by an offline corpus audit."""

    model_config = ConfigDict(populate_by_name=True)

    total_files: int = Field(default=0, alias="totalFiles")
    valid_files: int = Field(default=0, alias="validFiles")
    invalid_files: int = Field(default=0, alias="invalidFiles")
    total_services: int = Field(default=0, alias="totalServices")
    total_commands: int = Field(default=0, alias="totalCommands")


class AuditReport(BaseModel):
    """Aggregated result of auditing a persisted corpus."""

    stats: AuditStats = Field(default_factory=AuditStats)
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


# --- Configuration ---


class OutputConfig(BaseModel):
    """Default output format preferences stored in :class:`GlobalConfig`."""

    format: Literal["auto", "json", "plain", "rich"] = Field(
        default="auto", description="Output format: auto, json, plain, rich"
    )


class CacheConfig(BaseModel):
    """Settings for the cache of remotely fetched service models."""

    enabled: bool = Field(default=True, description="Cache remote service models")
    ttl_seconds: int = Field(default=86400, description="Cache TTL in seconds")


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/cmdschemas/config.json``.

    Loaded and saved by :func:`~cmdschemas.config.load_global_config` and
    :func:`~cmdschemas.config.save_global_config`. Fields here have the
    lowest precedence and can be overridden by project config, environment
    variables, or CLI flags. See :func:`~cmdschemas.config.resolve_config`
    for the full precedence chain.
    """

    data_path: str = Field(
        default="./botocore/botocore/data",
        description="botocore data directory containing one folder per service",
    )
    output_dir: str = Field(
        default="aws-schemas", description="Directory receiving the persisted corpus"
    )
    workers: int = Field(default=4, ge=1, description="Parallel extraction workers")
    self_check: bool = Field(
        default=True, description="Validate every schema right after extraction"
    )
    output: OutputConfig = Field(default_factory=OutputConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
