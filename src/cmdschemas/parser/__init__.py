"""Service-model parser -- load models, look up shapes, extract operations.

This sub-package turns a botocore ``service-2.json`` document into flat
:class:`~cmdschemas.models.CommandSchema` objects, one per operation.

Typical usage::

    from cmdschemas.parser import ShapeStore, extract_operation, load_service_model

    model = load_service_model("botocore/botocore/data/s3/2006-03-01/service-2.json")
    store = ShapeStore.from_model(model)
    result = extract_operation("s3", "PutObject", model.operations["PutObject"], store)

Sub-modules:

* :mod:`~cmdschemas.parser.loader` -- I/O layer (data directory discovery,
  file, URL, stdin) plus JSON/YAML detection.
* :mod:`~cmdschemas.parser.store` -- the immutable shape lookup table.
* :mod:`~cmdschemas.parser.resolver` -- one-level shape reference resolution
  and documentation cleaning.
* :mod:`~cmdschemas.parser.extractor` -- builds a
  :class:`~cmdschemas.models.CommandSchema` from one operation.
"""

from cmdschemas.parser.extractor import command_name, extract_operation
from cmdschemas.parser.loader import (
    discover_services,
    latest_api_version,
    load_service_model,
)
from cmdschemas.parser.resolver import clean_documentation, resolve_type
from cmdschemas.parser.store import ShapeStore

__all__ = [
    "ShapeStore",
    "clean_documentation",
    "command_name",
    "discover_services",
    "extract_operation",
    "latest_api_version",
    "load_service_model",
    "resolve_type",
]
