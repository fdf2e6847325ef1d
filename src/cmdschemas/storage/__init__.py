"""Persisted corpus of command schemas.

* :mod:`~cmdschemas.storage.writer` -- writes command files, service
  summaries, ``index.json`` and ``README.md``.
* :mod:`~cmdschemas.storage.reader` -- runtime lookups over a written corpus.
* :mod:`~cmdschemas.storage.layout` -- file names shared by both sides and
  by the corpus audit.
"""

from cmdschemas.storage.reader import SchemaRepository
from cmdschemas.storage.writer import SchemaWriter

__all__ = ["SchemaRepository", "SchemaWriter"]
