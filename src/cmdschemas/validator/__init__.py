"""Consistency validation for command schemas.

* :mod:`~cmdschemas.validator.consistency` -- pure per-schema checks, run
  right after extraction and during audits.
* :mod:`~cmdschemas.validator.audit` -- offline batch audit over a whole
  persisted corpus.
"""

from cmdschemas.validator.audit import audit_corpus
from cmdschemas.validator.consistency import KNOWN_TYPES, validate_schema

__all__ = ["KNOWN_TYPES", "audit_corpus", "validate_schema"]
