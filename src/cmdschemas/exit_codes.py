"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~cmdschemas.exceptions.CmdSchemasError` subclass.
CI jobs that run ``cmdschemas validate`` only need to check for a non-zero
status; the finer codes tell shell wrappers which class of failure occurred.

Example::

    $ cmdschemas validate --output-dir aws-schemas
    $ echo $?
    1   # EXIT_VALIDATION_FAILED -- at least one schema has structural errors
"""


EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_VALIDATION_FAILED = 1
"""A persisted corpus contains at least one structural error."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or options."""

EXIT_NOT_FOUND = 4
"""A data directory, service, or command could not be found."""

EXIT_MODEL_ERROR = 7
"""A service model could not be loaded, parsed, or resolved."""
