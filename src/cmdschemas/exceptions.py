"""Exception hierarchy for cmdschemas.

All exceptions inherit from :class:`CmdSchemasError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`cmdschemas.exit_codes`.
The top-level error handler in :func:`cmdschemas.app.main` catches
``CmdSchemasError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

Subclass hierarchy::

    CmdSchemasError (exit 1)
    +-- InvalidUsageError               (exit 2)
    +-- NotFoundError                   (exit 4)
    +-- ServiceModelError               (exit 7)
    +-- ShapeNotFoundError              (exit 7)
    |   +-- InputShapeNotFoundError     (exit 7)
    +-- StructuralInconsistencyError    (exit 1)
    +-- ConfigError                     (exit 1)

Shape errors follow a two-level recovery policy: a missing member shape is
downgraded to a diagnostic by the extractor, while a missing *input* shape
aborts that one operation (but never the batch).
"""

from __future__ import annotations

from typing import Optional

from cmdschemas.exit_codes import (
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_MODEL_ERROR,
    EXIT_NOT_FOUND,
    EXIT_VALIDATION_FAILED,
)


class CmdSchemasError(Exception):
    """Base exception for all cmdschemas errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`cmdschemas.exit_codes`. The entry point catches
    this exception type and calls ``sys.exit(exc.exit_code)``.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(CmdSchemasError):
    """Raised for invalid CLI arguments or option combinations."""

    exit_code = EXIT_INVALID_USAGE


class NotFoundError(CmdSchemasError):
    """Raised when a data directory, service, or persisted command does not exist."""

    exit_code = EXIT_NOT_FOUND


class ServiceModelError(CmdSchemasError):
    """Raised when a service model cannot be read, parsed, or validated."""

    exit_code = EXIT_MODEL_ERROR


class ShapeNotFoundError(CmdSchemasError):
    """Raised when a referenced shape name has no entry in the shape store.

    Args:
        shape_name: The name that failed to resolve.
        message: Optional override for the default message.
    """

    exit_code = EXIT_MODEL_ERROR

    def __init__(self, shape_name: str, message: Optional[str] = None):
        super().__init__(message or f"Shape '{shape_name}' not found in shapes")
        self.shape_name = shape_name


class InputShapeNotFoundError(ShapeNotFoundError):
    """Raised when an operation's *input* shape is missing.

    Unlike a missing member shape this aborts the whole operation: no
    partial :class:`~cmdschemas.models.CommandSchema` is produced.
    """

    def __init__(self, shape_name: str, operation: str):
        super().__init__(
            shape_name,
            f"Input shape '{shape_name}' of operation '{operation}' not found in shapes",
        )
        self.operation = operation


class StructuralInconsistencyError(CmdSchemasError):
    """Raised when a CommandSchema violates its structural invariants.

    Args:
        errors: The individual validator error messages.
    """

    exit_code = EXIT_VALIDATION_FAILED

    def __init__(self, errors: list[str]):
        summary = errors[0] if len(errors) == 1 else f"{len(errors)} structural errors: {errors[0]}"
        super().__init__(summary)
        self.errors = list(errors)


class ConfigError(CmdSchemasError):
    """Raised for configuration problems (invalid JSON, bad values, unreadable files)."""

    exit_code = EXIT_GENERIC_FAILURE
