"""cmdschemas -- Flat, validated command schemas from botocore service models.

This package reads the ``service-2.json`` API descriptions shipped with
botocore, resolves every operation's input shape into a flat parameter
model (name, primitive kind, requiredness, cleaned documentation), checks
each model for structural consistency, and persists the result as one JSON
document per command.

Typical workflow::

    git clone https://github.com/boto/botocore.git
    cmdschemas extract --data-path botocore/botocore/data
    cmdschemas validate --output-dir aws-schemas

Modules:
    app: Typer application factory and CLI entry point.
    models: Pydantic models shared across the entire package.
    config: XDG-aware configuration and precedence resolution.
    pipeline: Batch extraction over services and operations.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "1.0.0"
