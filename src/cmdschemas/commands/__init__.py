"""Built-in CLI sub-commands for cmdschemas.

This package groups all Typer sub-command modules that form the CLI's
top-level command tree:

* :mod:`~cmdschemas.commands.extract` -- extract and persist every service
  of a botocore data directory.
* :mod:`~cmdschemas.commands.preview` -- extract one service model and
  print the schemas without writing anything.
* :mod:`~cmdschemas.commands.validate` -- audit a persisted corpus.
* :mod:`~cmdschemas.commands.inspect` -- look up services, commands, and
  parameters in a persisted corpus.
* :mod:`~cmdschemas.commands.config` -- view and modify global settings.
* :mod:`~cmdschemas.commands.cache` -- inspect and empty the remote-model
  cache.

Each module either exports a :class:`typer.Typer` sub-application (for
multi-command groups like ``inspect`` and ``config``) or a plain callback
function registered directly on the root app (for single commands like
``extract``).
"""
