"""Cache commands -- inspect and empty the remote-model cache.

Provides the ``cmdschemas cache`` sub-command group over
:class:`~cmdschemas.cache.ModelCache`, the diskcache store that keeps
service models fetched by ``cmdschemas preview <url>``.
"""

from __future__ import annotations

import typer

from cmdschemas.cache import ModelCache
from cmdschemas.exceptions import ConfigError
from cmdschemas.output import error, format_response, info, success


cache_app = typer.Typer(no_args_is_help=True)


def _open_cache() -> ModelCache:
    from cmdschemas.config import get_cache_dir, resolve_config

    try:
        config = resolve_config()
    except ConfigError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
    return ModelCache(get_cache_dir(), config.cache)


@cache_app.command("stats")
def cache_stats() -> None:
    """Show the cache location, entry count, and TTL.

    Example::

        cmdschemas cache stats
        cmdschemas --json cache stats
    """
    with _open_cache() as cache:
        format_response(cache.stats())


@cache_app.command("clear")
def cache_clear(ctx: typer.Context) -> None:
    """Remove every cached service model.

    Asks for confirmation unless ``--force`` is active.

    Example::

        cmdschemas cache clear
        cmdschemas --force cache clear
    """
    force = ctx.obj.get("force", False) if ctx.obj else False
    if not force and not typer.confirm("Remove all cached service models?"):
        info("Cancelled.")
        raise typer.Exit()

    with _open_cache() as cache:
        removed = cache.stats().get("size", 0)
        cache.clear()
    success(f"Removed {removed} cached models.")
