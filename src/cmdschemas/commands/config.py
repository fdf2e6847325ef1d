"""Config commands -- view and modify global configuration.

Provides the ``cmdschemas config`` sub-command group for reading,
updating, and resetting the user's global configuration file
(:class:`~cmdschemas.models.GlobalConfig`). Settings are persisted in
the cmdschemas config directory and supply defaults such as the botocore
data path, output directory, worker count, and cache TTL.
"""

from __future__ import annotations

import typer
from pydantic import ValidationError

from cmdschemas.exceptions import ConfigError
from cmdschemas.output import error, format_response, info, success


config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show(
    effective: bool = typer.Option(
        False,
        "--effective",
        help="Show the resolved config (env vars and ./cmdschemas.json applied).",
    ),
) -> None:
    """Show current configuration.

    Prints the config directory path followed by the stored configuration,
    or the effective configuration with ``--effective``.

    Example::

        cmdschemas config show
        cmdschemas config show --effective --json
    """
    from cmdschemas.config import get_config_dir, load_global_config, resolve_config

    try:
        config = resolve_config() if effective else load_global_config()
    except ConfigError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
    info(f"Config directory: {get_config_dir()}")
    format_response(config.model_dump(mode="json"))


@config_app.command("set")
def config_set(
    key: str = typer.Argument(
        help="Config key (dot notation, e.g., 'cache.ttl_seconds')."
    ),
    value: str = typer.Argument(help="Value to set."),
) -> None:
    """Set a configuration value.

    Uses dot notation for nested keys. The value is coerced to match the
    existing field's type (bool, int, or str) and the updated config is
    validated against :class:`~cmdschemas.models.GlobalConfig` before saving.

    Args:
        key: Dot-separated config key path (e.g. ``output.format``).
        value: String value to set; coerced to the target field type.

    Raises:
        typer.Exit: With code 2 if the key path is invalid, the value
            cannot be coerced, or validation fails.

    Example::

        cmdschemas config set data_path ~/src/botocore/botocore/data
        cmdschemas config set workers 8
        cmdschemas config set cache.enabled false
    """
    from cmdschemas.config import load_global_config, save_global_config
    from cmdschemas.models import GlobalConfig

    try:
        config = load_global_config()
    except ConfigError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
    data = config.model_dump(mode="json")

    keys = key.split(".")
    target = data
    for k in keys[:-1]:
        if k not in target or not isinstance(target[k], dict):
            error(f"Invalid config key: {key}")
            raise typer.Exit(code=2)
        target = target[k]

    final_key = keys[-1]
    if final_key not in target or isinstance(target[final_key], dict):
        error(f"Unknown config key: {key}")
        raise typer.Exit(code=2)

    current = target[final_key]
    if isinstance(current, bool):
        coerced = value.lower() in ("true", "1", "yes")
    elif isinstance(current, int):
        try:
            coerced = int(value)
        except ValueError:
            error(f"Expected integer for {key}, got: {value}")
            raise typer.Exit(code=2) from None
    else:
        coerced = value  # type: ignore[assignment]

    target[final_key] = coerced

    try:
        new_config = GlobalConfig.model_validate(data)
    except ValidationError as exc:
        error(f"Validation error: {exc}")
        raise typer.Exit(code=2) from None

    save_global_config(new_config)
    success(f"Set {key} = {coerced}")


@config_app.command("reset")
def config_reset(
    ctx: typer.Context,
) -> None:
    """Reset configuration to defaults.

    Replaces the persisted global config with a fresh
    :class:`~cmdschemas.models.GlobalConfig`. Asks for confirmation unless
    ``--force`` is active.

    Raises:
        typer.Exit: If the user declines confirmation.

    Example::

        cmdschemas config reset
        cmdschemas --force config reset
    """
    from cmdschemas.config import save_global_config
    from cmdschemas.models import GlobalConfig

    force = ctx.obj.get("force", False) if ctx.obj else False
    if not force:
        confirmed = typer.confirm("Reset all config to defaults?")
        if not confirmed:
            info("Cancelled.")
            raise typer.Exit()

    save_global_config(GlobalConfig())
    success("Configuration reset to defaults.")
