"""Config commands -- view and modify global configuration.

Provides the ``reqguard config`` sub-command group for reading, updating,
and resetting the user's global configuration file
(:class:`~reqguard.models.GlobalConfig`). Settings control the base URL,
the login path the token guard redirects to, the default call options,
and the transport, network probe, and cache behaviour.
"""

from __future__ import annotations

import json
from typing import Any

import typer

from reqguard.output import error, format_response, info, success


config_app = typer.Typer(no_args_is_help=True)


def _coerce(current: Any, value: str) -> Any:  # noqa: ANN401
    """Coerce *value* to the type of *current*.

    Raises:
        ValueError: If *value* cannot be converted.
    """
    if isinstance(current, bool):
        return value.lower() in ("true", "1", "yes")
    if isinstance(current, int):
        return int(value)
    if isinstance(current, float):
        return float(value)
    if current is None or isinstance(current, str):
        return value
    return json.loads(value)


def _parse_free_value(value: str) -> Any:  # noqa: ANN401
    """Values for new ``defaults`` keys: JSON when it parses, text otherwise."""
    try:
        return json.loads(value)
    except json.JSONDecodeError:
        return value


@config_app.command("show")
def config_show() -> None:
    """Show current configuration.

    Prints the config directory path followed by the persisted global
    configuration.

    Example::

        reqguard config show
        reqguard --json config show
    """
    from reqguard.config import get_config_dir, load_global_config

    config = load_global_config()
    info(f"Config directory: {get_config_dir()}")
    format_response(config.model_dump(mode="json"))


@config_app.command("set")
def config_set(
    key: str = typer.Argument(
        help="Config key (dot notation, e.g., 'network.probe_timeout')."
    ),
    value: str = typer.Argument(help="Value to set."),
) -> None:
    """Set a configuration value.

    Uses dot notation for nested keys. The value is coerced to match the
    existing field's type. Keys under ``defaults`` may be new; their value
    is parsed as JSON when possible. The updated config is validated
    against :class:`~reqguard.models.GlobalConfig` before saving.

    Raises:
        typer.Exit: With code 2 if the key path is invalid, the value
            cannot be coerced, or validation fails.

    Example::

        reqguard config set base_url https://api.example.com
        reqguard config set defaults.show_err_msg true
        reqguard config set cache.ttl_seconds 3600
    """
    from reqguard.config import load_global_config, save_global_config
    from reqguard.models import GlobalConfig

    config = load_global_config()
    data = config.model_dump(mode="json")

    keys = key.split(".")
    target = data
    for k in keys[:-1]:
        if k not in target or not isinstance(target[k], dict):
            error(f"Invalid config key: {key}")
            raise typer.Exit(code=2)
        target = target[k]

    final_key = keys[-1]
    if final_key in target:
        try:
            coerced = _coerce(target[final_key], value)
        except ValueError:
            error(f"Expected {type(target[final_key]).__name__} for {key}, got: {value}")
            raise typer.Exit(code=2) from None
    elif keys[0] == "defaults" and len(keys) == 2:
        coerced = _parse_free_value(value)
    else:
        error(f"Unknown config key: {key}")
        raise typer.Exit(code=2)

    target[final_key] = coerced

    try:
        new_config = GlobalConfig.model_validate(data)
    except ValueError as exc:
        error(f"Validation error: {exc}")
        raise typer.Exit(code=2) from None

    save_global_config(new_config)
    success(f"Set {key} = {coerced}")


@config_app.command("reset")
def config_reset(
    force: bool = typer.Option(False, "--force", "-f", help="Skip the confirmation prompt."),
) -> None:
    """Reset configuration to defaults.

    Replaces the persisted global config with a fresh
    :class:`~reqguard.models.GlobalConfig`. Asks for confirmation unless
    ``--force`` is given.

    Example::

        reqguard config reset --force
    """
    from reqguard.config import save_global_config
    from reqguard.models import GlobalConfig

    if not force:
        confirmed = typer.confirm("Reset all config to defaults?")
        if not confirmed:
            info("Cancelled.")
            raise typer.Exit()

    save_global_config(GlobalConfig())
    success("Configuration reset to defaults.")
