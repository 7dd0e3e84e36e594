"""The ``reqguard call`` command -- one request through the guarded pipeline.

Only the flags the user actually passes become call options, so anything
left out keeps the value from the configured ``defaults`` (and, below
those, the built-in default options).
"""

from __future__ import annotations

import asyncio
import json
from typing import Any, Optional

import typer

from reqguard.exceptions import (
    ConnectionError_,
    InvalidUsageError,
    ReqguardError,
    RequestRejectedError,
    TransportError,
)
from reqguard.output import debug, error, format_response, get_output


def _parse_headers(values: list[str]) -> dict[str, str]:
    headers: dict[str, str] = {}
    for raw in values:
        name, sep, value = raw.partition(":")
        if not sep or not name.strip():
            raise InvalidUsageError(f"Invalid header '{raw}', expected 'Name: value'")
        headers[name.strip()] = value.strip()
    return headers


def _parse_data(body: Optional[str]) -> Any:  # noqa: ANN401
    """Parse *body* as JSON if possible, returning the raw string on failure."""
    if body is None:
        return None
    try:
        return json.loads(body)
    except (json.JSONDecodeError, TypeError):
        return body


def build_options(
    url: str,
    method: Optional[str] = None,
    data: Optional[str] = None,
    headers: Optional[list[str]] = None,
    show_loading: Optional[bool] = None,
    show_err_msg: Optional[bool] = None,
    need_token: Optional[bool] = None,
    delay: Optional[float] = None,
) -> dict[str, Any]:
    """Turn CLI arguments into a partial options mapping.

    ``None`` means "not given" and leaves the key out.

    Raises:
        InvalidUsageError: If a header is malformed.
    """
    options: dict[str, Any] = {"url": url}
    if method is not None:
        options["method"] = method.upper()
    if data is not None:
        options["data"] = _parse_data(data)
    if headers:
        options["header"] = _parse_headers(headers)
    if show_loading is not None:
        options["show_loading"] = show_loading
    if show_err_msg is not None:
        options["show_err_msg"] = show_err_msg
    if need_token is not None:
        options["need_token"] = need_token
    if delay is not None:
        options["delay"] = delay
    return options


def call_command(
    ctx: typer.Context,
    url: str = typer.Argument(help="Request URL, absolute or relative to the base URL."),
    method: Optional[str] = typer.Option(None, "--method", "-X", help="HTTP method."),
    data: Optional[str] = typer.Option(
        None, "--data", "-d", help="Request data (JSON or raw text)."
    ),
    header: list[str] = typer.Option(
        [], "--header", "-H", help="Extra header as 'Name: value' (repeatable)."
    ),
    show_loading: Optional[bool] = typer.Option(
        None, "--show-loading/--no-show-loading", help="Show a spinner while the call runs."
    ),
    show_err_msg: Optional[bool] = typer.Option(
        None, "--show-err-msg/--no-show-err-msg", help="Show a notice when offline."
    ),
    need_token: Optional[bool] = typer.Option(
        None, "--token/--no-token", help="Require a cached token before calling."
    ),
    delay: Optional[float] = typer.Option(
        None, "--delay", help="Milliseconds to wait before sending."
    ),
) -> None:
    """Run one request through the guards, the transport and the after-hooks.

    Prints the result to stdout. Exits with code 3 when a guard blocks the
    call, 6 when the host is unreachable and 5 on any other failure.

    Example::

        reqguard call /users --no-token
        reqguard call /orders -X POST -d '{"sku": "A1"}' --show-loading
    """
    from reqguard.cache import UserInfoCache
    from reqguard.config import get_cache_dir, resolve_config
    from reqguard.factory import create_runner
    from reqguard.platform.console import ConsolePlatform
    from reqguard.plugins import PluginManager

    obj = ctx.obj or {}
    platform: Optional[ConsolePlatform] = None
    manager = PluginManager()

    try:
        options = build_options(
            url, method, data, header, show_loading, show_err_msg, need_token, delay
        )
        config = resolve_config(
            cli_base_url=obj.get("base_url"), cli_login_path=obj.get("login_path")
        )
        platform = ConsolePlatform(UserInfoCache(get_cache_dir(), config.cache), config.network)
        runner = create_runner(config, platform=platform, plugins=manager)
        for plugin in manager.list_plugins():
            debug(f"Plugin {plugin['name']} v{plugin['version']} installed")

        outcome = asyncio.run(runner.run(options))

        if not outcome.ok:
            get_output().stop_loading()
        if outcome.rejected_by is not None:
            raise RequestRejectedError(f"Call blocked by the '{outcome.rejected_by}' guard")
        if outcome.error is not None:
            if isinstance(outcome.error, ConnectionError_):
                raise outcome.error
            raise TransportError(f"{type(outcome.error).__name__}: {outcome.error}")
    except ReqguardError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
    finally:
        manager.cleanup()
        if platform is not None:
            platform.close()

    debug(f"Call finished: {outcome.options.method} {outcome.options.url}")
    format_response(outcome.result)
