"""Token commands -- manage the cached user info the token guard reads.

The token guard looks for ``token`` in the mapping stored under the
user-info key of the cache. These commands write, show and remove it.
"""

from __future__ import annotations

from typing import Optional

import typer

from reqguard.output import format_response, info, success, warning
from reqguard.platform.base import USER_INFO_KEY


token_app = typer.Typer(no_args_is_help=True)


def _open_cache():
    from reqguard.cache import UserInfoCache
    from reqguard.config import get_cache_dir, resolve_config

    return UserInfoCache(get_cache_dir(), resolve_config().cache)


def _mask(token: str) -> str:
    if len(token) <= 8:
        return "*" * len(token)
    return f"{token[:4]}...{token[-4:]}"


@token_app.command("set")
def token_set(
    token: str = typer.Argument(help="Token value to cache."),
    user: Optional[str] = typer.Option(None, "--user", help="Optional user name to store alongside."),
) -> None:
    """Cache a token so calls that need one can proceed.

    Example::

        reqguard token set eyJhbGciOi...
    """
    cache = _open_cache()
    try:
        fields = {"token": token}
        if user is not None:
            fields["user"] = user
        cache.update(USER_INFO_KEY, **fields)
    finally:
        cache.close()
    success("Token stored.")


@token_app.command("show")
def token_show(
    reveal: bool = typer.Option(False, "--reveal", help="Print the token unmasked."),
) -> None:
    """Show the cached user info (token masked unless ``--reveal``)."""
    cache = _open_cache()
    try:
        user_info = cache.get(USER_INFO_KEY)
    finally:
        cache.close()

    if not user_info.get("token"):
        warning("No token cached.")
        raise typer.Exit(code=1)

    if not reveal:
        user_info["token"] = _mask(str(user_info["token"]))
    format_response(user_info)


@token_app.command("clear")
def token_clear() -> None:
    """Remove the cached user info."""
    cache = _open_cache()
    try:
        cache.delete(USER_INFO_KEY)
    finally:
        cache.close()
    info("Token cleared.")
