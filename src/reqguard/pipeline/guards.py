"""Default guards and after-hook, and their installation order.

:func:`install_defaults` registers, in this order:

1. :func:`loading_guard` -- shows the loading indicator when asked to.
   Never blocks.
2. :func:`token_guard` -- blocks when a token is required but none is
   cached, redirecting to the login path.
3. :func:`network_guard` -- blocks when the network is unreachable,
   optionally showing a toast with the raw status.

and the :func:`hide_loading_hook` after-hook. The order is behaviour, not
documentation: a call rejected by the token guard has already shown the
loading indicator, while one rejected by the network guard has already
been checked for a token.

Each factory binds its guard to a :class:`~reqguard.platform.base.Platform`
and returns a plain callable with the pipeline calling convention.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Optional

from reqguard.models import RequestOptions
from reqguard.platform.base import UNREACHABLE_NETWORK_TYPES, USER_INFO_KEY, Platform
from reqguard.pipeline.registry import AfterHook, Guard

if TYPE_CHECKING:
    from reqguard.pipeline.runner import TaskRunner

logger = logging.getLogger(__name__)


def has_token(platform: Platform, need_token: bool = True) -> bool:
    """Check whether a token is cached, when one is needed at all.

    Args:
        platform: Host whose cache is read.
        need_token: When false the cache is not read and ``True`` is
            returned.

    Returns:
        ``True`` if no token is needed or a non-empty token is cached.
    """
    if not need_token:
        return True
    user_info = platform.get_cache(USER_INFO_KEY) or {}
    return bool(user_info.get("token"))


def loading_guard(platform: Platform) -> Guard:
    """Guard that shows the loading indicator if ``show_loading`` is set."""

    def guard(options: RequestOptions) -> bool:
        if options.show_loading:
            platform.show_loading()
        return True

    return guard


def token_guard(platform: Platform, login_path: Optional[str] = None) -> Guard:
    """Guard that requires a cached token when ``need_token`` is set.

    When the token is missing, the platform navigates to *login_path* (if
    one is configured) and the call is rejected.
    """

    def guard(options: RequestOptions) -> bool:
        if has_token(platform, options.need_token):
            return True
        if login_path:
            platform.redirect_to(login_path)
        logger.warning("[token is not found]")
        return False

    return guard


def network_guard(platform: Platform) -> Guard:
    """Guard that rejects the call when the network is unreachable.

    A toast with the raw network status is shown only when the options
    also set ``show_err_msg``.
    """

    async def guard(options: RequestOptions) -> bool:
        network_type = await platform.get_network_type()
        reachable = network_type not in UNREACHABLE_NETWORK_TYPES
        if not reachable and options.show_err_msg:
            logger.warning("[network is not found]")
            platform.show_toast(network_type)
        return reachable

    return guard


def hide_loading_hook(platform: Platform) -> AfterHook:
    """After-hook that hides the loading indicator and returns the payload as-is."""

    def hook(payload: Any, options: RequestOptions) -> Any:
        if options.show_loading:
            platform.hide_loading()
        return payload

    return hook


def install_defaults(
    runner: TaskRunner,
    platform: Platform,
    login_path: Optional[str] = None,
) -> TaskRunner:
    """Register the default guards and after-hook on *runner*.

    Args:
        runner: The runner to populate. Expected to be empty so the
            defaults run first.
        platform: Host primitives the defaults are bound to.
        login_path: Where the token guard redirects; ``None`` disables the
            redirect but not the check.

    Returns:
        *runner*, for chaining.
    """
    return (
        runner.use(loading_guard(platform), name="loading")
        .use(token_guard(platform, login_path), name="token")
        .use(network_guard(platform), name="network")
        .after(hide_loading_hook(platform), name="hide_loading")
    )
