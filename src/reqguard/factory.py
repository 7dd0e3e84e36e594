"""Factory for a fully wired :class:`~reqguard.pipeline.runner.TaskRunner`.

:func:`create_runner` builds the pipeline the CLI uses:

* baseline options -- :data:`~reqguard.models.DEFAULT_OPTIONS` with the
  configured ``defaults`` layered on top;
* :class:`~reqguard.platform.console.ConsolePlatform` over the on-disk
  user-info cache;
* :class:`~reqguard.transport.HttpxTransport` for the configured base URL;
* :class:`~reqguard.logger.RequestLogger` as the timing sink;
* the default guards and after-hook, then any discovered plugins.

Every piece can be swapped through keyword arguments, which is how tests
build runners with fake platforms and mock transports.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from reqguard.models import GlobalConfig
from reqguard.pipeline.guards import install_defaults
from reqguard.pipeline.runner import TaskRunner, Transport
from reqguard.pipeline.timing import Sink
from reqguard.platform.base import Platform

if TYPE_CHECKING:
    from reqguard.plugins import PluginManager


def create_runner(
    config: Optional[GlobalConfig] = None,
    *,
    platform: Optional[Platform] = None,
    transport: Optional[Transport] = None,
    sink: Optional[Sink] = None,
    load_plugins: bool = True,
    plugins: Optional[PluginManager] = None,
) -> TaskRunner:
    """Build a runner with the default guards, after-hook and plugins installed.

    Args:
        config: Effective configuration. Resolved with
            :func:`~reqguard.config.resolve_config` when ``None``.
        platform: Host primitives; a :class:`ConsolePlatform` over the
            user-info cache when ``None``. That cache stays open for the
            life of the process; pass your own platform to close it.
        transport: Transport call; an :class:`HttpxTransport` when ``None``.
        sink: Timing sink; a :class:`RequestLogger` when ``None``.
        load_plugins: Discover and install ``reqguard.plugins`` entry points.
        plugins: Manager to load the plugins into. Pass one to list the
            loaded plugins or to call :meth:`~PluginManager.cleanup` later.

    Returns:
        A ready-to-use :class:`TaskRunner`.
    """
    if config is None:
        from reqguard.config import resolve_config

        config = resolve_config()

    if platform is None:
        from reqguard.cache import UserInfoCache
        from reqguard.config import get_cache_dir
        from reqguard.platform.console import ConsolePlatform

        platform = ConsolePlatform(UserInfoCache(get_cache_dir(), config.cache), config.network)

    if transport is None:
        from reqguard.transport import HttpxTransport

        transport = HttpxTransport(config.base_url, config.request)

    if sink is None:
        from reqguard.logger import RequestLogger

        sink = RequestLogger()

    runner = TaskRunner(
        transport,
        defaults=config.defaults,
        sink=sink,
    )
    install_defaults(runner, platform, config.login_path)

    if load_plugins:
        if plugins is None:
            from reqguard.plugins import PluginManager

            plugins = PluginManager()
        plugins.discover(config)
        plugins.install(runner)

    return runner
