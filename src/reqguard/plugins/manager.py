"""Plugin manager -- discovery, loading, and installation on a runner.

This module contains :class:`PluginManager`, which discovers plugins
registered as Python entry points, applies enable/disable filtering from
the global configuration, and installs their guards and after-hooks on a
:class:`~reqguard.pipeline.runner.TaskRunner`.

Third-party packages register plugins by declaring an entry point in their
``pyproject.toml``::

    [project.entry-points."reqguard.plugins"]
    my-plugin = "my_package.plugin:MyPlugin"
"""

from __future__ import annotations

import importlib.metadata
import logging

from reqguard.exceptions import PluginError
from reqguard.models import GlobalConfig
from reqguard.pipeline.runner import TaskRunner
from reqguard.plugins.base import Plugin

logger = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "reqguard.plugins"
"""The entry-point group name used for plugin discovery."""


class PluginManager:
    """Discovers, loads, and installs reqguard plugins.

    When ``plugins.enabled`` is non-empty only those plugins are loaded;
    otherwise every discovered plugin that is not in ``plugins.disabled``
    is loaded.

    Example::

        manager = PluginManager()
        manager.discover(config)
        manager.install(runner)
    """

    def __init__(self) -> None:
        self._plugins: dict[str, Plugin] = {}

    # ------------------------------------------------------------------
    # Discovery
    # ------------------------------------------------------------------

    def discover(self, config: GlobalConfig) -> list[str]:
        """Discover and load plugins from the ``reqguard.plugins`` entry points.

        Args:
            config: Configuration whose ``plugins`` lists filter discovery.

        Returns:
            The names of the plugins that were loaded. Plugins that fail to
            load are logged as warnings and skipped.
        """
        loaded_names: list[str] = []
        enabled_set = set(config.plugins.enabled)
        disabled_set = set(config.plugins.disabled)

        for ep in importlib.metadata.entry_points(group=ENTRY_POINT_GROUP):
            name = ep.name
            if enabled_set and name not in enabled_set:
                logger.debug("Plugin '%s' not in enabled list, skipping", name)
                continue
            if name in disabled_set:
                logger.debug("Plugin '%s' is disabled, skipping", name)
                continue

            try:
                plugin_cls = ep.load()
                plugin: Plugin = plugin_cls()
                self.load_plugin(name, plugin, config)
                loaded_names.append(name)
            except Exception as exc:
                logger.warning("Failed to load plugin '%s': %s", name, exc)

        return loaded_names

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load_plugin(self, name: str, plugin: Plugin, config: GlobalConfig) -> None:
        """Initialise *plugin* and register it under *name*.

        Raises:
            PluginError: If a plugin with the same *name* is already loaded.
        """
        if name in self._plugins:
            raise PluginError(f"Plugin '{name}' is already loaded")

        plugin.on_init(config)
        self._plugins[name] = plugin
        logger.info("Loaded plugin '%s' v%s", name, plugin.version)

    def list_plugins(self) -> list[dict[str, str]]:
        """List all loaded plugins with their name, version and description."""
        return [
            {
                "name": plugin.name,
                "version": plugin.version,
                "description": plugin.description,
            }
            for plugin in self._plugins.values()
        ]

    # ------------------------------------------------------------------
    # Installation
    # ------------------------------------------------------------------

    def install(self, runner: TaskRunner) -> TaskRunner:
        """Append every loaded plugin's guards and after-hooks to *runner*.

        Plugins are installed in load order; within a plugin, in the order
        its :meth:`~Plugin.guards` and :meth:`~Plugin.after_hooks` list them.

        Raises:
            PluginError: If a plugin contributes something that is not callable.
        """
        for name, plugin in self._plugins.items():
            try:
                for index, guard in enumerate(plugin.guards()):
                    runner.use(guard, name=f"{name}:guard[{index}]")
                for index, hook in enumerate(plugin.after_hooks()):
                    runner.after(hook, name=f"{name}:after[{index}]")
            except TypeError as exc:
                raise PluginError(f"Plugin '{name}' contributed an invalid unit: {exc}") from exc
        return runner

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def cleanup(self) -> None:
        """Clean up all loaded plugins and reset internal state.

        Exceptions from individual plugins are logged and swallowed so that
        one plugin's failure does not prevent others from cleaning up.
        """
        for name, plugin in self._plugins.items():
            try:
                plugin.cleanup()
            except Exception as exc:
                logger.warning("Error cleaning up plugin '%s': %s", name, exc)
        self._plugins.clear()
