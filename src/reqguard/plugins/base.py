"""Abstract base class for reqguard plugins.

A plugin contributes extra guards and after-hooks to the pipeline. Every
plugin must subclass :class:`Plugin` and implement the :attr:`name`
property; :meth:`guards`, :meth:`after_hooks`, :meth:`on_init` and
:meth:`cleanup` default to no-ops.

Plugins are registered as entry points in the ``reqguard.plugins`` group
and discovered at runtime by :class:`~reqguard.plugins.manager.PluginManager`.
Their guards and hooks are appended *after* the built-in defaults, so the
loading, token and network checks always run first.

Example:
    A plugin that refuses to send calls outside business hours::

        class OfficeHours(Plugin):
            @property
            def name(self) -> str:
                return "office-hours"

            def guards(self):
                return [lambda options: 9 <= datetime.now().hour < 18]
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence

from reqguard.models import GlobalConfig
from reqguard.pipeline.registry import AfterHook, Guard


class Plugin(ABC):
    """Base class for all reqguard plugins.

    The plugin lifecycle is:

    1. Instantiation -- the :class:`PluginManager` calls the no-arg constructor.
    2. :meth:`on_init` -- called once with the global configuration.
    3. :meth:`guards` / :meth:`after_hooks` -- read once when the manager
       installs the plugin on a runner.
    4. :meth:`cleanup` -- called once when the command that loaded it ends.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the unique plugin name used for discovery and logging."""
        ...

    @property
    def version(self) -> str:
        return "0.1.0"

    @property
    def description(self) -> str:
        return ""

    def on_init(self, config: GlobalConfig) -> None:
        """Called once when the plugin is loaded by the :class:`PluginManager`.

        Args:
            config: The effective global configuration.
        """

    def guards(self) -> Sequence[Guard]:
        """Return the guards this plugin adds, in the order they should run."""
        return ()

    def after_hooks(self) -> Sequence[AfterHook]:
        """Return the after-hooks this plugin adds, in the order they should run.

        Note that only the last registered after-hook's return value
        becomes the result of a call.
        """
        return ()

    def cleanup(self) -> None:
        """Called once when the command ends to release plugin resources."""
