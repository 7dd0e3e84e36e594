"""Plugin system for reqguard -- extra guards and after-hooks from entry points.

* :class:`Plugin` -- Abstract base class that all plugins must extend.
* :class:`PluginManager` -- Discovers plugins and installs them on a runner.
"""

from reqguard.plugins.base import Plugin
from reqguard.plugins.manager import ENTRY_POINT_GROUP, PluginManager

__all__ = ["Plugin", "PluginManager", "ENTRY_POINT_GROUP"]
