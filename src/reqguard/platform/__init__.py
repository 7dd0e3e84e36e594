"""Host platform collaborators used by the default guards and after-hook.

* :class:`Platform` -- abstract base bundling cache, network status,
  navigation, loading indicator and toast primitives.
* :class:`ConsolePlatform` -- the terminal implementation used by the CLI.
"""

from reqguard.platform.base import UNREACHABLE_NETWORK_TYPES, USER_INFO_KEY, Platform
from reqguard.platform.console import ConsolePlatform

__all__ = ["Platform", "ConsolePlatform", "USER_INFO_KEY", "UNREACHABLE_NETWORK_TYPES"]
