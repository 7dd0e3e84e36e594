"""Abstract base class for host platforms.

The pipeline never touches the terminal, the disk or the network directly.
The default guards and after-hook go through a :class:`Platform`, which
bundles the host primitives they need:

* :meth:`~Platform.get_cache` -- read a cached mapping (user info with the
  ``token``),
* :meth:`~Platform.get_network_type` -- asynchronous network status,
* :meth:`~Platform.redirect_to` -- navigate to the login page,
* :meth:`~Platform.show_loading` / :meth:`~Platform.hide_loading` -- the
  loading indicator,
* :meth:`~Platform.show_toast` -- a short user-visible message.

:class:`~reqguard.platform.console.ConsolePlatform` implements them for a
terminal; tests use in-memory fakes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any

USER_INFO_KEY = "user_info"
"""Cache key under which the logged-in user's info (and token) is stored."""

UNREACHABLE_NETWORK_TYPES = frozenset({"unknown", "none"})
"""Network statuses the network guard treats as "no network"."""


class Platform(ABC):
    """Host primitives consumed by the default guards and after-hook."""

    @abstractmethod
    def get_cache(self, key: str) -> Mapping[str, Any]:
        """Return the cached mapping stored under *key* (``{}`` when missing)."""
        ...

    @abstractmethod
    async def get_network_type(self) -> str:
        """Return the current network status.

        ``"unknown"`` and ``"none"`` mean unreachable; any other string
        (``"wifi"``, ``"ethernet"``, ``"4g"``, ...) means reachable.
        """
        ...

    @abstractmethod
    def redirect_to(self, path: str) -> None:
        """Navigate to *path* (the login page)."""
        ...

    @abstractmethod
    def show_loading(self) -> None:
        """Show the loading indicator."""
        ...

    @abstractmethod
    def hide_loading(self) -> None:
        """Hide the loading indicator."""
        ...

    @abstractmethod
    def show_toast(self, message: str) -> None:
        """Show a short message to the user."""
        ...
