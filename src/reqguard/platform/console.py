"""Terminal implementation of :class:`~reqguard.platform.base.Platform`.

* The cache is a :class:`~reqguard.cache.UserInfoCache` on disk.
* The network status comes from a TCP connection attempt to a probe host:
  a successful connection reports ``"ethernet"``, a refused or
  unroutable one ``"none"``, and a timeout ``"unknown"``.
* Loading and toasts are rendered by the global
  :class:`~reqguard.output.OutputManager` on stderr.
* "Navigating" to the login path records it and prints how to log in, since
  a terminal has no page to switch to.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional

from reqguard.cache import UserInfoCache
from reqguard.models import NetworkConfig
from reqguard.output import get_output
from reqguard.platform.base import Platform

logger = logging.getLogger(__name__)


class ConsolePlatform(Platform):
    """Host primitives for a command-line process.

    Args:
        cache: Store backing :meth:`get_cache`.
        network: Probe target and timeout for :meth:`get_network_type`.
    """

    def __init__(self, cache: UserInfoCache, network: Optional[NetworkConfig] = None) -> None:
        self._cache = cache
        self._network = network or NetworkConfig()
        self.redirected_to: Optional[str] = None

    def get_cache(self, key: str) -> dict[str, Any]:
        return self._cache.get(key)

    async def get_network_type(self) -> str:
        host, port = self._network.probe_host, self._network.probe_port
        try:
            _, writer = await asyncio.wait_for(
                asyncio.open_connection(host, port),
                timeout=self._network.probe_timeout,
            )
        except asyncio.TimeoutError:
            logger.debug("Network probe to %s:%s timed out", host, port)
            return "unknown"
        except OSError as exc:
            logger.debug("Network probe to %s:%s failed: %s", host, port, exc)
            return "none"

        writer.close()
        try:
            await writer.wait_closed()
        except OSError:
            pass
        return "ethernet"

    def redirect_to(self, path: str) -> None:
        self.redirected_to = path
        output = get_output()
        output.warning(f"Login required ({path})")
        output.suggest("Store a token with: reqguard token set <TOKEN>")

    def show_loading(self) -> None:
        get_output().start_loading()

    def hide_loading(self) -> None:
        get_output().stop_loading()

    def show_toast(self, message: str) -> None:
        get_output().toast(message)

    def close(self) -> None:
        """Release the user-info cache."""
        self._cache.close()
