"""Disk-based user-info cache for reqguard.

Uses :mod:`diskcache` to persist small JSON-like mappings (the logged-in
user's info, including the ``token`` the token guard looks for) under the
reqguard cache directory. Entries optionally expire after a configurable
TTL.

When caching is disabled the store falls back to an in-memory dict that
lives only as long as the process, so the platform contract
(``get(key) -> mapping``) holds either way.

See Also:
    :class:`~reqguard.models.CacheConfig` -- ``enabled`` and ``ttl_seconds``.
    :class:`~reqguard.platform.console.ConsolePlatform` -- the consumer.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any, Optional

import diskcache

from reqguard.models import CacheConfig


class UserInfoCache:
    """Key/value store for user info mappings.

    Args:
        cache_dir: Root directory for the cache. A ``user_info/``
            subdirectory is created inside it.
        config: Cache configuration (``enabled`` flag and ``ttl_seconds``).

    Example::

        cache = UserInfoCache("/tmp/reqguard-cache", CacheConfig())
        cache.set("user_info", {"token": "tok123", "name": "ada"})
        assert cache.get("user_info")["token"] == "tok123"
    """

    def __init__(self, cache_dir: str | Path, config: CacheConfig) -> None:
        self._config = config
        self._cache_dir = Path(cache_dir)
        self._cache: Optional[diskcache.Cache] = None
        self._memory: dict[str, dict[str, Any]] = {}
        if config.enabled:
            self._cache = diskcache.Cache(str(self._cache_dir / "user_info"))

    @property
    def directory(self) -> Optional[Path]:
        """Where entries are stored on disk, or ``None`` when disabled."""
        if self._cache is None:
            return None
        return self._cache_dir / "user_info"

    def get(self, key: str) -> dict[str, Any]:
        """Return the mapping stored under *key*, or ``{}`` on a miss."""
        if self._cache is None:
            return dict(self._memory.get(key, {}))
        value = self._cache.get(key)
        if not isinstance(value, Mapping):
            return {}
        return dict(value)

    def set(self, key: str, value: Mapping[str, Any]) -> None:
        """Store *value* under *key*, replacing any previous entry."""
        data = dict(value)
        if self._cache is None:
            self._memory[key] = data
            return
        expire = self._config.ttl_seconds or None
        self._cache.set(key, data, expire=expire)

    def update(self, key: str, **fields: Any) -> dict[str, Any]:
        """Merge *fields* into the mapping under *key* and return the result."""
        data = {**self.get(key), **fields}
        self.set(key, data)
        return data

    def delete(self, key: str) -> None:
        """Remove *key*. A no-op when it is not present."""
        if self._cache is None:
            self._memory.pop(key, None)
            return
        self._cache.delete(key)

    def clear(self) -> None:
        """Remove all entries."""
        self._memory.clear()
        if self._cache is not None:
            self._cache.clear()

    def close(self) -> None:
        """Close the underlying :class:`diskcache.Cache` and release resources."""
        if self._cache is not None:
            self._cache.close()
