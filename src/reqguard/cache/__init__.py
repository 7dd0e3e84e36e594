"""Disk-based user-info caching for reqguard.

This package provides :class:`UserInfoCache`, the store the console
platform reads when the token guard asks for the cached user info. It is
controlled by the ``cache`` section of the global configuration
(:class:`~reqguard.models.CacheConfig`).
"""

from reqguard.cache.cache import UserInfoCache

__all__ = ["UserInfoCache"]
