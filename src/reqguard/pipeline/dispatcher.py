"""Sequential guard evaluation with short-circuit on the first rejection."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from reqguard.pipeline.registry import GuardRegistry, resolve

if TYPE_CHECKING:
    from reqguard.models import RequestOptions

logger = logging.getLogger(__name__)


class Dispatcher:
    """Evaluates a :class:`~reqguard.pipeline.registry.GuardRegistry` in order.

    Each guard is called with the effective options of the call. An
    awaitable result is awaited before it is inspected, so every guard
    (including its suspension) finishes before the next one starts. The
    first falsy result stops the iteration: later guards are never called
    and none of their side effects happen.

    Exceptions raised by a guard are not caught here; they propagate to the
    caller of :meth:`dispatch`.
    """

    def __init__(self, guards: GuardRegistry) -> None:
        self._guards = guards

    async def evaluate(self, options: RequestOptions) -> Optional[str]:
        """Run the guards and report which one rejected the call, if any.

        Args:
            options: The effective options of the call.

        Returns:
            The name of the first guard that returned a falsy value, or
            ``None`` if every guard passed.
        """
        for entry in self._guards:
            logger.debug("Evaluating guard '%s'", entry.name)
            allowed = await resolve(entry.fn(options))
            if not allowed:
                logger.debug("Guard '%s' rejected the call", entry.name)
                return entry.name
        return None

    async def dispatch(self, options: RequestOptions) -> bool:
        """Return ``True`` if every guard allows the call, ``False`` otherwise."""
        return await self.evaluate(options) is None
