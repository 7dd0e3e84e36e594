"""Ordered, append-only registries for guards and after-hooks.

A *guard* is a callable ``(options) -> bool`` run before the transport
call; an *after-hook* is a callable ``(payload, options) -> Any`` run after
it. Either may return an awaitable instead of a plain value: the pipeline
always awaits awaitable results, so sync and async units are registered and
called the same way.

Registration validates the value up front: anything that is not callable
(including an already-created coroutine object) raises
:class:`~reqguard.exceptions.RegistrationError` immediately, so a
misconfigured pipeline fails at startup rather than on the first call.
"""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable, Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Generic, TypeVar, Union

from reqguard.exceptions import RegistrationError

if TYPE_CHECKING:
    from reqguard.models import RequestOptions


# Type aliases
Guard = Callable[["RequestOptions"], Union[bool, Awaitable[bool]]]
AfterHook = Callable[[Any, "RequestOptions"], Any]

FnT = TypeVar("FnT", bound=Callable[..., Any])
T = TypeVar("T")


async def resolve(value: Union[T, Awaitable[T]]) -> T:
    """Await *value* if it is awaitable, otherwise return it unchanged."""
    if inspect.isawaitable(value):
        return await value
    return value


def _callable_name(fn: Callable[..., Any]) -> str:
    name = getattr(fn, "__qualname__", None) or getattr(fn, "__name__", None)
    return name or type(fn).__name__


@dataclass(frozen=True)
class Registered(Generic[FnT]):
    """A registered pipeline unit.

    Attributes:
        name: Identifier used in log messages and outcomes.
        fn: The callable itself.
    """

    name: str
    fn: FnT


class _Registry(Generic[FnT]):
    """Append-only ordered sequence of named callables."""

    kind = "unit"

    def __init__(self) -> None:
        self._entries: list[Registered[FnT]] = []

    def register(self, fn: FnT, name: str | None = None) -> Registered[FnT]:
        """Append *fn* to the end of the sequence.

        Args:
            fn: The callable to register.
            name: Optional display name; defaults to the callable's
                qualified name.

        Returns:
            The :class:`Registered` entry.

        Raises:
            RegistrationError: If *fn* is not callable.
        """
        if not callable(fn):
            raise RegistrationError(
                f"{self.kind} must be callable, got {type(fn).__name__}"
            )
        entry = Registered(name=name or _callable_name(fn), fn=fn)
        self._entries.append(entry)
        return entry

    def names(self) -> list[str]:
        """Return the registered names in registration order."""
        return [entry.name for entry in self._entries]

    def __iter__(self) -> Iterator[Registered[FnT]]:
        # Iterate a snapshot so a registration during a run cannot change it.
        return iter(tuple(self._entries))

    def __len__(self) -> int:
        return len(self._entries)


class GuardRegistry(_Registry[Guard]):
    """Ordered guards evaluated by :class:`~reqguard.pipeline.dispatcher.Dispatcher`."""

    kind = "guard"


class HookRegistry(_Registry[AfterHook]):
    """Ordered after-hooks folded over the response by the task runner."""

    kind = "after-hook"
