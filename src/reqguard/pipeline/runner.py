"""The task runner -- entry point of the request pipeline.

One :meth:`TaskRunner.run_task` call:

1. merges the caller's options over the runner's baseline into one frozen
   :class:`~reqguard.models.RequestOptions`;
2. dispatches the guards, returning ``False`` straight away on rejection
   (no transport call, no timing record, no hooks);
3. starts the timing probe, awaits the transport, stops the probe, then
   folds the after-hooks over ``response.data``;
4. turns any failure in step 3 into ``False``.

After-hook reduction keeps a quirk on purpose: the accumulator starts as
``{}`` and every hook is called with the *original* payload, not with the
previous hook's return value. Every hook runs, but only the last hook's
return value becomes the result. Hooks therefore do not compose; a hook
that wants to transform the payload must be registered last.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Awaitable, Mapping
from dataclasses import dataclass
from typing import Any, Literal, Optional, Protocol, Union

from reqguard.models import DEFAULT_OPTIONS, OptionsLike, RequestOptions, merge_options
from reqguard.pipeline.dispatcher import Dispatcher
from reqguard.pipeline.registry import (
    AfterHook,
    Guard,
    GuardRegistry,
    HookRegistry,
    resolve,
)
from reqguard.pipeline.timing import Clock, Sink, TimingProbe, monotonic_ms

logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Anything that can perform the network call for a set of options."""

    def request(self, options: RequestOptions) -> Awaitable[Any]: ...


def _discard(options: RequestOptions, record: Any) -> None:
    """Sink used when none is configured."""


class OutcomeStatus(str, enum.Enum):
    """How a single pipeline run ended."""

    OK = "ok"
    REJECTED = "rejected"
    FAILED = "failed"


@dataclass
class TaskOutcome:
    """Structured result of one pipeline run.

    :meth:`TaskRunner.run_task` collapses this to the ``False`` sentinel
    for anything but :attr:`OutcomeStatus.OK`; callers that need to tell a
    guard rejection from a failed call use :meth:`TaskRunner.run`.

    Attributes:
        status: How the run ended.
        options: The effective options of the run.
        result: The last after-hook's return value (``OK`` only).
        error: The exception that failed the run (``FAILED`` only).
        rejected_by: Name of the guard that blocked the call
            (``REJECTED`` only).
    """

    status: OutcomeStatus
    options: RequestOptions
    result: Any = None
    error: Optional[BaseException] = None
    rejected_by: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status is OutcomeStatus.OK

    def value(self) -> Union[Literal[False], Any]:
        """The public value of the run: the result, or ``False``."""
        return self.result if self.ok else False


class TaskRunner:
    """Runs calls through guards, the transport, the timing probe and after-hooks.

    The runner owns its registries, so two runners never share guards or
    hooks. Registration is append-only and intended to happen at startup;
    the registries are only read while calls run, which makes one runner
    safe to share between concurrent ``run_task`` calls.

    Args:
        transport: Performs the network call (see :class:`Transport`).
        defaults: Baseline options each call's options are merged over.
            Defaults to :data:`~reqguard.models.DEFAULT_OPTIONS`.
        sink: Receives ``(options, timing_record)`` after every completed
            transport call.
        clock: Millisecond clock for the timing probe.
        guards: Pre-populated guard registry, or ``None`` for an empty one.
        hooks: Pre-populated hook registry, or ``None`` for an empty one.

    Example::

        runner = TaskRunner(transport, sink=RequestLogger())
        runner.use(lambda options: options.url is not None)
        runner.after(lambda payload, options: payload["items"])
        items = await runner.run_task({"url": "/items", "need_token": False})
    """

    def __init__(
        self,
        transport: Transport,
        *,
        defaults: Optional[OptionsLike] = None,
        sink: Optional[Sink] = None,
        clock: Clock = monotonic_ms,
        guards: Optional[GuardRegistry] = None,
        hooks: Optional[HookRegistry] = None,
    ) -> None:
        self._transport = transport
        self._defaults = merge_options(DEFAULT_OPTIONS, defaults)
        self._guards = guards if guards is not None else GuardRegistry()
        self._hooks = hooks if hooks is not None else HookRegistry()
        self._dispatcher = Dispatcher(self._guards)
        self._probe = TimingProbe(sink or _discard, clock)

    @property
    def defaults(self) -> RequestOptions:
        """The baseline options of this runner."""
        return self._defaults

    @property
    def guards(self) -> GuardRegistry:
        return self._guards

    @property
    def hooks(self) -> HookRegistry:
        return self._hooks

    # ------------------------------------------------------------------ #
    # Registration
    # ------------------------------------------------------------------ #

    def use(self, guard: Guard, name: Optional[str] = None) -> TaskRunner:
        """Append a guard. Returns the runner so calls can be chained.

        Raises:
            RegistrationError: If *guard* is not callable.
        """
        self._guards.register(guard, name)
        return self

    def after(self, hook: AfterHook, name: Optional[str] = None) -> TaskRunner:
        """Append an after-hook. Returns the runner so calls can be chained.

        Raises:
            RegistrationError: If *hook* is not callable.
        """
        self._hooks.register(hook, name)
        return self

    # ------------------------------------------------------------------ #
    # Execution
    # ------------------------------------------------------------------ #

    async def dispatch(self, options: RequestOptions) -> bool:
        """Evaluate the guards for *options*; see :class:`Dispatcher`."""
        return await self._dispatcher.dispatch(options)

    async def run(self, options: Optional[OptionsLike] = None) -> TaskOutcome:
        """Run one call and report how it ended.

        Guard exceptions propagate; transport, sink and after-hook
        exceptions are captured in the returned outcome and logged.

        Args:
            options: Caller options merged over :attr:`defaults`.

        Returns:
            A :class:`TaskOutcome`.
        """
        effective = merge_options(self._defaults, options)

        rejected_by = await self._dispatcher.evaluate(effective)
        if rejected_by is not None:
            logger.info(
                "%s %s rejected by guard '%s'",
                effective.method, effective.url, rejected_by,
            )
            return TaskOutcome(
                status=OutcomeStatus.REJECTED,
                options=effective,
                rejected_by=rejected_by,
            )

        try:
            result = await self._call(effective)
        except Exception as exc:
            logger.warning(
                "%s %s failed: %s: %s",
                effective.method, effective.url, type(exc).__name__, exc,
                exc_info=True,
            )
            return TaskOutcome(status=OutcomeStatus.FAILED, options=effective, error=exc)

        return TaskOutcome(status=OutcomeStatus.OK, options=effective, result=result)

    async def run_task(self, options: Optional[OptionsLike] = None) -> Union[Literal[False], Any]:
        """Run one call and return its result, or ``False``.

        ``False`` covers every unsuccessful ending alike: a guard rejected
        the call, the transport raised, or an after-hook raised.
        """
        outcome = await self.run(options)
        return outcome.value()

    async def _call(self, options: RequestOptions) -> Any:
        stop = self._probe.start(options)
        response = await self._transport.request(options)
        stop(response)

        if isinstance(response, Mapping):
            payload = response.get("data")
        else:
            payload = getattr(response, "data", None)
        result: Any = {}
        for entry in self._hooks:
            logger.debug("Running after-hook '%s'", entry.name)
            result = await resolve(entry.fn(payload, options))
        return result
