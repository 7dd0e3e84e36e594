"""The guarded request pipeline.

This package composes a call out of four ordered stages:

* :class:`GuardRegistry` / :class:`Dispatcher` -- pre-flight guards,
  evaluated in order with short-circuit on the first rejection.
* :class:`TimingProbe` -- latency measurement around the transport call.
* :class:`HookRegistry` -- after-hooks run over the response payload.
* :class:`TaskRunner` -- the entry point tying the stages together.

:func:`install_defaults` registers the built-in loading, token and network
guards plus the hide-loading after-hook.

Example::

    from reqguard.pipeline import TaskRunner, install_defaults

    runner = install_defaults(TaskRunner(transport), platform, "/login")
    result = await runner.run_task({"url": "/me"})
"""

from reqguard.pipeline.dispatcher import Dispatcher
from reqguard.pipeline.guards import install_defaults
from reqguard.pipeline.registry import AfterHook, Guard, GuardRegistry, HookRegistry
from reqguard.pipeline.runner import OutcomeStatus, TaskOutcome, TaskRunner, Transport
from reqguard.pipeline.timing import TimingProbe

__all__ = [
    "AfterHook",
    "Dispatcher",
    "Guard",
    "GuardRegistry",
    "HookRegistry",
    "OutcomeStatus",
    "TaskOutcome",
    "TaskRunner",
    "TimingProbe",
    "Transport",
    "install_defaults",
]
