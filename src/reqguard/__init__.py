"""reqguard -- a guarded, hookable client-side request pipeline.

Before an outbound call is issued, an ordered sequence of *guards* decides
whether the call should proceed at all (loading indicator, token presence,
network reachability). After the call completes, a timing probe records
latency and an ordered sequence of *after-hooks* post-processes the
response.

Typical usage::

    from reqguard import create_runner

    runner = create_runner()
    result = await runner.run_task({"url": "/users", "show_loading": True})
    if result is False:
        ...  # blocked by a guard or the call failed

Modules:
    models: Pydantic models and the option merger.
    pipeline: Registries, dispatcher, timing probe, task runner, default guards.
    platform: Host collaborators (cache, network status, loading, toast).
    transport: The httpx-backed transport call.
    config: XDG-aware configuration and precedence resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.1.0"

from reqguard.factory import create_runner  # noqa: E402
from reqguard.models import RequestOptions, merge_options  # noqa: E402
from reqguard.pipeline import TaskOutcome, TaskRunner  # noqa: E402

__all__ = [
    "RequestOptions",
    "TaskOutcome",
    "TaskRunner",
    "create_runner",
    "merge_options",
]
