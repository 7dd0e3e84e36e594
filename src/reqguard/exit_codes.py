"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~reqguard.exceptions.ReqguardError` subclass and by
the ``reqguard call`` command when a task does not produce a result.

Example::

    $ reqguard call /users
    $ echo $?
    3   # EXIT_REQUEST_REJECTED -- a guard blocked the call
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or a guard/hook was not callable."""

EXIT_REQUEST_REJECTED = 3
"""A pre-flight guard rejected the call (missing token, no network, ...)."""

EXIT_TRANSPORT_ERROR = 5
"""The transport call or an after-hook failed."""

EXIT_CONNECTION_ERROR = 6
"""A network-level error occurred (timeout, DNS failure, connection refused)."""

EXIT_PLUGIN_ERROR = 10
"""A plugin failed to load or contribute its guards and hooks."""
