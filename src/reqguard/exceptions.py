"""Exception hierarchy for reqguard.

All exceptions inherit from :class:`ReqguardError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`reqguard.exit_codes`.
The top-level error handler in :func:`reqguard.app.main` catches
``ReqguardError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

The task runner itself never lets transport or hook failures escape:
they are collapsed into the ``False`` sentinel returned by
:meth:`~reqguard.pipeline.runner.TaskRunner.run_task`. The classes below
are what the collaborators raise *inside* the pipeline and what the
registries raise at registration time.

Subclass hierarchy::

    ReqguardError (exit 1)
    +-- InvalidUsageError     (exit 2)
    |   +-- RegistrationError (exit 2, also a TypeError)
    +-- RequestRejectedError  (exit 3)
    +-- TransportError        (exit 5)
    +-- ConnectionError_      (exit 6)
    +-- PluginError           (exit 10)
    +-- ConfigError           (exit 1)
"""

from reqguard.exit_codes import (
    EXIT_CONNECTION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_PLUGIN_ERROR,
    EXIT_REQUEST_REJECTED,
    EXIT_TRANSPORT_ERROR,
)


class ReqguardError(Exception):
    """Base exception for all reqguard errors.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(ReqguardError):
    """Raised for invalid CLI arguments or malformed option values."""

    exit_code = EXIT_INVALID_USAGE


class RegistrationError(InvalidUsageError, TypeError):
    """Raised when a non-callable value is registered as a guard or after-hook.

    Subclasses :class:`TypeError` so callers can treat it as the type
    mismatch it is.
    """


class RequestRejectedError(ReqguardError):
    """Raised by the CLI when a pre-flight guard blocked the call."""

    exit_code = EXIT_REQUEST_REJECTED


class TransportError(ReqguardError):
    """Raised when the transport cannot build or complete a request."""

    exit_code = EXIT_TRANSPORT_ERROR


class ConnectionError_(ReqguardError):
    """Raised on network-level failures (timeout, DNS resolution, connection refused).

    Named with a trailing underscore to avoid shadowing the built-in
    ``ConnectionError``.
    """

    exit_code = EXIT_CONNECTION_ERROR


class PluginError(ReqguardError):
    """Raised when a plugin fails to load or is registered twice."""

    exit_code = EXIT_PLUGIN_ERROR


class ConfigError(ReqguardError):
    """Raised for configuration problems (invalid JSON, failed validation)."""

    exit_code = EXIT_GENERIC_FAILURE
