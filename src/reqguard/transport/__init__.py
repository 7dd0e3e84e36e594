"""Transport calls for reqguard.

Provides :class:`HttpxTransport`, the default implementation of the
:class:`~reqguard.pipeline.runner.Transport` protocol. Any object with an
``async request(options)`` method can be passed to a
:class:`~reqguard.pipeline.runner.TaskRunner` instead.
"""

from reqguard.transport.httpx_transport import HttpxTransport, extract_response_data

__all__ = ["HttpxTransport", "extract_response_data"]
