"""httpx-backed transport call.

:class:`HttpxTransport` turns one :class:`~reqguard.models.RequestOptions`
into one HTTP request through :class:`httpx.AsyncClient` and resolves to a
:class:`~reqguard.models.TransportResponse`.

Like a platform request API, the call resolves for *any* HTTP status: a
404 or a 500 is a response, not an error, and after-hooks decide what to
do with it. Only network-level failures (connection refused, DNS, timeout)
raise, as :class:`~reqguard.exceptions.ConnectionError_`. There is no
retry.

Option mapping:

* ``url`` -- joined onto ``base_url`` unless it is absolute.
* ``method`` -- upper-cased HTTP method.
* ``header`` -- request headers.
* ``data`` -- query parameters for GET/HEAD/DELETE; a JSON body when it is
  a mapping or list; raw content otherwise.
* ``delay`` -- milliseconds awaited before the request is sent.
* ``timeout`` -- per-call override of the configured timeout, in seconds.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from typing import Any, Optional

import httpx

from reqguard.exceptions import ConnectionError_, TransportError
from reqguard.models import RequestConfig, RequestOptions, TransportResponse

logger = logging.getLogger(__name__)

_QUERY_METHODS = frozenset({"GET", "HEAD", "DELETE"})


class HttpxTransport:
    """Transport that performs calls with :class:`httpx.AsyncClient`.

    A fresh client is opened per call, so one transport can serve
    concurrent calls without sharing connection state.

    Args:
        base_url: Prefix for relative ``url`` options.
        config: Default timeout and SSL verification.
        transport: Optional httpx transport (e.g. :class:`httpx.MockTransport`
            in tests).
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        config: Optional[RequestConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._base_url = base_url or ""
        self._config = config or RequestConfig()
        self._transport = transport

    async def request(self, options: RequestOptions) -> TransportResponse:
        """Send the request described by *options*.

        Raises:
            TransportError: If *options* has no ``url``.
            ConnectionError_: On network / timeout errors.
        """
        if not options.url:
            raise TransportError("Request options have no 'url'")

        method = str(options.method or "GET").upper()
        kwargs = self._build_kwargs(method, options)

        if options.delay:
            await asyncio.sleep(float(options.delay) / 1000.0)

        timeout = options.timeout if options.timeout is not None else self._config.timeout
        logger.debug("Sending %s %s", method, options.url)
        try:
            async with httpx.AsyncClient(
                base_url=self._base_url,
                timeout=timeout,
                verify=self._config.verify_ssl,
                follow_redirects=True,
                transport=self._transport,
            ) as client:
                response = await client.request(method, options.url, **kwargs)
        except (httpx.ConnectError, httpx.TimeoutException, httpx.NetworkError) as exc:
            raise ConnectionError_(f"{method} {options.url} failed: {exc}") from exc

        return TransportResponse(
            status_code=response.status_code,
            headers=dict(response.headers),
            data=extract_response_data(response),
        )

    def _build_kwargs(self, method: str, options: RequestOptions) -> dict[str, Any]:
        kwargs: dict[str, Any] = {"headers": dict(options.header or {})}
        data = options.data
        if data is None:
            return kwargs
        if method in _QUERY_METHODS:
            if not isinstance(data, Mapping):
                raise TransportError(f"{method} data must be a mapping of query parameters")
            kwargs["params"] = dict(data)
        elif isinstance(data, (Mapping, list)):
            kwargs["json"] = data
        elif isinstance(data, bytes):
            kwargs["content"] = data
        else:
            kwargs["content"] = str(data)
        return kwargs


def extract_response_data(response: httpx.Response) -> Any:
    """Extract the body from an HTTP response.

    Attempts to parse the body as JSON first. If that fails (e.g. the
    response is HTML or plain text), returns the raw text. Returns
    ``None`` for responses with no content.
    """
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text
