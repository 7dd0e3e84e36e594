"""Latency probe wrapped around the transport call.

:meth:`TimingProbe.start` is called immediately before the transport and
returns a *stop* callable that is invoked immediately after it with the
response. The stop callable computes the elapsed milliseconds, builds a
:class:`~reqguard.models.TimingRecord` from the response fields plus
``delta`` and hands it, together with the effective options, to the
logging sink.
"""

from __future__ import annotations

import time
from collections.abc import Callable, Mapping
from typing import Any, Union

from reqguard.models import RequestOptions, TimingRecord, TransportResponse

Sink = Callable[[RequestOptions, TimingRecord], None]
Clock = Callable[[], float]


def monotonic_ms() -> float:
    """Monotonic clock reading in milliseconds."""
    return time.monotonic() * 1000.0


def _response_fields(response: Union[TransportResponse, Mapping[str, Any], Any]) -> dict[str, Any]:
    if isinstance(response, TransportResponse):
        return response.model_dump()
    if isinstance(response, Mapping):
        return {str(key): value for key, value in response.items()}
    return {"data": getattr(response, "data", None)}


class TimingProbe:
    """Measures transport latency and forwards a timing record to a sink.

    Args:
        sink: Called once per completed call with the options and the
            :class:`~reqguard.models.TimingRecord`.
        clock: Millisecond clock. Defaults to :func:`monotonic_ms`; tests
            inject a fake to control ``delta`` exactly.
    """

    def __init__(self, sink: Sink, clock: Clock = monotonic_ms) -> None:
        self._sink = sink
        self._clock = clock

    def start(self, options: RequestOptions) -> Callable[[Any], TimingRecord]:
        """Capture the start time and return the matching stop callable."""
        started = self._clock()

        def stop(response: Any) -> TimingRecord:
            delta = max(self._clock() - started, 0.0)
            record = TimingRecord.model_construct(**{**_response_fields(response), "delta": delta})
            self._sink(options, record)
            return record

        return stop
