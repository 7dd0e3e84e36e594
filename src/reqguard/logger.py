"""Logging sink for timing records.

:class:`RequestLogger` is the default sink of the
:class:`~reqguard.pipeline.timing.TimingProbe`: after every completed
transport call it writes one INFO line (``METHOD url -> status in N.Nms``)
to the ``reqguard.logger`` logger, the full record at DEBUG, and mirrors
the summary to the user-facing output at debug level.

:func:`configure_logging` sets up the standard library root handler for
the CLI.
"""

from __future__ import annotations

import logging
from typing import Optional

from reqguard.models import RequestOptions, TimingRecord
from reqguard.output import get_output

logger = logging.getLogger(__name__)


class RequestLogger:
    """Timing sink that logs each completed call.

    Args:
        log: Logger to write to. Defaults to this module's logger.
    """

    def __init__(self, log: Optional[logging.Logger] = None) -> None:
        self._log = log or logger

    def __call__(self, options: RequestOptions, record: TimingRecord) -> None:
        summary = f"{options.method} {options.url} -> {record.status_code} in {record.delta:.1f}ms"
        self._log.info("%s", summary)
        if self._log.isEnabledFor(logging.DEBUG):
            self._log.debug(
                "Timing record for %s: %s",
                options.url,
                record.model_dump(mode="json", exclude={"data"}, warnings=False),
            )
        get_output().debug(summary)


def configure_logging(verbose: bool = False) -> None:
    """Configure root logging for the command-line process.

    Args:
        verbose: Log at DEBUG instead of WARNING.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
