"""
Loggers for the transport.

Every logger returned by :func:`get_logger` drops repeated records coming
from the same call site: at most one record per ``(pathname, lineno)`` is
emitted every ``DD_TRACE_LOGGING_RATE`` seconds (60 by default, ``0``
disables the limit). The next emitted record carries the number of records
dropped in between, which :class:`DDFormatter` renders::

    ERROR unable to reach the trace agent at localhost:8126 [12 skipped]

Loggers set to ``DEBUG`` are never limited.
"""
import collections
import logging
import os
import time
from typing import DefaultDict
from typing import Tuple


def get_logger(name: str) -> logging.Logger:
    """Return the logger ``name`` with the call-site rate limit installed."""
    logger = logging.getLogger(name)
    # addFilter ignores filters already installed
    logger.addFilter(log_filter)
    logger.propagate = True
    return logger


class LoggingBucket:
    """Time window of one call site and the records dropped during it."""

    def __init__(self, bucket: float, skipped: int):
        self.bucket = bucket
        self.skipped = skipped

    def __repr__(self):
        return f"LoggingBucket({self.bucket}, {self.skipped})"

    def is_sampled(self, record: logging.LogRecord, rate: float) -> bool:
        now = time.monotonic()
        if now - self.bucket < rate:
            self.skipped += 1
            return False
        self.bucket = now
        record.skipped = self.skipped
        self.skipped = 0
        return True


_buckets: DefaultDict[Tuple[str, int], LoggingBucket] = collections.defaultdict(
    lambda: LoggingBucket(float("-inf"), 0)
)

_rate_limit = int(os.getenv("DD_TRACE_LOGGING_RATE", default=60))


def log_filter(record: logging.LogRecord) -> bool:
    """Logging filter: ``True`` emits the record, ``False`` drops it."""
    if not _rate_limit or logging.getLogger(record.name).getEffectiveLevel() == logging.DEBUG:
        return True
    return _buckets[(record.pathname, record.lineno)].is_sampled(record, _rate_limit)


class DDFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        message = f"{record.levelname} {super().format(record)}"
        skipped = getattr(record, "skipped", 0)
        if skipped:
            message += f" [{skipped} skipped]"
        return message


# records of every ddtransport logger end up in this handler unless the
# application configured its own
root_logger = logging.getLogger("ddtransport")
if not root_logger.handlers:
    root_logger.addHandler(logging.StreamHandler())
    root_logger.handlers[0].setFormatter(DDFormatter())
root_logger.propagate = True
