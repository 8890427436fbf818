import random
import time
from typing import Any  # noqa:F401
from typing import Dict  # noqa:F401
from typing import Optional  # noqa:F401
from typing import Text  # noqa:F401
from typing import Union  # noqa:F401

from .internal.compat import NumericType
from .internal.compat import is_integer
from .internal.logger import get_logger


log = get_logger(__name__)


def _rand64bits():
    # type: () -> int
    return random.getrandbits(64)


class Span(object):
    """
    Plain span record as submitted to the agent.

    The transport does not build traces: this carrier only holds what the
    encoders serialize. Tags are stored as text in ``meta`` and numeric
    values as floats in ``metrics``.
    """

    __slots__ = [
        "name",
        "service",
        "resource",
        "span_type",
        "trace_id",
        "span_id",
        "parent_id",
        "start_ns",
        "duration_ns",
        "error",
        "_meta",
        "_metrics",
    ]

    def __init__(
        self,
        name,  # type: str
        service=None,  # type: Optional[str]
        resource=None,  # type: Optional[str]
        span_type=None,  # type: Optional[str]
        trace_id=None,  # type: Optional[int]
        span_id=None,  # type: Optional[int]
        parent_id=None,  # type: Optional[int]
        start=None,  # type: Optional[float]
    ):
        # type: (...) -> None
        self.name = name
        self.service = service
        self.resource = resource or name
        self.span_type = span_type
        self.trace_id = trace_id or _rand64bits()
        self.span_id = span_id or _rand64bits()
        self.parent_id = parent_id
        self.start_ns = int((start if start is not None else time.time()) * 1e9)
        self.duration_ns = None  # type: Optional[int]
        self.error = 0
        self._meta = {}  # type: Dict[str, str]
        self._metrics = {}  # type: Dict[str, float]

    @property
    def finished(self):
        # type: () -> bool
        return self.duration_ns is not None

    def finish(self, finish_time=None):
        # type: (Optional[float]) -> None
        """Mark the end time of the span. Calling ``finish`` twice keeps the first duration."""
        if self.duration_ns is not None:
            return
        ft = finish_time if finish_time is not None else time.time()
        self.duration_ns = max(int(ft * 1e9) - self.start_ns, 0)

    def set_tag(self, key, value=None):
        # type: (Text, Any) -> None
        """Set a tag on the span. Numeric values are stored as metrics."""
        if is_integer(value) or isinstance(value, float):
            self.set_metric(key, value)
            return
        try:
            self._meta[key] = str(value)
        except Exception:
            log.warning("error setting tag %s, ignoring it", key, exc_info=True)
            return
        self._metrics.pop(key, None)

    def get_tag(self, key):
        # type: (Text) -> Optional[Text]
        return self._meta.get(key)

    def set_metric(self, key, value):
        # type: (Text, NumericType) -> None
        try:
            value = float(value)
        except (ValueError, TypeError):
            log.debug("ignoring not number metric %s:%s", key, value)
            return
        self._meta.pop(key, None)
        self._metrics[key] = value

    def get_metric(self, key):
        # type: (Text) -> Optional[NumericType]
        return self._metrics.get(key)

    def to_dict(self):
        # type: () -> Dict[str, Any]
        d = {
            "trace_id": self.trace_id,
            "span_id": self.span_id,
            "resource": self.resource,
            "name": self.name,
            "error": self.error,
        }

        if self.parent_id is not None:
            d["parent_id"] = self.parent_id

        if self.service is not None:
            d["service"] = self.service

        if self.start_ns:
            d["start"] = self.start_ns

        if self.duration_ns:
            d["duration"] = self.duration_ns

        if self._meta:
            d["meta"] = self._meta

        if self._metrics:
            d["metrics"] = self._metrics

        if self.span_type:
            d["type"] = self.span_type

        return d

    def __repr__(self):
        return "<Span(id=%s,trace_id=%s,parent_id=%s,name=%s)>" % (
            self.span_id,
            self.trace_id,
            self.parent_id,
            self.name,
        )
