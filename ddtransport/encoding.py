"""
Wire encoders for the payloads sent to the trace agent.

Two encoders are available, selected by :class:`EncoderKind`:

- :class:`MsgpackEncoder`, the compact binary format used by the ``v0.3`` API
- :class:`JSONEncoder`, the text format used by the legacy ``v0.2`` API

Both accept a list of traces (each trace being a list of spans) or a
services mapping, and return ``bytes``. A value that cannot be represented
in the target format raises :class:`ddtransport.errors.SerializationError`:

- JSON is strict: ``NaN`` and infinities are rejected, as is any object the
  ``json`` module cannot serialize.
- msgpack rejects objects it cannot serialize and integers that do not fit in
  64 bits. ``NaN`` and infinities are valid msgpack floats.

A span that is neither a mapping nor an object with ``to_dict`` raises
:class:`ddtransport.errors.SerializationError` in both formats.
"""
import enum
import json
from typing import Any  # noqa:F401
from typing import Dict  # noqa:F401
from typing import List  # noqa:F401
from typing import Mapping

import msgpack

from .constants import JSON_CONTENT_TYPE
from .constants import MSGPACK_CONTENT_TYPE
from .errors import SerializationError
from .internal.compat import ensure_text


__all__ = ["EncoderKind", "JSONEncoder", "MsgpackEncoder", "get_encoder"]


class EncoderKind(enum.Enum):
    MSGPACK = "msgpack"
    JSON = "json"


class _EncoderBase(object):
    """
    Encoder interface that provides the logic to encode traces and service.
    """

    content_type = None  # type: str
    kind = None  # type: EncoderKind

    def encode_traces(self, traces):
        # type: (List[List[Any]]) -> bytes
        """
        Encodes a list of traces, expecting a list of items where each items
        is a list of spans. Before dumping the string in a serialized format all
        traces are normalized according to the encoding format. The trace
        nesting is not changed.

        :param traces: A list of traces that should be serialized
        """
        try:
            normalized_traces = [
                [self._normalize_span(self._span_to_dict(span)) for span in trace] for trace in traces
            ]
        except (AttributeError, TypeError) as e:
            raise SerializationError(self.content_type, "invalid span: %s" % e) from e
        return self.encode(normalized_traces)

    def encode_services(self, services):
        # type: (Any) -> bytes
        """
        Encodes a services payload. Services are metadata mappings and are
        serialized as they are.

        :param services: The services mapping that should be serialized
        """
        return self.encode(services)

    def encode(self, obj):
        # type: (Any) -> bytes
        """
        Defines the underlying format used during traces or services encoding.
        This method must be implemented and should only be used by the internal
        functions.
        """
        raise NotImplementedError()

    @staticmethod
    def _span_to_dict(span):
        # type: (Any) -> Dict[str, Any]
        if isinstance(span, Mapping):
            d = dict(span)
        else:
            d = span.to_dict()

        # a common mistake is to set the error field to a boolean instead of an
        # int. let's special case that here, because it's sure to happen in
        # customer code.
        err = d.get("error")
        if err and type(err) == bool:
            d["error"] = 1
        return d

    @staticmethod
    def _normalize_span(span):
        # type: (Dict[str, Any]) -> Dict[str, Any]
        return span

    def __repr__(self):
        return "{0}(content_type={1!r})".format(self.__class__.__name__, self.content_type)


class JSONEncoder(_EncoderBase):
    content_type = JSON_CONTENT_TYPE
    kind = EncoderKind.JSON

    def encode(self, obj):
        try:
            return json.dumps(obj, allow_nan=False, separators=(",", ":")).encode("utf-8")
        except (TypeError, ValueError, OverflowError) as e:
            raise SerializationError(self.content_type, str(e)) from e

    @staticmethod
    def _normalize_span(span):
        # Ensure all string attributes are actually strings and not bytes
        # DEV: We are deferring meta/metrics to reduce any performance issues.
        #      Meta/metrics may still contain `bytes` and have encoding issues.
        for key in ("resource", "name", "service", "type"):
            if key in span:
                span[key] = JSONEncoder._normalize_str(span[key])
        return span

    @staticmethod
    def _normalize_str(obj):
        if isinstance(obj, bytes):
            return ensure_text(obj, errors="backslashreplace")
        return obj


class MsgpackEncoder(_EncoderBase):
    content_type = MSGPACK_CONTENT_TYPE
    kind = EncoderKind.MSGPACK

    def encode(self, obj):
        try:
            return msgpack.packb(obj, use_bin_type=True, use_single_float=False)
        except (TypeError, ValueError, OverflowError) as e:
            raise SerializationError(self.content_type, str(e)) from e


_ENCODERS = {
    EncoderKind.MSGPACK: MsgpackEncoder,
    EncoderKind.JSON: JSONEncoder,
}


def get_encoder(kind=EncoderKind.MSGPACK):
    # type: (EncoderKind) -> _EncoderBase
    """Return a new encoder for the given wire format."""
    try:
        return _ENCODERS[EncoderKind(kind)]()
    except (KeyError, ValueError):
        raise ValueError(
            "Unsupported encoder: %r. The supported encoders are: %s"
            % (kind, ", ".join(sorted(k.value for k in _ENCODERS)))
        )
