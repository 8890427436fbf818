from .encoding import EncoderKind
from .encoding import JSONEncoder
from .encoding import MsgpackEncoder
from .encoding import get_encoder
from .errors import SerializationError
from .errors import TransportError
from .span import Span
from .transport import HTTPTransport
from .version import __version__


__all__ = [
    "EncoderKind",
    "HTTPTransport",
    "JSONEncoder",
    "MsgpackEncoder",
    "SerializationError",
    "Span",
    "TransportError",
    "__version__",
    "get_encoder",
]
