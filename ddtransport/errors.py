class TransportError(Exception):
    """Base class for the errors raised by ``ddtransport``."""


class SerializationError(TransportError, ValueError):
    """
    Raised when a batch holds a value the target wire format cannot represent.

    This is a local failure: the payload never reached the agent. The error
    raised by the underlying serializer is available as ``__cause__``.
    """

    def __init__(self, content_type, reason):
        # type: (str, str) -> None
        super(SerializationError, self).__init__("unable to encode payload as %s: %s" % (content_type, reason))
        self.content_type = content_type
        self.reason = reason
