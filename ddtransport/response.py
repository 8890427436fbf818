"""
Classification of the responses received from the trace agent.

The predicates below are pure functions of an HTTP status code. ``None``
stands for "no response" (connection refused, timeout, DNS failure): it is
never a success, a client error or a server error, so callers can tell an
unreachable agent from an agent answering with an error status.
"""
from json import loads
from typing import Any  # noqa:F401
from typing import Optional  # noqa:F401

from .internal.logger import get_logger


log = get_logger(__name__)


def is_success(status):
    # type: (Optional[int]) -> bool
    return status is not None and 200 <= status < 300


def is_client_error(status):
    # type: (Optional[int]) -> bool
    return status is not None and 400 <= status < 500


def is_server_error(status):
    # type: (Optional[int]) -> bool
    return status is not None and 500 <= status < 600


def is_not_found(status):
    # type: (Optional[int]) -> bool
    return status == 404


class Response(object):
    """
    Custom API Response object to represent a response from calling the API.

    We do this to ensure we know expected properties will exist, and so we
    can call `resp.read()` and load the body once into an instance before we
    close the HTTPConnection used for the request.
    """

    __slots__ = ["status", "body", "reason", "msg"]

    def __init__(self, status=None, body=None, reason=None, msg=None):
        self.status = status
        self.body = body
        self.reason = reason
        self.msg = msg

    @classmethod
    def from_http_response(cls, resp):
        """
        Build a ``Response`` from the provided ``HTTPResponse`` object.

        This function will call `.read()` to consume the body of the ``HTTPResponse`` object.

        :param resp: ``HTTPResponse`` object to build the ``Response`` from
        :type resp: ``HTTPResponse``
        :rtype: ``Response``
        :returns: A new ``Response``
        """
        return cls(
            status=resp.status,
            body=resp.read(),
            reason=getattr(resp, "reason", None),
            msg=getattr(resp, "msg", None),
        )

    def get_json(self):
        # type: () -> Any
        """Helper to parse the body of this request as JSON"""
        try:
            body = self.body
            if not body:
                log.debug("Empty reply from trace agent, %r", self)
                return

            if not isinstance(body, str) and hasattr(body, "decode"):
                body = body.decode("utf-8")

            if hasattr(body, "startswith") and body.startswith("OK"):
                # Older agents acknowledge payloads with a bare "OK" instead
                # of a JSON document.
                log.debug("Cannot parse trace agent response, please make sure your trace agent is up to date")
                return

            return loads(body)
        except (ValueError, TypeError):
            log.debug("Unable to parse trace agent JSON response: %r", body, exc_info=True)

    def __repr__(self):
        return "{0}(status={1!r}, body={2!r}, reason={3!r}, msg={4!r})".format(
            self.__class__.__name__,
            self.status,
            self.body,
            self.reason,
            self.msg,
        )
