"""
HTTP transport to the trace agent.

The transport starts on the ``v0.3`` API with the msgpack encoder. Agents
that do not know this API answer ``404``: the transport then switches, once
and for good, to the ``v0.2`` API with the JSON encoder and replays the
request that failed. A ``404`` on ``v0.2`` is returned to the caller as is.
"""
import threading
from typing import Any  # noqa:F401
from typing import Dict  # noqa:F401
from typing import NamedTuple
from typing import Optional  # noqa:F401
from typing import Union  # noqa:F401

from . import constants
from .encoding import EncoderKind
from .encoding import get_encoder
from .internal import compat
from .internal import http
from .internal.compat import httplib
from .internal.logger import get_logger
from .response import is_client_error
from .response import is_not_found
from .response import is_server_error
from .response import is_success
from .settings import _agent
from .version import __version__


log = get_logger(__name__)


class APIVersion(NamedTuple):
    version: str
    traces_endpoint: str
    services_endpoint: str
    encoder: EncoderKind
    fallback: Optional[str]

    def endpoint(self, kind):
        # type: (Any) -> Optional[str]
        if kind == constants.TRACES:
            return self.traces_endpoint
        if kind == constants.SERVICES:
            return self.services_endpoint
        return None


API = {
    constants.V3: APIVersion(
        version=constants.V3,
        traces_endpoint="/v0.3/traces",
        services_endpoint="/v0.3/services",
        encoder=EncoderKind.MSGPACK,
        fallback=constants.V2,
    ),
    constants.V2: APIVersion(
        version=constants.V2,
        traces_endpoint="/v0.2/traces",
        services_endpoint="/v0.2/services",
        encoder=EncoderKind.JSON,
        fallback=None,
    ),
}


class HTTPTransport(object):
    """
    Send traces and services to the trace agent using the HTTP protocol.

    Each call to :meth:`send` performs one synchronous request, plus the
    single replay that follows an API downgrade. Network failures are never
    raised: ``send`` returns ``None`` instead of a status code.

    :param hostname: agent hostname, defaults to ``DD_TRACE_AGENT_HOSTNAME``
    :param port: agent port, defaults to ``DD_TRACE_AGENT_PORT``
    :param encoder: encoder used until a downgrade happens, defaults to the
        encoder of the API version
    :param api_version: initial API version, defaults to ``DD_TRACE_API_VERSION``
    :param logger: logger receiving the transport messages
    :param poster: callable performing the request, with the signature of
        :func:`ddtransport.internal.http.post`
    :param timeout: request timeout in seconds, defaults to
        ``DD_TRACE_AGENT_TIMEOUT_SECONDS``
    """

    success = staticmethod(is_success)
    client_error = staticmethod(is_client_error)
    server_error = staticmethod(is_server_error)

    def __init__(
        self,
        hostname=None,  # type: Optional[str]
        port=None,  # type: Optional[Union[str, int]]
        encoder=None,  # type: Optional[Any]
        api_version=None,  # type: Optional[str]
        logger=None,  # type: Optional[Any]
        poster=None,  # type: Optional[http.Poster]
        timeout=None,  # type: Optional[float]
    ):
        # type: (...) -> None
        config = _agent.config
        self.hostname = hostname or config.trace_agent_hostname
        self.port = port if port is not None else config.trace_agent_port
        self.timeout = timeout if timeout is not None else config.trace_agent_timeout_seconds

        version = api_version or config.trace_api_version
        try:
            api = API[version]
        except KeyError:
            raise ValueError(
                "Unsupported api version: '%s'. The supported versions are: %s" % (version, ", ".join(sorted(API)))
            )

        self._log = logger or log
        self._poster = poster or http.post
        self._meta_headers = {
            constants.META_LANG_HEADER: "python",
            constants.META_LANG_VERSION_HEADER: compat.PYTHON_VERSION,
            constants.META_LANG_INTERPRETER_HEADER: compat.PYTHON_INTERPRETER,
            constants.META_TRACER_VERSION_HEADER: __version__,
        }

        # The API version, the encoder and the headers derived from it are
        # only ever swapped together, while holding this lock.
        self._lock = threading.Lock()
        self._api = api
        self._encoder = encoder or get_encoder(api.encoder)
        self._headers = self._build_headers(self._encoder)

        self._stats_lock = threading.Lock()
        self._stats = {
            "success": 0,
            "client_error": 0,
            "server_error": 0,
            "internal_error": 0,
            "consecutive_errors": 0,
        }

    def __repr__(self):
        return "{0}(hostname={1!r}, port={2!r}, api_version={3!r}, encoder={4!r})".format(
            self.__class__.__name__,
            self.hostname,
            self.port,
            self.api_version,
            self.encoder,
        )

    @property
    def encoder(self):
        """The encoder currently used to serialize payloads."""
        return self._encoder

    @property
    def headers(self):
        # type: () -> Dict[str, str]
        """A copy of the headers sent with every request."""
        return dict(self._headers)

    @property
    def api_version(self):
        # type: () -> str
        return self._api.version

    def _build_headers(self, encoder):
        # type: (Any) -> Dict[str, str]
        headers = dict(self._meta_headers)
        headers[constants.CONTENT_TYPE_HEADER] = encoder.content_type
        return headers

    def send(self, kind, payload):
        # type: (str, Any) -> Optional[int]
        """
        Encode ``payload`` and send it to the endpoint of ``kind``.

        :param kind: ``"traces"`` or ``"services"``, any other value is ignored
        :param payload: a list of traces or a services mapping
        :returns: the status code of the agent response, or ``None`` when the
            kind is not supported or no response was received
        :raises SerializationError: when the payload cannot be encoded
        """
        with self._lock:
            api, encoder, headers = self._api, self._encoder, self._headers

        endpoint = api.endpoint(kind)
        if endpoint is None:
            self._log.error("Unsupported endpoint: %s", kind)
            return None

        if kind == constants.TRACES:
            data = encoder.encode_traces(payload)
            headers = dict(headers)
            headers[constants.TRACE_COUNT_HEADER] = str(len(payload))
        else:
            data = encoder.encode_services(payload)

        status = self.post(endpoint, data, headers)

        if is_not_found(status) and self._downgrade(api):
            return self.send(kind, payload)
        return status

    def _downgrade(self, api):
        # type: (APIVersion) -> bool
        """
        Switch to the fallback of ``api``, the configuration a request that
        received a 404 was sent with.

        Returns whether the request should be sent again.
        """
        with self._lock:
            if self._api is not api:
                # Another caller already downgraded: replay under the new configuration
                return True
            if api.fallback is None:
                return False
            self._api = API[api.fallback]
            self._encoder = get_encoder(self._api.encoder)
            self._headers = self._build_headers(self._encoder)

        self._log.debug(
            "calling endpoint version '%s' but received 404; downgrading API to '%s'", api.version, api.fallback
        )
        return True

    def post(self, path, data, headers=None):
        # type: (str, bytes, Optional[Dict[str, str]]) -> Optional[int]
        """
        Send ``data`` to ``path`` with a single request.

        :returns: the status code of the response, ``None`` when the agent
            could not be reached (including an invalid address) or answered
            with something unreadable
        """
        if headers is None:
            headers = self.headers

        try:
            response = self._poster(self.hostname, self.port, path, data, headers, self.timeout)
        except (OSError, ValueError, httplib.HTTPException):
            # ValueError covers invalid ports and hostnames the idna codec rejects
            self._log.debug("failed to send payload to %s:%s%s", self.hostname, self.port, path, exc_info=True)
            response = None

        self.handle_response(response)

        try:
            return int(response.status)
        except (AttributeError, TypeError, ValueError):
            return None

    def handle_response(self, response):
        # type: (Any) -> None
        """
        Record and log the outcome of a request.

        This is called after every request attempt, including the ones that
        got no response at all, and never raises.
        """
        try:
            if response is None:
                self._record_error(
                    "internal_error", "unable to reach the trace agent at %s:%s", self.hostname, self.port
                )
                return

            status = int(response.status)
            if is_success(status):
                self._log.debug("Payload correctly sent to the trace agent.")
                with self._stats_lock:
                    self._stats["success"] += 1
                    self._stats["consecutive_errors"] = 0
            elif is_not_found(status) and self._api.fallback is not None:
                self._log.debug("calling the endpoint but received %s; downgrading the API", status)
            elif is_client_error(status):
                self._record_error("client_error", "Client error: %s %s", status, getattr(response, "reason", ""))
            elif is_server_error(status):
                self._record_error("server_error", "Server error: %s %s", status, getattr(response, "reason", ""))
        except Exception:
            self._log.debug("unable to handle the trace agent response %r", response, exc_info=True)
            self._record_error("internal_error", "unexpected response from the trace agent")

    def _record_error(self, counter, msg, *args):
        # type: (str, str, Any) -> None
        # Only the first error of a streak is logged as an error, the
        # following ones are logged at debug level until a success resets it.
        with self._stats_lock:
            first = self._stats["consecutive_errors"] == 0
            self._stats[counter] += 1
            self._stats["consecutive_errors"] += 1
        if first:
            self._log.error(msg, *args)
        else:
            self._log.debug(msg, *args)

    def stats(self):
        # type: () -> Dict[str, int]
        """Snapshot of the request counters."""
        with self._stats_lock:
            return dict(self._stats)
