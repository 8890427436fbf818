from contextlib import contextmanager
import time
from typing import Callable  # noqa:F401
from typing import ContextManager  # noqa:F401
from typing import Dict  # noqa:F401
from typing import Generator  # noqa:F401
from typing import Optional  # noqa:F401
from typing import Union  # noqa:F401

from ..response import Response
from .compat import httplib
from .logger import get_logger


log = get_logger(__name__)


Poster = Callable[[str, Union[str, int], str, bytes, Dict[str, str], float], Response]


def connector(hostname, port, timeout):
    # type: (str, Union[str, int], float) -> Callable[[], ContextManager[httplib.HTTPConnection]]
    """Create a connector context manager for the given agent address.

    The connection is closed when the context exits, whatever happened
    inside it.

    Example::
        >>> connect = connector("localhost", 8126, 2.0)
        >>> with connect() as conn:
        ...     conn.request("POST", "/v0.3/traces", body, headers)
        ...     ...
    """
    port = int(port) if port is not None else None

    @contextmanager
    def _connector_context():
        # type: () -> Generator[httplib.HTTPConnection, None, None]
        connection = httplib.HTTPConnection(hostname, port, timeout=timeout)
        try:
            yield connection
        finally:
            connection.close()

    return _connector_context


def post(hostname, port, path, data, headers, timeout):
    # type: (str, Union[str, int], str, bytes, Dict[str, str], float) -> Response
    """
    Send ``data`` with a single ``POST`` request and return the agent response.

    Network errors (``OSError``, ``http.client.HTTPException``) are not
    handled here: they are raised to the caller.
    """
    started_at = time.monotonic()
    with connector(hostname, port, timeout)() as conn:
        conn.request("POST", path, data, headers)
        resp = Response.from_http_response(conn.getresponse())
    log.debug("sent %db in %.5fs to %s:%s%s", len(data), time.monotonic() - started_at, hostname, port, path)
    return resp
