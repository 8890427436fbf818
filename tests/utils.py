import contextlib
import os

from ddtransport.response import Response
from ddtransport.span import Span


@contextlib.contextmanager
def override_env(env, replace_os_env=False):
    """
    Temporarily override ``os.environ`` with provided values::

        >>> with override_env(dict(DD_TRACE_AGENT_PORT="9126")):
            # Your test
    """
    # Copy the full original environment
    original = dict(os.environ)

    # We allow callers to clear out the environment to prevent leaking variables into the test
    if replace_os_env:
        os.environ.clear()

    # Update based on the passed in arguments
    os.environ.update(env)
    try:
        yield
    finally:
        # Full clear the environment out and reset back to the original
        os.environ.clear()
        os.environ.update(original)


def get_test_traces(n):
    """Return ``n`` traces of two spans each, the second one child of the first."""
    traces = []
    for i in range(n):
        root = Span(name="client.testing", service="test-service", resource="GET /users", span_type="web")
        child = Span(
            name="client.testing.child",
            service="test-service",
            trace_id=root.trace_id,
            parent_id=root.span_id,
        )
        child.set_tag("http.url", "/users/%d" % i)
        child.finish()
        root.finish()
        traces.append([root, child])
    return traces


def get_test_services():
    return {
        "client.service": {"app": "django", "app_type": "web"},
        "client.db": {"app": "postgres", "app_type": "db"},
    }


class DummyPoster(object):
    """
    Poster recording every request, answering with the status returned by
    ``respond(path)``.
    """

    def __init__(self, respond=None):
        self.requests = []
        self._respond = respond or (lambda path: 200)

    def __call__(self, hostname, port, path, data, headers, timeout):
        self.requests.append(dict(hostname=hostname, port=port, path=path, data=data, headers=headers, timeout=timeout))
        status = self._respond(path)
        if isinstance(status, BaseException):
            raise status
        return Response(status=status, body=b"OK", reason="reason %d" % status)

    @property
    def paths(self):
        return [r["path"] for r in self.requests]

    @property
    def content_types(self):
        return [r["headers"]["Content-Type"] for r in self.requests]


def legacy_only(path):
    """Agent that only knows the v0.2 API."""
    return 200 if path.startswith("/v0.2") else 404
