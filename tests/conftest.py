"""
Local pytest plugin: hypothesis profile and a fake trace agent listening on
an ephemeral port.
"""
import http.server
import threading

import hypothesis
import pytest


# Disable the "too slow" health checks. We are ok if data generation is slow
# https://hypothesis.readthedocs.io/en/latest/healthchecks.html#hypothesis.HealthCheck.too_slow
hypothesis.settings.register_profile("default", suppress_health_check=(hypothesis.HealthCheck.too_slow,))
hypothesis.settings.load_profile("default")

_HOST = "127.0.0.1"


class _AgentRequestHandler(http.server.BaseHTTPRequestHandler):
    error_message_format = "%(message)s\n"
    error_content_type = "text/plain"

    # Set by the ``agent`` fixture
    requests = None
    respond = None

    @staticmethod
    def log_message(format, *args):  # noqa: A002
        pass

    def do_POST(self):
        body = self.rfile.read(int(self.headers.get("Content-Length", 0)))
        self.requests.append(dict(path=self.path, headers=dict(self.headers), body=body))
        status = self.respond(self.path)
        payload = b'{"rate_by_service": {}}' if status == 200 else b"error"
        self.send_response(status)
        self.send_header("Content-Length", str(len(payload)))
        self.end_headers()
        self.wfile.write(payload)


class FakeAgent(object):
    def __init__(self, server):
        self.server = server
        self.hostname, self.port = server.server_address[:2]
        self.requests = server.RequestHandlerClass.requests

    def respond_with(self, respond):
        self.server.RequestHandlerClass.respond = staticmethod(respond)

    @property
    def paths(self):
        return [r["path"] for r in self.requests]


@pytest.fixture
def agent():
    handler = type(
        "AgentRequestHandler",
        (_AgentRequestHandler,),
        {"requests": [], "respond": staticmethod(lambda path: 200)},
    )
    server = http.server.HTTPServer((_HOST, 0), handler)
    thread = threading.Thread(target=server.serve_forever)
    # Set daemon just in case something fails
    thread.daemon = True
    thread.start()
    try:
        yield FakeAgent(server)
    finally:
        server.shutdown()
        server.server_close()
        thread.join()


@pytest.fixture
def closed_port():
    """A local port nothing listens on."""
    server = http.server.HTTPServer((_HOST, 0), _AgentRequestHandler)
    port = server.server_address[1]
    server.server_close()
    return port
