import mock
import pytest

from ddtransport.response import Response
from ddtransport.response import is_client_error
from ddtransport.response import is_not_found
from ddtransport.response import is_server_error
from ddtransport.response import is_success


@pytest.mark.parametrize(
    "status,success,client_error,server_error,not_found",
    [
        (200, True, False, False, False),
        (202, True, False, False, False),
        (299, True, False, False, False),
        (301, False, False, False, False),
        (400, False, True, False, False),
        (404, False, True, False, True),
        (415, False, True, False, False),
        (500, False, False, True, False),
        (503, False, False, True, False),
        (None, False, False, False, False),
    ],
)
def test_classification(status, success, client_error, server_error, not_found):
    assert is_success(status) is success
    assert is_client_error(status) is client_error
    assert is_server_error(status) is server_error
    assert is_not_found(status) is not_found


class ResponseMock:
    def __init__(self, content, status=200):
        self.content = content
        self.status = status
        self.reason = "OK"

    def read(self):
        return self.content


def test_from_http_response_reads_body_once():
    resp = mock.Mock(status=200, reason="OK", msg=None)
    resp.read.return_value = b"{}"

    response = Response.from_http_response(resp)

    resp.read.assert_called_once_with()
    assert response.status == 200
    assert response.body == b"{}"
    assert response.reason == "OK"


@pytest.mark.parametrize(
    "body,expected,log_message",
    [
        (b"OK", None, "Cannot parse trace agent response"),
        (b"OK\n", None, "Cannot parse trace agent response"),
        (b"", None, "Empty reply from trace agent"),
        (b"error:unsupported-endpoint", None, "Unable to parse trace agent JSON response"),
        (42, None, "Unable to parse trace agent JSON response"),
        (b"{}", {}, None),
        (b"[]", [], None),
        ('{"rate_by_service": {"service:,env:": 0.5}}', {"rate_by_service": {"service:,env:": 0.5}}, None),
        (b" [4,2,1] ", [4, 2, 1], None),
    ],
)
def test_get_json(body, expected, log_message):
    response = Response.from_http_response(ResponseMock(body))

    with mock.patch("ddtransport.response.log") as log:
        assert response.get_json() == expected

    if log_message is None:
        log.debug.assert_not_called()
    else:
        assert log.debug.call_count == 1
        assert log_message in log.debug.call_args[0][0]


def test_repr():
    response = Response(status=404, body=b"not found", reason="Not Found")
    assert repr(response) == "Response(status=404, body=b'not found', reason='Not Found', msg=None)"
